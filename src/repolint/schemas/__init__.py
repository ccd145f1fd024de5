"""Package-data JSON schemas for rule options and configuration files."""
