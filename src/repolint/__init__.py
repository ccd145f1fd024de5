"""repolint - audit GitHub repositories against declarative consistency rules."""

__version__ = "0.3.0"
