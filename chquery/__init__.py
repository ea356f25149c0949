"""SQL templating, escaping, watch statements, ticks and value conversions for ClickHouse."""

__version__ = "0.13.3"
__all__ = ["builder", "conversions", "escape", "serialize", "ticks", "watch"]