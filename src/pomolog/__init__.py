"""pomolog - a focus timer with an append-only session journal."""

__version__ = "0.1.0"
