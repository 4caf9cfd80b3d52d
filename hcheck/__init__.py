"""hcheck: one-shot HTTP health check probe."""

__version__ = "0.1.0"
