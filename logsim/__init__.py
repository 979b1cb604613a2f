"""logsim — synthetic application/access log simulator."""

__version__ = "1.0.0"
