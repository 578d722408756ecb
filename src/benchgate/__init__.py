"""benchgate — gate code changes on benchmark regressions."""

__version__ = "0.1.0"
