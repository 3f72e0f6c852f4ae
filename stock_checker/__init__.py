"""Stock price checker with per-visitor likes."""
__version__ = "1.0.0"
