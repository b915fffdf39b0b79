"""UptimeBoard - monitor state, check history and status notifications."""
__version__ = "1.0.0"
