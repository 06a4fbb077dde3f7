"""Console tools for mail, a quota-limited virtual disk and log file writing."""

__version__ = "0.1.0"