"""mediacat: an in-memory multimedia catalog served over a line protocol."""

__version__ = "0.1.0"
