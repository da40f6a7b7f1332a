"""Turn cooking videos into structured recipes."""

__version__ = "0.1.0"
