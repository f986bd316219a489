"""Live transcript of an interactive kernel session."""

__version__ = "0.1.0"
