"""code-clarity: file dependency graphs and circular-import detection."""

__version__ = "0.1.0"
