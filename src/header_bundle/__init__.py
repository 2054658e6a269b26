"""Single-header bundle generator for the YAX86 C library modules."""

__version__ = "0.1.0"
