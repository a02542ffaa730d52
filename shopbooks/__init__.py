"""shopbooks: reporting and POS checkout core for a small-business books app."""

__version__ = "0.1.0"
