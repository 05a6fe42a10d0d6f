"""Package converted documents into EPUB3 and Kindle archives."""

__version__ = "0.1.0"
