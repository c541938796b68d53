"""Square Terminal: manual card payments and payment links over Square."""

__version__ = "0.3.0"
