"""servicepay: utility service accounts and monthly bill ledgers."""

__version__ = "0.1.0"
