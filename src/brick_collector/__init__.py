"""Local LEGO set collection manager backed by the Rebrickable API."""

__version__ = "0.1.0"
