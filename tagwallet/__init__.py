"""NFC tag wallet backends: auth/cards API and rewards API."""

__version__ = "0.1.0"
