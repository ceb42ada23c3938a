from __future__ import annotations


class EmptyInputError(ValueError):
    """Raised when a text has no A-Z letters but a profile or score is required."""


class InvalidKeyError(ValueError):
    """Raised when key material is not a one-to-one mapping of the alphabet."""
