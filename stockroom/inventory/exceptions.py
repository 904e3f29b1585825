"""
Inventory errors.

Anything raised from here carries a message that is safe to show to the
user as-is.
"""


class InventoryError(Exception):
    """A rejected inventory operation."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class SerialNumberError(InventoryError, ValueError):
    """Malformed serial-number input."""


class TagInUseError(InventoryError):
    """A tag still has devices or child tags attached."""


class DuplicateSerialNumberError(InventoryError):
    """Serial number already registered under the same secondary tag."""
