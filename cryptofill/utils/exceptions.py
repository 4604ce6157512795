"""
Custom exceptions for the fulfillment engine

This module defines a hierarchy of exceptions used throughout the service
to handle various error conditions in a structured and meaningful way.

Running out of liquidity is not an exception: an order nobody can fill
produces a normal Transaction with zero fills.
"""


class BaseFulfillmentException(Exception):
    """Base exception class for all fulfillment exceptions."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidOrderSideException(BaseFulfillmentException):
    """Raised when an incoming order is neither a buy nor a sell."""
    pass


class InvalidOrderException(BaseFulfillmentException):
    """Raised when an order contains invalid parameters or fails validation."""
    pass


class ValidationException(BaseFulfillmentException):
    """Raised when input validation fails."""
    pass


class InvalidQuantityException(ValidationException):
    """Raised when quantity is invalid (negative, zero, or exceeds limits)."""
    pass


class PriceOutOfBoundsException(ValidationException):
    """Raised when a price is outside acceptable bounds."""
    pass


class ExchangeDataException(BaseFulfillmentException):
    """Raised when an exchange snapshot cannot be read or parsed."""
    pass


class ExchangeNotFoundException(BaseFulfillmentException):
    """Raised when an exchange identifier is not known to the registry."""
    pass
