"""External service integrations for the Courtside platform."""

from .paypal_client import PayPalClient, PayPalError

__all__ = ["PayPalClient", "PayPalError"]
