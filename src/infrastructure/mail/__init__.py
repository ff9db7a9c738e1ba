"""
Email delivery integration (SendGrid).
"""

from .client import EmailDeliveryError, SendGridEmailClient

__all__ = ["EmailDeliveryError", "SendGridEmailClient"]
