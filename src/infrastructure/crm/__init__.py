"""
GoHighLevel CRM integration: contact lookup and file upload.
"""

from .client import CrmClientError, LeadConnectorClient

__all__ = ["CrmClientError", "LeadConnectorClient"]
