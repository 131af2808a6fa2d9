"""Exceptions raised at the collaborator boundaries."""

from typing import Optional


class RelayError(Exception):
    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class RemoteCatalogError(RelayError):
    """Storefront API timed out, answered non-2xx, or sent a malformed payload."""


class OutboundMessageError(RelayError):
    """WhatsApp Cloud API rejected or never received an outbound message."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[dict] = None):
        self.status_code = status_code
        super().__init__(message, details)


class ReplyGenerationError(RelayError):
    """The external text-generation collaborator failed."""
