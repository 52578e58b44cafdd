"""Transactional email client."""

from recipes_api.clients.email.client import EmailClient
from recipes_api.clients.email.exceptions import EmailDeliveryError, EmailError


__all__ = ["EmailClient", "EmailDeliveryError", "EmailError"]
