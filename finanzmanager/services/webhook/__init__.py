"""Webhook delivery service."""

from finanzmanager.services.webhook.discord_service import (
    DeliveryOutcome,
    DispatchResult,
    Transport,
    WebhookDeliveryError,
    WebhookDispatcher,
    WebhookError,
    is_valid_target,
    urllib_transport,
)

__all__ = [
    "DeliveryOutcome",
    "DispatchResult",
    "Transport",
    "WebhookDeliveryError",
    "WebhookDispatcher",
    "WebhookError",
    "is_valid_target",
    "urllib_transport",
]
