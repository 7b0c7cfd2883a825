"""
Webhook Dispatcher

Posts the chat report for a profile to up to two webhook URLs.

DESIGN DECISION: Delivery is "best effort, any success wins":
1. The payload is built once and posted to every valid URL concurrently
2. Empty URLs and URLs not starting with "http" are skipped, not failed
3. Every target gets exactly one POST - no retries
4. A target fails on any exception or a non-2xx status; that never
   aborts the other deliveries
5. The report counts as sent if at least one target accepted it.
   Nothing attempted means nothing sent.

The HTTP call itself is a blocking urllib request run in a worker thread,
so several deliveries can be awaited together on the event loop.
"""

import asyncio
import json
import urllib.error
import urllib.request
from datetime import datetime
from typing import Any, Callable, Iterable, Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, Field

from finanzmanager.audit import AuditLogger, create_correlation_id
from finanzmanager.config import WebhookSettings, get_settings
from finanzmanager.exports.discord_embed import build_embed_payload
from finanzmanager.models.ledger import Profile


logger = structlog.get_logger(__name__)

# (url, body, headers, timeout) -> HTTP status code
Transport = Callable[[str, bytes, dict[str, str], float], int]


class WebhookError(Exception):
    """Base exception for webhook errors."""
    pass


class WebhookDeliveryError(WebhookError):
    """A webhook answered with a non-success status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)


def urllib_transport(url: str, body: bytes, headers: dict[str, str], timeout: float) -> int:
    """POST body to url and return the response status code."""
    request = urllib.request.Request(url, data=body, headers=headers, method="POST")
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            return response.status
    except urllib.error.HTTPError as e:
        # 4xx/5xx arrive as exceptions; the status decides, not the exception
        return e.code


class DeliveryOutcome(BaseModel):
    """Result of one webhook target."""

    url: str
    attempted: bool = False
    success: bool = False
    status_code: Optional[int] = None
    error: Optional[str] = None


class DispatchResult(BaseModel):
    """Aggregated result over all candidate URLs."""

    outcomes: list[DeliveryOutcome] = Field(default_factory=list)

    @property
    def attempted_count(self) -> int:
        return sum(1 for o in self.outcomes if o.attempted)

    @property
    def success_count(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def success(self) -> bool:
        return self.success_count > 0


def is_valid_target(url: Optional[str]) -> bool:
    """A URL is posted to only if it is non-empty and starts with "http"."""
    return bool(url) and url.startswith("http")


class WebhookDispatcher:
    """
    Sends report payloads to chat webhooks.

    IMPORTANT BOUNDARIES:
    1. This service never raises for delivery problems - it reports them
    2. It does not validate what the remote end does with the message
    """

    def __init__(
        self,
        settings: Optional[WebhookSettings] = None,
        transport: Optional[Transport] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings().webhook
        self._transport = transport or urllib_transport
        self._audit_logger = audit_logger

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "User-Agent": self._settings.user_agent,
        }

    async def _post(self, url: str, body: bytes) -> int:
        status = await asyncio.to_thread(
            self._transport,
            url,
            body,
            self._headers(),
            self._settings.timeout_seconds,
        )
        if not 200 <= status < 300:
            raise WebhookDeliveryError(status, f"Webhook answered with HTTP {status}")
        return status

    async def deliver(
        self,
        url: str,
        body: bytes,
        correlation_id: Optional[UUID] = None,
    ) -> DeliveryOutcome:
        """Post to one target. Invalid targets are skipped."""
        if not is_valid_target(url):
            return DeliveryOutcome(url=url or "", attempted=False)

        correlation_id = correlation_id or create_correlation_id()
        try:
            status = await self._post(url, body)
        except WebhookDeliveryError as e:
            outcome = DeliveryOutcome(
                url=url, attempted=True, success=False,
                status_code=e.status_code, error=str(e),
            )
        except Exception as e:
            logger.error("webhook_send_error", url=url, error=str(e))
            outcome = DeliveryOutcome(url=url, attempted=True, success=False, error=str(e))
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"url": url},
                    correlation_id=correlation_id,
                )
        else:
            outcome = DeliveryOutcome(url=url, attempted=True, success=True, status_code=status)

        if self._audit_logger:
            await self._audit_logger.log_webhook_result(
                url=url,
                success=outcome.success,
                correlation_id=correlation_id,
                status_code=outcome.status_code,
                error_message=outcome.error,
            )
        return outcome

    async def dispatch(
        self,
        payload: dict[str, Any],
        urls: Iterable[Optional[str]],
        correlation_id: Optional[UUID] = None,
    ) -> DispatchResult:
        """Post one payload to all valid URLs concurrently."""
        correlation_id = correlation_id or create_correlation_id()
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        outcomes = await asyncio.gather(*(
            self.deliver(url or "", body, correlation_id) for url in urls
        ))
        result = DispatchResult(outcomes=list(outcomes))
        logger.info(
            "webhook_dispatch_finished",
            attempted=result.attempted_count,
            succeeded=result.success_count,
            correlation_id=str(correlation_id),
        )
        return result

    async def send_report(
        self,
        profile: Profile,
        urls: Iterable[Optional[str]],
        limit: int = 15,
        now: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> DispatchResult:
        """Build the profile's report once and dispatch it."""
        payload = build_embed_payload(profile, now=now, limit=limit)
        return await self.dispatch(payload, urls, correlation_id)
