"""GitHub webhook receiver."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request, status

from releasebot.api.dependencies import ConfigDep, DispatcherDep
from releasebot.api.models import APIResponse, WebhookAck
from releasebot.api.signature import verify_signature
from releasebot.events import EventPayloadError, parse_event

logger = logging.getLogger("releasebot.api.webhooks")

router = APIRouter(tags=["webhooks"])


@router.post(
    "/{owner}/{name}",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=APIResponse[WebhookAck],
)
async def receive_webhook(
    owner: str,
    name: str,
    request: Request,
    config: ConfigDep,
    dispatcher: DispatcherDep,
) -> APIResponse[WebhookAck]:
    """Verify a delivery and queue its event for reconciliation."""
    event_name = request.headers.get("X-GitHub-Event", "")
    logger.debug("%s/%s received %s webhook", owner, name, event_name or "unnamed")

    body = await request.body()
    verify_signature(
        config.webhook_secret,
        body,
        signature_256=request.headers.get("X-Hub-Signature-256"),
        signature_sha1=request.headers.get("X-Hub-Signature"),
    )

    try:
        payload = json.loads(body)
    except ValueError as e:
        raise EventPayloadError(f"Body is not JSON: {e}") from e
    if not isinstance(payload, dict):
        raise EventPayloadError("Body is not a JSON object")

    action = payload.get("action")
    event = parse_event(event_name, payload)
    if event is None:
        logger.debug("Ignoring %s.%s", event_name, action)
        return APIResponse(data=WebhookAck(event=event_name, action=action, accepted=False))

    dispatcher.submit(event)
    return APIResponse(data=WebhookAck(event=event_name, action=action, accepted=True))
