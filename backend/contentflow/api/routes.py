"""API route handlers for webhook intake and job status."""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from contentflow import __version__
from contentflow.config import WebhookConfig, settings
from contentflow.orchestrator import (
    EventDispatcher,
    IllegalTransition,
    JobNotFound,
    StorageFailure,
)
from contentflow.schemas.events import WebhookAck, WebhookPayload
from contentflow.schemas.jobs import JobStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# ============================================================================
# Dependencies
# ============================================================================

def get_webhook_config() -> WebhookConfig:
    """Webhook admission/transition settings (overridable in tests)."""
    return settings.webhook


def get_dispatcher(request: Request) -> EventDispatcher:
    """Dispatcher created by the application lifespan."""
    return request.app.state.dispatcher


async def verify_webhook_secret(
    x_webhook_secret: Optional[str] = Header(default=None),
    config: WebhookConfig = Depends(get_webhook_config),
) -> None:
    """Admission gate for worker webhooks.

    When no secret is configured every call is admitted. When one is
    configured the x-webhook-secret header must match it exactly.
    """
    if config.secret is None:
        return
    if x_webhook_secret is None or not secrets.compare_digest(
        x_webhook_secret.encode(), config.secret.encode()
    ):
        logger.warning("Rejected webhook with invalid secret")
        raise HTTPException(status_code=401, detail="Invalid webhook secret")


# ============================================================================
# Endpoint Handlers
# ============================================================================

@router.post(
    "/webhooks/n8n",
    response_model=WebhookAck,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_webhook_secret)],
)
async def handle_n8n_webhook(
    payload: WebhookPayload,
    dispatcher: EventDispatcher = Depends(get_dispatcher),
):
    """Apply a pipeline worker event to its content job.

    Returns 404 for unknown jobs, 409 when strict mode rejects the transition
    and 503 when the job store did not commit the write. Unknown event types
    are acknowledged with 200.
    """
    try:
        return await dispatcher.dispatch(payload)
    except JobNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except IllegalTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageFailure as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/jobs/{job_id}/status", response_model=JobStatusResponse)
async def get_job_status(
    job_id: str,
    dispatcher: EventDispatcher = Depends(get_dispatcher),
):
    """Get lightweight job status for polling."""
    try:
        job = await dispatcher.store.get(job_id)
    except StorageFailure as e:
        raise HTTPException(status_code=503, detail=str(e))

    if job is None:
        raise HTTPException(status_code=404, detail="Content job not found")

    return JobStatusResponse(
        job_id=job.id,
        status=job.status.value,
        created_at=job.created_at.isoformat() if job.created_at else None,
        updated_at=job.updated_at.isoformat() if job.updated_at else None,
        error_message=job.error_message,
    )


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": __version__,
    }
