import json
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from entrevisto.database import get_db
from entrevisto.services.webhook_service import RECEIVED, handle_event

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/vapi", tags=["webhooks"])


@router.post("/webhook")
async def vapi_webhook(request: Request, db: Session = Depends(get_db)):
    """Provider server messages. Always answered with 200 so the provider never retries."""
    body = await request.body()
    try:
        event = json.loads(body or b"{}")
    except (ValueError, UnicodeDecodeError):
        logger.warning("Webhook body is not valid JSON (%d bytes); acknowledged", len(body))
        return RECEIVED
    try:
        return await run_in_threadpool(handle_event, db, event)
    except Exception as e:
        logger.exception("Webhook dispatch failed: %s", e)
        return RECEIVED
