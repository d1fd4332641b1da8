"""
Send-email HTTP API

The support portal front end posts JSON here with the signed-in user's
session token. Responses are ``{"success": true}`` or ``{"error": "..."}``.
"""

import json
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from support_mailer.logging import get_logger
from support_mailer.logging.context import log_context
from support_mailer.notifications import DispatchError, NotificationService, UnexpectedError

logger = get_logger(__name__, component="api")

REQUEST_ID_HEADER = "X-Request-ID"

router = APIRouter()


def _json_response(content: Dict[str, Any], status_code: int, request_id: str) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers={REQUEST_ID_HEADER: request_id})


def _error_response(error: DispatchError, request_id: str) -> JSONResponse:
    return _json_response({"error": error.public_message}, error.status_code, request_id)


def _get_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "healthy", "service": "support-mailer"}


@router.post("/")
@router.post("/send-email")
async def send_email(request: Request) -> JSONResponse:
    """Authenticate, validate, render and send one email."""
    request_id = uuid4().hex
    service = _get_service(request)
    authorization: Optional[str] = request.headers.get("Authorization")

    try:
        raw_body = await request.body()
        try:
            body = json.loads(raw_body)
        except ValueError as e:
            # Authentication still decides first: unauthenticated callers get 401
            await run_in_threadpool(service.authenticate, authorization)
            raise UnexpectedError(f"Invalid JSON body: {e}") from e

        await run_in_threadpool(service.dispatch, authorization, body, request_id)

    except DispatchError as e:
        if e.status_code >= 500:
            with log_context(request_id=request_id):
                logger.error(
                    f"Error in send-email: {e.public_message}",
                    exc_info=True,
                    extra={"event": "dispatch.error", "error_type": type(e).__name__},
                )
        return _error_response(e, request_id)
    except Exception as e:
        with log_context(request_id=request_id):
            logger.error(
                f"Unexpected error in send-email: {e}",
                exc_info=True,
                extra={"event": "dispatch.error", "error_type": type(e).__name__},
            )
        return _error_response(UnexpectedError(str(e)), request_id)

    return _json_response({"success": True}, 200, request_id)
