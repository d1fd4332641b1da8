"""HTTP application for the support mailer."""

from fastapi import FastAPI

from support_mailer.notifications import NotificationService

from .routes import REQUEST_ID_HEADER, router


def create_app(service: NotificationService) -> FastAPI:
    """Build the FastAPI application around a configured NotificationService."""
    app = FastAPI(
        title="SciTech Support Mailer",
        description="Sends comment notifications, welcome and password reset emails",
        docs_url=None,
        redoc_url=None,
    )
    app.state.notification_service = service
    app.include_router(router)
    return app


__all__ = ["create_app", "REQUEST_ID_HEADER"]
