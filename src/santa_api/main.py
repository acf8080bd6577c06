from textwrap import dedent
from typing import Optional

import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from loguru import logger

from santa_api.errors import handle_broad_exceptions
from santa_api.errors import handle_pydantic_validation_errors
from santa_api.errors import handle_request_validation_errors
from santa_api.errors import handle_workflow_errors
from santa_api.monitoring.logger import configure_logger
from santa_api.monitoring.request_context import RequestContextMiddleware
from santa_api.routes.routes_admin import ROUTER_ADMIN
from santa_api.routes.routes_group import ROUTER_GROUP
from santa_api.routes.routes_health import ROUTER_HEALTH
from santa_api.routes.routes_user import ROUTER_USER
from santa_api.settings import Settings
from santa_api.workflow.crypto import SecretCodec
from santa_api.workflow.db import DomainDBPool
from santa_api.workflow.db import MemoryStore
from santa_api.workflow.db import PostgresStore
from santa_api.workflow.db import WorkflowStore
from santa_api.workflow.exceptions import WorkflowError
from santa_api.workflow.notifications import LogNotificationSender
from santa_api.workflow.notifications import NotificationSender
from santa_api.workflow.notifications import SmtpNotificationSender
from santa_api.workflow.orchestrator import ExchangeOrchestrator


def _build_store(settings: Settings) -> WorkflowStore:
    if settings.domain_db_connection_string:
        logger.info("Using PostgreSQL workflow store")
        return PostgresStore(DomainDBPool(settings.domain_db_connection_string))

    logger.warning("domain_db_connection_string not set - using in-memory store, data is lost on restart")
    return MemoryStore()


def _build_notifier(settings: Settings) -> NotificationSender:
    if settings.smtp_host:
        logger.info("SMTP notifications enabled", smtp_host=settings.smtp_host, smtp_port=settings.smtp_port)
        return SmtpNotificationSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            from_email=settings.notification_from_email,
            use_tls=settings.smtp_use_tls,
        )

    logger.warning("smtp_host not set - santa emails will only be logged")
    return LogNotificationSender()


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[WorkflowStore] = None,
    notifier: Optional[NotificationSender] = None,
) -> FastAPI:
    """Create a FastAPI application.

    Configuration is loaded from environment variables (or a .env file) via pydantic-settings.
    ``store`` and ``notifier`` may be injected; otherwise they are built from settings.
    """
    settings = settings or Settings()

    configure_logger(level=settings.log_level)

    logger.info(
        "Configuration loaded successfully",
        database_configured=bool(settings.domain_db_connection_string),
        smtp_configured=bool(settings.smtp_host),
        default_event_id=settings.default_event_id,
    )

    # fails fast on bad key material
    codec = SecretCodec.from_base64(settings.aes_key_base64, settings.aes_iv_base64)

    store = store or _build_store(settings)
    notifier = notifier or _build_notifier(settings)

    app = FastAPI(
        title="Secret Santa API",
        version="v1",
        description=dedent(
            """
        Gift exchange service: groups, random santa pairing, admin-approved wishes and
        addresses, and out-of-band disclosure to each santa.

        | Role | Can |
        | --- | --- |
        | USER | create/join groups, submit wish and address, read assignment, acknowledge |
        | ADMIN | shuffle, approve wishes and addresses, view group status and participants |
        """
        ),
        generate_unique_id_function=custom_generate_unique_id,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.notifier = notifier
    app.state.orchestrator = ExchangeOrchestrator(
        store=store,
        codec=codec,
        notifier=notifier,
        default_event_id=settings.default_event_id,
    )

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ROUTER_HEALTH, prefix="/api")
    app.include_router(ROUTER_GROUP, prefix="/api")
    app.include_router(ROUTER_USER, prefix="/api")
    app.include_router(ROUTER_ADMIN, prefix="/api")

    @app.on_event("startup")
    async def startup_store():
        """Open the database pool and create the schema if needed."""
        if isinstance(store, PostgresStore):
            await store.db_pool.initialize()
            logger.success("Workflow database initialized")

    @app.on_event("shutdown")
    async def shutdown_store():
        await store.close()
        logger.info("Workflow store closed")

    app.add_exception_handler(
        exc_class_or_status_code=WorkflowError,
        handler=handle_workflow_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )

    app.middleware("http")(handle_broad_exceptions)

    logger.success("Secret Santa API created")
    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
