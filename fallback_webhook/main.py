"""Main FastAPI application for the Dialogflow fallback webhook."""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
import uvicorn

from fallback_webhook.config import settings
from fallback_webhook.escalation.business_hours import BusinessHoursEvaluator
from fallback_webhook.escalation.cooldown import FallbackCooldownController
from fallback_webhook.exceptions import UnhandledIntentError
from fallback_webhook.models.dialogflow import WebhookRequest
from fallback_webhook.storage.base import FallbackStore
from fallback_webhook.storage.firebase_store import FirebaseFallbackStore, initialize_firebase
from fallback_webhook.storage.memory_store import InMemoryFallbackStore
from fallback_webhook.utils.logging import (
    CorrelationContextManager,
    get_logger,
    log_api_request,
    setup_logging,
)
from fallback_webhook.utils.timezone import Clock, display_civil_time, system_clock
from fallback_webhook.webhook.dispatcher import IntentDispatcher, make_fallback_handler

# Setup logging
setup_logging()
logger = get_logger(__name__)

INTERNAL_ERROR_BODY = {"error": "Internal server error"}


async def build_store() -> FallbackStore:
    """Create the configured fallback store."""
    if settings.STORE_BACKEND == "memory":
        logger.warning("Using in-memory fallback store; records are not persisted")
        return InMemoryFallbackStore()

    firebase_app = initialize_firebase(settings)
    store = FirebaseFallbackStore(firebase_app, settings.FIREBASE_USERS_PATH)
    connection = await store.check_connection()
    logger.info("Connected to Firebase Realtime Database", **connection)
    return store


def wire_services(app: FastAPI, store: FallbackStore) -> None:
    """Build the controller and dispatcher around a store."""
    clock: Clock = app.state.clock
    controller = FallbackCooldownController(
        store,
        clock=clock,
        business_hours=BusinessHoursEvaluator(),
        cooldown_ms=settings.FALLBACK_COOLDOWN_MS,
    )
    dispatcher = IntentDispatcher()
    dispatcher.register(settings.FALLBACK_INTENT_NAME, make_fallback_handler(controller))

    app.state.store = store
    app.state.controller = controller
    app.state.dispatcher = dispatcher


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Dialogflow fallback webhook", environment=settings.ENVIRONMENT)

    if app.state.store is None:
        try:
            wire_services(app, await build_store())
        except Exception as e:
            logger.error("Failed to start application", error=str(e))
            raise

    logger.info(
        "Server is running",
        port=settings.PORT,
        environment=settings.ENVIRONMENT,
        firebase_project=settings.FIREBASE_PROJECT_ID,
        database_url=settings.FIREBASE_DATABASE_URL,
        thai_time=display_civil_time(app.state.clock()),
    )

    yield

    logger.info("Shutting down Dialogflow fallback webhook")
    close = getattr(app.state.store, "close", None)
    if close:
        close()


def create_app(
    store: Optional[FallbackStore] = None,
    clock: Optional[Clock] = None
) -> FastAPI:
    """Create the application, optionally around a pre-built store."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Dialogflow fulfillment webhook with rate-limited fallback escalation",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None
    )
    app.state.clock = clock or system_clock
    app.state.store = None
    app.state.controller = None
    app.state.dispatcher = None

    if store is not None:
        wire_services(app, store)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with a correlation id and its duration."""
        started = time.perf_counter()
        correlation_id = request.headers.get("x-correlation-id")

        with CorrelationContextManager(correlation_id) as cid:
            logger.info("Incoming request", method=request.method, path=request.url.path)
            response = await call_next(request)
            log_api_request(
                logger,
                request.method,
                request.url.path,
                response.status_code,
                round((time.perf_counter() - started) * 1000, 2)
            )
            response.headers["X-Correlation-ID"] = cid
            return response

    @app.get("/")
    async def service_status(request: Request):
        """Service status with local time and store state."""
        now = request.app.state.clock()
        return {
            "status": "online",
            "timestamp": now.isoformat(),
            "thai_time": display_civil_time(now),
            "service": "Dialogflow Webhook",
            "firebase_status": (
                "initialized" if request.app.state.store is not None else "not_initialized"
            ),
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Basic health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": request.app.state.clock().isoformat(),
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT
        }

    @app.post("/webhook")
    async def webhook(request: Request):
        """Dialogflow ES fulfillment endpoint."""
        dispatcher: Optional[IntentDispatcher] = request.app.state.dispatcher
        if dispatcher is None:
            raise HTTPException(status_code=503, detail="Webhook dispatcher not initialized")

        try:
            payload = await request.json()
            if not isinstance(payload, dict):
                raise ValueError("Webhook body must be a JSON object")

            webhook_request = WebhookRequest.model_validate(payload)
            logger.info(
                "Received webhook request",
                intent=webhook_request.intent_name,
                body_size=len(await request.body())
            )

            response = await dispatcher.dispatch(webhook_request)
            logger.info("Successfully processed webhook request")
            return JSONResponse(content=response.to_payload())

        except (UnhandledIntentError, ValidationError, ValueError) as e:
            logger.error("Error handling webhook request", error=str(e))
            return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        """Handle HTTP exceptions with structured logging."""
        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            path=request.url.path
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.detail,
                "timestamp": system_clock().isoformat(),
                "path": str(request.url.path)
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Handle general exceptions with structured logging."""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            path=request.url.path,
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={
                **INTERNAL_ERROR_BODY,
                "timestamp": system_clock().isoformat(),
                "path": str(request.url.path)
            }
        )

    return app


app = create_app()


# Run application
if __name__ == "__main__":
    uvicorn.run(
        "fallback_webhook.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
