"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stayflow.api.v1.router import api_router
from stayflow.config import Settings, settings as default_settings
from stayflow.core.exceptions import AppException, ValidationError
from stayflow.core.idempotency import InFlightRegistry
from stayflow.core.middleware import RequestLoggingMiddleware
from stayflow.gateways.rental_api import RentalApiClient
from stayflow.schemas.common import ErrorResponse
from stayflow.services.booking_management_service import CancellationManager, ModificationManager
from stayflow.services.booking_service import BookingService
from stayflow.services.complaint_service import ComplaintService
from stayflow.services.dashboard_service import DashboardService
from stayflow.services.payment_orchestrator import PaymentOrchestrator
from stayflow.services.reconciliation_service import ReconciliationLedger
from stayflow.services.reservation_service import ReservationService
from stayflow.services.review_service import ReviewService
from stayflow.utils.clock import Clock, now as current_time

logger = logging.getLogger(__name__)


def _error_body(message: str, code: str | None, details=None) -> dict:
    body = ErrorResponse(
        message=message,
        timestamp=datetime.now(UTC),
        error=code,
        details=details,
    )
    return body.model_dump(mode="json")


def create_application(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Clock = current_time,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Overrides the environment-derived settings
        transport: httpx transport for the rental backend (tests pass a mock)
        clock: Source of "now" for classification and date rules
    """
    settings = settings or default_settings

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Build the backend client and services; close the client on shutdown."""
        client = RentalApiClient(settings, transport=transport)
        in_flight = InFlightRegistry()
        ledger = ReconciliationLedger()
        booking_service = BookingService(
            client, clock=clock, recent_limit=settings.recent_bookings_limit
        )

        app.state.reconciliation_ledger = ledger
        app.state.booking_service = booking_service
        app.state.cancellation_manager = CancellationManager(client, booking_service, in_flight, clock)
        app.state.modification_manager = ModificationManager(client, booking_service, in_flight, clock)
        app.state.review_service = ReviewService(client, booking_service, in_flight)
        app.state.complaint_service = ComplaintService(client, booking_service, in_flight)
        app.state.dashboard_service = DashboardService(client, clock=clock)
        app.state.reservation_service = ReservationService(
            client,
            PaymentOrchestrator(client, ledger),
            booking_service,
            clock=clock,
            ttl=timedelta(minutes=settings.reservation_ttl_minutes),
        )
        logger.info("%s started against %s", settings.app_name, settings.backend_base_url)

        yield

        await client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="StayFlow - Reservation lifecycle API",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle custom application exceptions."""
        details = exc.errors if isinstance(exc, ValidationError) else None
        if exc.status_code >= 500:
            logger.warning(
                "%s %s failed with %s: %s", request.method, request.url.path, exc.code, exc.detail
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail, exc.code, details),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed request bodies in the error envelope."""
        return JSONResponse(
            status_code=422,
            content=_error_body(
                "Validation failed", ValidationError.code, jsonable_encoder(exc.errors())
            ),
        )

    # Middleware (order matters - first added = last executed)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "stayflow.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )
