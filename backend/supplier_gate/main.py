"""
Application entry point for the supplier eligibility gate service.

Run with:
    uvicorn supplier_gate.main:app
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from supplier_gate.api.routes import admin_rate_limits, admin_suppliers, health, suppliers
from supplier_gate.platform.errors import ErrorHandlerMiddleware, ValidationError, get_correlation_id

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies with the standard 400 error shape."""
    fields = [".".join(str(part) for part in error.get("loc", ()) if part != "body") for error in exc.errors()]
    error = ValidationError("Invalid request body", details={"fields": fields})
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_dict(),
        headers={"X-Correlation-ID": get_correlation_id(request)},
    )


def create_app() -> FastAPI:
    """Build the FastAPI application with error handling and all routers."""
    app = FastAPI(
        title="Supplier Eligibility Gate",
        description="Canonical supplier booking eligibility and read-only admin diagnostics",
        version="1.0.0",
    )
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(health.router)
    app.include_router(suppliers.router)
    app.include_router(admin_suppliers.router)
    app.include_router(admin_rate_limits.router)

    logger.info("Supplier eligibility gate application created")
    return app


app = create_app()
