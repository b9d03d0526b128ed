"""HTTP mapping for domain errors."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from uniforms.shared.errors import AdmissionRejected


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AdmissionRejected)
    async def admission_rejected(request: Request, exc: AdmissionRejected):
        return JSONResponse(
            status_code=409,
            content={"error": exc.reason, "messages": exc.messages, "details": exc.details()},
        )

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": "validation_error", "messages": exc.messages})

    @app.exception_handler(ObjectNotFoundError)
    async def not_found(request: Request, exc: ObjectNotFoundError):
        return JSONResponse(status_code=404, content={"error": "not_found", "messages": str(exc.messages)})
