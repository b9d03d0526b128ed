"""Uniforms FastAPI application.

Processes commands synchronously via HTTP inside the uniforms domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (handlers fire in UoW)
#   - "production" → event_processing = "async" (handlers fire via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from uniforms.domain import uniforms
from uniforms.utils.logging import add_context, clear_context, configure_logging

configure_logging()
uniforms.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Uniforms API",
    description="School uniform ordering — stock, limits, orders and restocks",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the uniforms domain context for each request and tag its log lines."""
    clear_context()
    add_context(method=request.method, path=request.url.path)
    with uniforms.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from uniforms.api import (  # noqa: E402
    item_router,
    maintenance_router,
    order_router,
    register_exception_handlers,
    student_router,
)

app.include_router(item_router)
app.include_router(student_router)
app.include_router(order_router)
app.include_router(maintenance_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": uniforms.name})
