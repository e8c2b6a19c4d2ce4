"""mealstream FastAPI application.

Web server for the kitchen domain that processes commands synchronously
via HTTP. Each request runs inside the kitchen domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from kitchen.domain import kitchen  # noqa: E402
from kitchen.utils.logging import bind_actor, clear_actor  # noqa: E402

kitchen.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="mealstream API",
    description="Meal subscriptions — order fulfillment, kitchen workflow, pause/skip requests",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_UNSCOPED_PATHS = ("/health", "/docs", "/openapi.json", "/redoc")


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the kitchen domain context and bind the acting identity for each API request."""
    if request.url.path.startswith(_UNSCOPED_PATHS):
        return await call_next(request)

    clear_actor()
    actor = {"admin_id": request.headers.get("x-admin-id"), "user_id": request.headers.get("x-user-id")}
    bind_actor(path=request.url.path, **{key: value for key, value in actor.items() if value})
    try:
        with kitchen.domain_context():
            response = await call_next(request)
    finally:
        clear_actor()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from kitchen.api import register_error_handlers, routers  # noqa: E402

for router in routers:
    app.include_router(router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {"kitchen": {"name": kitchen.name}},
        }
    )
