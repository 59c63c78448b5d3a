"""AllInTown marketplace FastAPI application.

One web server for every context: identity, catalogue and ordering. Routes
are plain ``def`` handlers so FastAPI runs them in its threadpool alongside
the synchronous pymongo client.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalogue.api import browse_router, seller_router
from identity.api.routes import auth_router, profile_router
from ordering.api.routes import cart_router, order_router
from shared.api import register_exception_handlers
from shared.config import get_settings
from shared.database import ensure_indexes, get_db
from shared.logging import add_context, clear_context, configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db_provider = app.dependency_overrides.get(get_db, get_db)
    ensure_indexes(db_provider())
    logger.info("Application started", environment=get_settings().ENVIRONMENT)
    yield


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title=get_settings().APP_NAME,
    description="Local marketplace: shops, carts, orders and deliveries",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind a request id to every log line emitted while handling the request."""
    clear_context()
    add_context(request_id=request.headers.get("X-Request-ID") or uuid4().hex)
    response = await call_next(request)
    return response


register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(browse_router)
app.include_router(seller_router)
app.include_router(cart_router)
app.include_router(order_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
def health():
    return JSONResponse(content={"status": "ok", "environment": get_settings().ENVIRONMENT})
