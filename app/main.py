# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Template Studio API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import asyncio
import json
import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.websocket import websocket_manager, WEBSOCKET_CHANNEL
from app.exceptions import (
    TemplateStudioException,
    template_studio_exception_handler,
    validation_exception_handler,
)
from app.routers import health, files, folders, templates, messages, constructor
from app.auth import routes as auth_routes
from app.websocket import routes as websocket_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = health.API_VERSION

# Global handle for the Redis listener task
_redis_listener_task: asyncio.Task | None = None


async def redis_pubsub_listener():
    """
    Background task that listens to Redis pub/sub and broadcasts to WebSockets.

    Every API process runs one, so an event published by any process
    reaches the user's sockets wherever they are connected.
    """
    logger.info("Starting Redis pub/sub listener for WebSocket broadcasts")

    redis_client = aioredis.from_url(settings.REDIS_URL)
    pubsub = redis_client.pubsub()

    try:
        await pubsub.subscribe(WEBSOCKET_CHANNEL)

        async for message in pubsub.listen():
            if message["type"] != "message":
                continue

            try:
                data = json.loads(message["data"])
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON in Redis message: {e}")
                continue

            user_id = data.pop("user_id", None)
            if user_id:
                await websocket_manager.broadcast(user_id, data)
                logger.debug(f"Broadcast {data.get('type')} to user {user_id}")

    except asyncio.CancelledError:
        logger.info("Redis pub/sub listener cancelled")
        raise
    except aioredis.RedisError as e:
        logger.error(f"Redis pub/sub listener error: {e}")
    finally:
        await pubsub.aclose()
        await redis_client.aclose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Log config, start the Redis -> WebSocket relay
    - Shutdown: Stop the relay
    """
    global _redis_listener_task

    # Startup
    logger.info(f"Starting Template Studio API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    _redis_listener_task = asyncio.create_task(redis_pubsub_listener())

    yield

    # Shutdown
    logger.info("Shutting down Template Studio API")

    if _redis_listener_task:
        _redis_listener_task.cancel()
        try:
            await _redis_listener_task
        except asyncio.CancelledError:
            pass


# Create FastAPI application
app = FastAPI(
    title="Template Studio API",
    description="""
## Message Templates over Uploaded Files

Upload CSV or text files, pick and arrange columns, and save the result
as a reusable message template.

### How It Works

1. **Sign In** - Email/password via Supabase Auth (cookie or Bearer token)
2. **Upload** - Get a pre-signed URL, PUT the file to S3, report the outcome
3. **Construct** - Load a file's columns and first row, choose columns, add text
4. **Save** - Store the configuration as a template inside a folder

### Quick Start

```bash
# 1. Request an upload URL
curl -X POST http://localhost:8000/api/v1/files/upload-url \\
  -H "Authorization: Bearer $TOKEN" \\
  -d '{"filename": "sales.csv", "content_type": "text/csv"}'

# 2. Upload the bytes, then confirm
curl -X PUT "$URL" -H "Content-Type: text/csv" --data-binary @sales.csv
curl -X PATCH http://localhost:8000/api/v1/files/status \\
  -H "Authorization: Bearer $TOKEN" \\
  -d '{"file_id": "'$FILE_ID'", "status": "uploaded"}'

# 3. Load columns for the constructor
curl http://localhost:8000/api/v1/files/$FILE_ID/content -H "Authorization: Bearer $TOKEN"
```
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Sign in, sign up, sign out and session info",
        },
        {
            "name": "Files",
            "description": "Pre-signed uploads, upload status, listing and content",
        },
        {
            "name": "Folders",
            "description": "Folders for organising templates",
        },
        {
            "name": "Templates",
            "description": "Create, update, list and preview message templates",
        },
        {
            "name": "Messages",
            "description": "Folders with their templates",
        },
        {
            "name": "Constructor",
            "description": "Render message previews from constructor state",
        },
        {
            "name": "WebSocket",
            "description": "Real-time file updates",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(TemplateStudioException)
async def handle_template_studio_exception(request: Request, exc: TemplateStudioException):
    """Handle custom API exceptions."""
    return await template_studio_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request body/query validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints (router carries the /auth prefix)
app.include_router(
    auth_routes.router,
    prefix="/api/v1",
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# File upload, listing and content endpoints
app.include_router(
    files.router,
    prefix="/api/v1/files",
    tags=["Files"]
)

# Template folder endpoints
app.include_router(
    folders.router,
    prefix="/api/v1/folders",
    tags=["Folders"]
)

# Template endpoints
app.include_router(
    templates.router,
    prefix="/api/v1/templates",
    tags=["Templates"]
)

# Messages overview endpoint
app.include_router(
    messages.router,
    prefix="/api/v1/messages",
    tags=["Messages"]
)

# Message constructor endpoints
app.include_router(
    constructor.router,
    prefix="/api/v1/constructor",
    tags=["Constructor"]
)

# WebSocket endpoints (Real-time updates)
app.include_router(
    websocket_routes.router,
    tags=["WebSocket"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Template Studio API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
