from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from fastapi import FastAPI, APIRouter
from app.clients import BookClient, BookContentClient, IdentityClient
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.middleware_correlation import CorrelationIdMiddleware
from app.core.logging import setup_logging
from app.core.errors import register_exception_handlers

# Routers
from app.api.routes.authors import router as authors_router


setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Share one HTTP client per downstream service for the app lifetime."""
    app.state.book_client = BookClient()
    app.state.book_content_client = BookContentClient()
    app.state.identity_client = IdentityClient()
    try:
        yield
    finally:
        app.state.book_client.close()
        app.state.book_content_client.close()
        app.state.identity_client.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Author Service - registration, approval and login of authors, "
    "with book operations proxied to the book services.",
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# CORS middleware - allow docs UI to make API requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8000", "http://127.0.0.1:8000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middlewares
app.add_middleware(CorrelationIdMiddleware)

# Root endpoint
@app.get("/")
async def root():
    """API root endpoint with basic information."""
    return {
        "message": "Welcome to Author Service",
        "version": "1.0.0",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "api_v1_str": settings.API_V1_STR,
        "endpoints": {
            "authors": f"{settings.API_V1_STR}/authors",
            "login": f"{settings.API_V1_STR}/authors/login",
        },
    }


@app.get("/health")
async def health():
    return {"status": "ok"}

register_exception_handlers(app)

# Mount routers
api = APIRouter(prefix=settings.API_V1_STR)
api.include_router(authors_router)
app.include_router(api)
