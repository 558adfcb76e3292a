from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from api.api.router import api_router
from api.core.config import get_settings
from api.core.errors import register_exception_handlers
from api.core.logging import setup_logging

settings = get_settings()
setup_logging()

app = FastAPI(
    title=settings.app_name,
    description="AI study assistant: document uploads, study materials, PYQ analysis and chat",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health", tags=["health"])
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


# Include API routes
app.include_router(api_router, prefix="/api")
