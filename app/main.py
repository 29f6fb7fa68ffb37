from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.api.routes import router
from app.cache import json_cache
from app.core.config import settings

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Initialize resources on startup, cleanup on shutdown.
    """
    # Startup
    print("Initializing AiMind BFF...")
    print(f"JSON directory: {settings.JSON_DIR}, mock mode: {settings.USE_MOCK}")

    yield

    # Shutdown
    json_cache.clear_all()
    print("Shutting down AiMind BFF...")

app = FastAPI(
    title="AiMind BFF",
    description="Backend-for-frontend routes of the AiMind children's drawing analysis app",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "service": "AiMind BFF",
        "version": "1.0.0",
        "endpoints": {
            "openapi_fetch": "POST /api/openapi-fetch[?stream=1]",
            "image_proxy": "GET /api/image-proxy?url=...",
            "kakao_map_key": "GET /api/kakao-map-key[?file=...|?list=1]",
            "analysis_result": "GET /api/analysis-result/{filename}[?dir=test]",
            "ocr": "POST /api/ocr",
            "cache_stats": "GET /cache/stats",
            "health": "GET /health"
        }
    }
