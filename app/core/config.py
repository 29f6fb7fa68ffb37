import os
from typing import List, Optional

class Settings:
    # openapi-fetch proxy
    OPENAPI_FETCH_DEFAULT_TIMEOUT_MS: int = int(os.getenv("OPENAPI_FETCH_DEFAULT_TIMEOUT_MS", "8000"))
    OPENAPI_FETCH_MIN_TIMEOUT_MS: int = int(os.getenv("OPENAPI_FETCH_MIN_TIMEOUT_MS", "1000"))
    OPENAPI_FETCH_MAX_TIMEOUT_MS: int = int(os.getenv("OPENAPI_FETCH_MAX_TIMEOUT_MS", "30000"))
    OPENAPI_FETCH_DEFAULT_CONCURRENCY: int = int(os.getenv("OPENAPI_FETCH_DEFAULT_CONCURRENCY", "40"))
    OPENAPI_FETCH_MAX_CONCURRENCY: int = int(os.getenv("OPENAPI_FETCH_MAX_CONCURRENCY", "200"))
    FETCH_USER_AGENT: str = os.getenv("FETCH_USER_AGENT", "AiMind-FrontEnd/1.0 (+fastapi route handler)")

    # Image proxy
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))
    IMAGE_PROXY_USER_AGENT: str = os.getenv("IMAGE_PROXY_USER_AGENT", "AiMind-PDF/1.0")

    # Local files
    JSON_DIR: str = os.getenv("JSON_DIR", "json")
    ANALYSIS_RESULT_DIR: str = os.getenv("ANALYSIS_RESULT_DIR", "data/result")
    ANALYSIS_TEST_DIR: str = os.getenv("ANALYSIS_TEST_DIR", "data/test")

    # LLM (diary OCR)
    GOOGLE_API_KEY: Optional[str] = os.getenv("GOOGLE_API_KEY")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "gemini-2.5-flash")
    LLM_TIMEOUT_SECONDS: int = int(os.getenv("LLM_TIMEOUT_SECONDS", "50"))
    LLM_MAX_ATTEMPTS: int = int(os.getenv("LLM_MAX_ATTEMPTS", "3"))

    # Development
    USE_MOCK: bool = os.getenv("USE_MOCK", "0").lower() in ("1", "true", "yes")

    # CORS
    CORS_ORIGINS: List[str] = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]

settings = Settings()
