from __future__ import annotations

import os
from typing import Dict

from fastapi import APIRouter


router = APIRouter()


@router.get("/settings", summary="Current server settings")
def get_settings() -> Dict[str, str]:
    keys = [
        "DOMAIN",
        "PORT",
        "ALLOWED_CORS_ORIGINS",
        "SWAGGER_ENABLED",
        "MAX_FILE_MB",
        "PREPROCESS_MIN_SIDE",
        "STORE_DIR",
        "OCR_MIN_CONF",
        "ASSISTANT_PROVIDER",
        "OLLAMA_HOST",
        "OLLAMA_MODEL",
        "GEMINI_MODEL_NAME",
    ]
    return {k: os.getenv(k, "") for k in keys}
