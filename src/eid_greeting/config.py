"""Este módulo contiene las variables de configuración de la aplicación."""

import os
import tempfile

from dotenv import load_dotenv

load_dotenv()

OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY") or None
STABILITY_API_KEY: str | None = os.getenv("STABILITY_API_KEY") or None

STABILITY_API_HOST: str = os.getenv("STABILITY_API_HOST", "https://api.stability.ai")
STABILITY_ENGINE_ID: str = os.getenv(
    "STABILITY_ENGINE_ID", "stable-diffusion-xl-1024-v1-0"
)

OPENAI_IMAGE_MODEL: str = os.getenv("OPENAI_IMAGE_MODEL", "dall-e-2")
OPENAI_CHAT_MODEL: str = os.getenv("OPENAI_CHAT_MODEL", "gpt-3.5-turbo")
OPENAI_IMAGE_SIZE: str = "1024x1024"

CANVAS_SIZE: int = 1024
MAX_OPENAI_IMAGE_BYTES: int = 4 * 1024 * 1024
MAX_STABILITY_IMAGE_BYTES: int = 10 * 1024 * 1024
ALLOWED_IMAGE_FORMATS: frozenset[str] = frozenset({"JPEG", "MPO", "PNG", "GIF", "WEBP"})

TEMP_DIR: str = os.getenv("TEMP_DIR", tempfile.gettempdir())
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "120"))  # seconds

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,*").split(",")
    if origin.strip()
]

MESSAGE_COUNT: int = 5
