"""
Cliente de la API de felicitaciones

Reproduce la lógica del formulario web desde Python: valida la foto antes de
subirla, llama al endpoint del proveedor elegido, traduce los errores del
servidor a mensajes para el usuario y descarga la imagen resultante.
"""

import base64
import logging
import mimetypes
import os
from enum import Enum
from io import BytesIO

import requests
from PIL import Image, ImageOps

from eid_greeting.prompts.card_prompts import default_messages
from eid_greeting.utils import decode_base64_image, fetch_image_bytes, is_remote_url

logger = logging.getLogger(__name__)

UPLOAD_TYPES = ("image/jpeg", "image/png", "image/gif")
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


class Provider(str, Enum):
    OPENAI = "openai"
    STABILITY = "stability"
    COMBINED = "combined"

    @property
    def endpoint(self) -> str:
        return {
            Provider.OPENAI: "/api/generate",
            Provider.STABILITY: "/api/stability/generate",
            Provider.COMBINED: "/api/combined-generate",
        }[self]

    @property
    def max_size_label(self) -> str:
        return "10MB" if self is Provider.STABILITY else "4MB"


class GenerationFailed(Exception):
    """Raised with a message ready to show to the user."""


def validate_upload(path: str) -> str | None:
    """Return an error message for an unacceptable upload, or None."""
    mime, _ = mimetypes.guess_type(path)
    if mime not in UPLOAD_TYPES:
        return "Please upload a valid image file (JPEG, PNG, or GIF only)"

    size = os.path.getsize(path)
    if size > MAX_UPLOAD_BYTES:
        return (
            "Image size should be less than 5MB. "
            f"Your image is {size / (1024 * 1024):.2f}MB"
        )
    return None


def file_to_data_uri(path: str) -> str:
    mime, _ = mimetypes.guess_type(path)
    with open(path, "rb") as f:
        encoded = base64.b64encode(f.read()).decode("ascii")
    return f"data:{mime or 'application/octet-stream'};base64,{encoded}"


def resize_for_upload(data_uri: str, max_size: int = 512) -> str:
    """Centre the image on a white square of max_size and re-encode as JPEG."""
    img = Image.open(BytesIO(decode_base64_image(data_uri))).convert("RGB")
    img = ImageOps.pad(img, (max_size, max_size), color=(255, 255, 255))
    buffer = BytesIO()
    img.save(buffer, format="JPEG", quality=85)
    return "data:image/jpeg;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def describe_error(error_message: str, status_code: int, provider: Provider) -> str:
    """
    Map a server error to the notification shown to the user.
    """
    if "too large" in error_message or "size" in error_message:
        return (
            "Image is too large. Please use a smaller image "
            f"(maximum {provider.max_size_label})."
        )
    if "API key" in error_message or "API_KEY" in error_message:
        return f"{provider.value.upper()} API key error. Please contact support for assistance."
    if (
        "format" in error_message
        or "not supported" in error_message
        or "Invalid input image" in error_message
    ):
        return "Image format is not supported. Please use a JPEG or PNG image with a clear face photo."
    if "content policy" in error_message or "inappropriate content" in error_message:
        return "Image may contain inappropriate content. Please try a different image that clearly shows a face."
    if "rate limit" in error_message or "quota" in error_message:
        return "We have reached our API rate limits. Please try again in a few minutes."
    if status_code == 429:
        return "Too many requests. Please try again in a few minutes."
    if status_code == 500:
        return "Server error. Our team has been notified and is working on it. Please try again later."
    return f"Failed to generate image: {error_message}"


class GreetingClient:

    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: int = 180):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def generate_image(
        self, image: str, message: str = "", provider: Provider = Provider.STABILITY
    ) -> str:
        """Call the endpoint of the chosen provider and return the image reference."""
        provider = Provider(provider)
        logger.info("Using %s API for image generation", provider.value)
        try:
            resp = self.session.post(
                f"{self.base_url}{provider.endpoint}",
                json={"image": image, "message": message},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("Error generating image: %s", e)
            raise GenerationFailed("An unexpected error occurred. Please try again.") from e

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if not resp.ok:
            error_message = data.get("error") or resp.reason or ""
            logger.error("%s API Error: %s", provider.value.upper(), error_message)
            raise GenerationFailed(describe_error(error_message, resp.status_code, provider))

        if not data.get("image"):
            raise GenerationFailed("Failed to generate image. Please try again.")
        if data.get("note"):
            logger.info("Server note: %s", data["note"])
        return data["image"]

    def generate_messages(self, name: str | None = None) -> list[str]:
        try:
            resp = self.session.post(
                f"{self.base_url}/api/openai/generate-messages",
                json={"name": name},
                timeout=self.timeout,
            )
            if not resp.ok:
                logger.error("Error generating messages: %s", resp.text)
                return default_messages()
            messages = resp.json().get("messages")
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error("Error generating messages: %s", e)
            return default_messages()
        return messages or default_messages()

    def download(self, image_ref: str, dest: str) -> str:
        """Save a data URI or remote image URL to dest."""
        if is_remote_url(image_ref):
            img_bytes = fetch_image_bytes(image_ref)
        else:
            img_bytes = decode_base64_image(image_ref)
        with open(dest, "wb") as f:
            f.write(img_bytes)
        return dest
