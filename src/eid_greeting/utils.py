import base64
import binascii

import requests

from eid_greeting.config import REQUEST_TIMEOUT
from eid_greeting.errors import ImageValidationError


def is_remote_url(data):
    """
    Check if the provided data is an http(s) URL
    """
    return data.startswith(("http://", "https://"))


def strip_data_url_prefix(data):
    """
    Remove the data URL header from a base64 payload and restore its padding.
    """
    img_b64 = data.split(";base64,", 1)[-1] if ";base64," in data else data
    img_b64 = "".join(img_b64.split())
    padding = len(img_b64) % 4
    if padding:
        img_b64 += "=" * (4 - padding)
    return img_b64


def decode_base64_image(data: str, label: str = "image") -> bytes:
    if not data:
        raise ImageValidationError("Image data is required")
    try:
        return base64.b64decode(strip_data_url_prefix(data), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageValidationError(f"Invalid base64 data for {label}: {e}") from e


def to_data_uri(img_b64: str, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{img_b64}"


def encode_base64(img_bytes: bytes) -> str:
    return base64.b64encode(img_bytes).decode("ascii")


def fetch_image_bytes(url):
    """
    Fetch image bytes from a URL.
    """
    resp = requests.get(url, timeout=REQUEST_TIMEOUT)
    if resp.status_code != 200:
        raise ValueError(f"Failed to fetch image from {url}")
    return resp.content
