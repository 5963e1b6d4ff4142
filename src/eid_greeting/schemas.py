"""
Modelos de datos y validación

Define los esquemas Pydantic utilizados para:
- Validar los datos de entrada en los endpoints
- Documentar automáticamente la API con OpenAPI
- Describir los parámetros de cada llamada a Stability AI y la máscara de texto
"""

from enum import Enum

from pydantic import BaseModel, Field


class GreetingRequest(BaseModel):
    image: str | None = None
    message: str | None = None


class PortraitRequest(BaseModel):
    base64Image: str | None = None
    prompt: str | None = None


class MessagesRequest(BaseModel):
    name: str | None = None


class ImageResponse(BaseModel):
    image: str


class CombinedResponse(ImageResponse):
    note: str | None = None


class UrlResponse(BaseModel):
    url: str


class MessagesResponse(BaseModel):
    messages: list[str]


class ErrorResponse(BaseModel):
    error: str


class StabilityPreset(BaseModel):
    """Hyperparameters of one Stability AI image-to-image call."""

    name: str
    prompt_weight: float = 1.0
    negative_prompt: str
    negative_weight: float = -0.8
    cfg_scale: float = Field(default=12, ge=0, le=35)
    image_strength: float = Field(default=0.55, ge=0, le=1)
    steps: int = Field(default=40, ge=10, le=50)
    style_preset: str | None = None
    canvas_size: int = 1024
    # Franja superior en blanco reservada para el texto; la foto se coloca debajo
    headroom: int = Field(default=0, ge=0)


class MaskLayout(BaseModel):
    """Editable bands of the text mask, in pixels of the target canvas."""

    top: int
    bottom: int
    side: int


class PipelineOutcome(str, Enum):
    FULL_SUCCESS = "full-success"
    OVERLAY_FALLBACK = "overlay-fallback"
    WITHOUT_TEXT = "without-text"


class CombinedResult(BaseModel):
    """Terminal state of the two-stage generation and the image it produced."""

    image: str
    outcome: PipelineOutcome
    note: str | None = None
