"""
Servicios de procesamiento de imágenes

Proporciona funcionalidad especializada en manipular, transformar
y preparar imágenes antes y después de la interacción con OpenAI y Stability AI.

Características:
- Decodificación y validación de las fotos subidas por el usuario
- Redimensionamiento al lienzo cuadrado que exige cada proveedor
- Generación de la máscara de texto para la edición con OpenAI
- Superposición local del texto "EID MUBARAK!" cuando falla la edición
- Ficheros temporales por petición que se eliminan siempre al terminar
"""

import logging
import os
import uuid
from io import BytesIO

from PIL import Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError

from eid_greeting.config import (
    ALLOWED_IMAGE_FORMATS,
    CANVAS_SIZE,
    MAX_OPENAI_IMAGE_BYTES,
    MAX_STABILITY_IMAGE_BYTES,
    TEMP_DIR,
)
from eid_greeting.errors import ImageValidationError, ProcessingError
from eid_greeting.schemas import MaskLayout, StabilityPreset

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255, 255)
GOLD = (255, 215, 0, 255)

FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
]


def _megabytes(size: int) -> int:
    return round(size / 1024 / 1024)


def _encode_png(img: Image.Image, **save_kwargs) -> bytes:
    try:
        output_buffer = BytesIO()
        img.save(output_buffer, format="PNG", **save_kwargs)
        return output_buffer.getvalue()
    except (OSError, ValueError) as e:
        raise ProcessingError(f"Failed to encode the image: {e}") from e


def load_image(img_bytes: bytes) -> Image.Image:
    """Decode uploaded bytes, rejecting anything that is not an allowed format."""
    if not img_bytes:
        raise ImageValidationError("Image data is required")
    try:
        img = Image.open(BytesIO(img_bytes))
        img.load()
    except Image.DecompressionBombError as e:
        raise ImageValidationError(
            "Image dimensions are not supported. Please try a different image."
        ) from e
    except (UnidentifiedImageError, OSError) as e:
        raise ImageValidationError(
            "Failed to process the image. Please ensure it is a valid image file."
        ) from e

    if img.format not in ALLOWED_IMAGE_FORMATS:
        raise ImageValidationError(
            "Please upload a valid image file (JPEG, PNG, or GIF only)"
        )
    return img


def prepare_for_openai(
    img_bytes: bytes, canvas_size: int = CANVAS_SIZE, square: bool = False
) -> bytes:
    """
    Convert an upload to an RGBA PNG that fits inside the OpenAI canvas.

    The image is never enlarged; it keeps its aspect ratio. With square=True
    it is centred on a transparent canvas of exactly canvas_size, so that it
    lines up with a text mask of the same size.
    """
    img = load_image(img_bytes).convert("RGBA")
    if square:
        img = ImageOps.pad(
            img, (canvas_size, canvas_size), method=Image.Resampling.LANCZOS,
            color=(0, 0, 0, 0),
        )
    else:
        img.thumbnail((canvas_size, canvas_size), Image.Resampling.LANCZOS)
    png_bytes = _encode_png(img, optimize=True)

    if len(png_bytes) > MAX_OPENAI_IMAGE_BYTES:
        raise ImageValidationError(
            f"Image is too large ({_megabytes(len(png_bytes))}MB). Must be under 4MB."
        )
    return png_bytes


def correct_image_format(png_bytes: bytes, canvas_size: int = CANVAS_SIZE) -> bytes:
    """
    Composite the image onto a fresh white RGBA canvas.

    Used as the single retry when OpenAI rejects the input image.
    """
    img = load_image(png_bytes).convert("RGBA")
    img.thumbnail((canvas_size, canvas_size), Image.Resampling.LANCZOS)
    canvas = Image.new("RGBA", (canvas_size, canvas_size), WHITE)
    offset = ((canvas_size - img.width) // 2, (canvas_size - img.height) // 2)
    canvas.alpha_composite(img, dest=offset)
    return _encode_png(canvas, optimize=True)


def prepare_for_stability(img_bytes: bytes, preset: StabilityPreset) -> bytes:
    """
    Fit an upload into the square Stability canvas on a white background.

    When the preset reserves headroom the photo is shrunk into the lower part
    of the canvas, leaving a blank band at the top for the greeting text.
    """
    if len(img_bytes) > MAX_STABILITY_IMAGE_BYTES:
        raise ImageValidationError(
            f"Image is too large ({_megabytes(len(img_bytes))}MB). Must be under 10MB."
        )

    img = load_image(img_bytes).convert("RGBA")
    size = preset.canvas_size
    photo_height = size - preset.headroom
    if photo_height <= 0:
        raise ProcessingError(
            f"Preset {preset.name} leaves no room for the photo ({preset.headroom}px headroom)"
        )

    fitted = ImageOps.pad(
        img, (size, photo_height), method=Image.Resampling.LANCZOS, color=WHITE
    )
    canvas = Image.new("RGBA", (size, size), WHITE)
    canvas.alpha_composite(fitted, dest=(0, preset.headroom))
    return _encode_png(canvas.convert("RGB"))


def compress_png(png_bytes: bytes, limit: int = MAX_OPENAI_IMAGE_BYTES) -> bytes:
    if len(png_bytes) <= limit:
        return png_bytes

    img = load_image(png_bytes)
    compressed = _encode_png(img, optimize=True, compress_level=9)
    if len(compressed) > limit:
        raise ImageValidationError(
            "Image is too large for OpenAI processing. Please try again with a smaller image."
        )
    return compressed


def create_text_mask(layout: MaskLayout, size: int = CANVAS_SIZE) -> bytes:
    """
    Build the inpainting mask for the text pass.

    Black opaque pixels protect the person in the centre. The editable bands
    along the edges are white and fully transparent, which is what the
    OpenAI edit endpoint treats as editable.
    """
    protected = (0, 0, 0, 255)
    editable = (255, 255, 255, 0)

    mask = Image.new("RGBA", (size, size), protected)
    draw = ImageDraw.Draw(mask)
    draw.rectangle((0, 0, size - 1, layout.top - 1), fill=editable)
    draw.rectangle((0, size - layout.bottom, size - 1, size - 1), fill=editable)
    draw.rectangle((0, 0, layout.side - 1, size - 1), fill=editable)
    draw.rectangle((size - layout.side, 0, size - 1, size - 1), fill=editable)
    return _encode_png(mask)


def _load_font(size: int):
    for path in FONT_PATHS:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _draw_centered(draw: ImageDraw.ImageDraw, center_x: int, baseline_y: int, text: str,
                   font, fill: tuple, shadow_offset: int) -> None:
    bbox = draw.textbbox((0, 0), text, font=font)
    text_w = bbox[2] - bbox[0]
    text_h = bbox[3] - bbox[1]
    pos = (center_x - text_w // 2, baseline_y - text_h)
    draw.text((pos[0] + shadow_offset, pos[1] + shadow_offset), text, font=font,
              fill=(0, 0, 0, 160))
    draw.text(pos, text, font=font, fill=fill)


def overlay_greeting_text(png_bytes: bytes, message: str | None = None) -> bytes:
    """Draw the greeting locally when the OpenAI text pass is unavailable."""
    img = load_image(png_bytes).convert("RGBA")
    scale = img.width / float(CANVAS_SIZE)

    txt_layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(txt_layer)
    center_x = img.width // 2

    title_font = _load_font(max(int(80 * scale), 16))
    _draw_centered(draw, center_x, int(120 * scale), "EID MUBARAK!", title_font, GOLD,
                   shadow_offset=max(2, int(4 * scale)))

    if message and message.strip():
        subtitle_font = _load_font(max(int(28 * scale), 12))
        _draw_centered(draw, center_x, int(940 * scale), message.strip(), subtitle_font,
                       WHITE, shadow_offset=2)

    return _encode_png(Image.alpha_composite(img, txt_layer))


class TempWorkspace:
    """
    Scratch files of a single request.

    Every file written through the workspace is deleted by cleanup(), which
    runs when the with-block exits whether the request succeeded or not.
    """

    def __init__(self, prefix: str = "eid", directory: str | None = None):
        self.prefix = prefix
        self.directory = directory or TEMP_DIR
        self.paths: list[str] = []

    def write(self, label: str, data: bytes, suffix: str = ".png") -> str:
        path = os.path.join(
            self.directory, f"{self.prefix}-{label}-{uuid.uuid4().hex}{suffix}"
        )
        self.paths.append(path)
        with open(path, "wb") as f:
            f.write(data)
        return path

    def cleanup(self):
        for path in self.paths:
            try:
                if os.path.exists(path):
                    os.remove(path)
            except OSError as e:
                logger.error("Error deleting temporary file %s: %s", path, e)
        self.paths = []

    def __enter__(self) -> "TempWorkspace":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
