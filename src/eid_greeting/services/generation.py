"""
Servicios de generación de imágenes

Implementa la lógica de la aplicación relacionada con la generación de
felicitaciones a través de OpenAI y Stability AI, actuando como capa
intermedia entre los endpoints de la API y los clientes de cada proveedor.

Responsabilidades:
- Preparar la imagen subida para cada proveedor
- Reintentar una vez la edición de OpenAI con la imagen corregida
- Encadenar Stability y OpenAI en el flujo combinado con sus alternativas
- Devolver referencias de imagen listas para los endpoints
"""

import base64
import binascii
import logging

from eid_greeting.errors import GreetingError, ProcessingError, VendorError, classify_vendor_error
from eid_greeting.openai_api import OpenAIClient
from eid_greeting.prompts.card_prompts import (
    create_card_prompt,
    create_portrait_prompt,
    create_stability_card_prompt,
    create_stability_scene_prompt,
    create_text_prompt,
)
from eid_greeting.prompts.presets import CARD_MASK, CARD_PRESET, SCENE_PRESET, TEXT_MASK
from eid_greeting.schemas import CombinedResult, PipelineOutcome, StabilityPreset
from eid_greeting.services.images import (
    TempWorkspace,
    compress_png,
    correct_image_format,
    create_text_mask,
    overlay_greeting_text,
    prepare_for_openai,
    prepare_for_stability,
)
from eid_greeting.stability import StabilityClient
from eid_greeting.utils import decode_base64_image, encode_base64, to_data_uri

logger = logging.getLogger(__name__)

INVALID_INPUT_IMAGE = "Invalid input image"
OVERLAY_NOTE = "Used fallback text overlay"
WITHOUT_TEXT_NOTE = "Text addition failed, returning enhanced image only"


def _user_facing(error: VendorError) -> VendorError:
    return VendorError(classify_vendor_error(error.message), vendor=error.vendor, status_code=400)


def edit_with_format_correction(
    client: OpenAIClient,
    workspace: TempWorkspace,
    png_bytes: bytes,
    prompt: str,
    mask_path: str | None = None,
) -> str:
    """
    Run an OpenAI edit, retrying exactly once with a corrected image when
    OpenAI rejects the input image. Other failures are not retried.
    """
    image_path = workspace.write("image", png_bytes)
    try:
        return client.edit_image(image_path, prompt, mask_path)
    except VendorError as e:
        if INVALID_INPUT_IMAGE not in e.message:
            raise _user_facing(e) from e
        logger.info("Attempting image format correction...")

    corrected_path = workspace.write("image-corrected", correct_image_format(png_bytes))
    try:
        return client.edit_image(corrected_path, prompt, mask_path)
    except VendorError as e:
        raise _user_facing(e) from e


def generate_card(client: OpenAIClient, image: str | None, message: str | None = None) -> str:
    """Single-pass greeting card: OpenAI edits the border bands of the photo."""
    png_bytes = prepare_for_openai(decode_base64_image(image), square=True)
    prompt = create_card_prompt(message)

    with TempWorkspace("card") as workspace:
        mask_path = workspace.write("mask", create_text_mask(CARD_MASK))
        return edit_with_format_correction(client, workspace, png_bytes, prompt, mask_path)


def generate_portrait(client: OpenAIClient, image: str | None, extra: str | None = None) -> str:
    png_bytes = prepare_for_openai(decode_base64_image(image))
    prompt = create_portrait_prompt(extra)
    logger.debug("Enhanced prompt: %s", prompt)

    with TempWorkspace("portrait") as workspace:
        return edit_with_format_correction(client, workspace, png_bytes, prompt)


def generate_stability_card(
    client: StabilityClient,
    image: str | None,
    message: str | None = None,
    preset: StabilityPreset = CARD_PRESET,
) -> str:
    prepared = prepare_for_stability(decode_base64_image(image), preset)
    prompt = create_stability_card_prompt(message)
    logger.info("Sending image to Stability AI with prompt: %s...", prompt[:100])
    return to_data_uri(client.image_to_image(prepared, prompt, preset))


def _decode_artifact(artifact_b64: str) -> bytes:
    try:
        return base64.b64decode(artifact_b64)
    except (binascii.Error, ValueError) as e:
        raise ProcessingError(f"Invalid artifact returned by Stability AI: {e}") from e


def generate_combined(
    stability_client: StabilityClient,
    openai_client: OpenAIClient,
    image: str | None,
    message: str | None = None,
) -> CombinedResult:
    """
    Two-stage generation.

    Stage one (Stability) builds the festive scene; its failures propagate
    unchanged and nothing else runs. The text is then added by the first of
    these steps that succeeds:

    1. OpenAI text pass          -> FULL_SUCCESS
    2. local text overlay        -> OVERLAY_FALLBACK
    3. stage-one image unchanged -> WITHOUT_TEXT
    """
    prepared = prepare_for_stability(decode_base64_image(image), SCENE_PRESET)
    logger.info("Step 1: Processing with Stability AI...")
    scene_b64 = stability_client.image_to_image(
        prepared, create_stability_scene_prompt(message), SCENE_PRESET
    )

    with TempWorkspace("combined") as workspace:

        def add_text_with_openai() -> str:
            logger.info("Step 2: Adding text elements with OpenAI...")
            scene_png = compress_png(_decode_artifact(scene_b64))
            mask_path = workspace.write("text-mask", create_text_mask(TEXT_MASK))
            image_path = workspace.write("stability-result", scene_png)
            return openai_client.edit_image(image_path, create_text_prompt(message), mask_path)

        def add_text_overlay() -> str:
            logger.info("Falling back to manual text overlay")
            overlay = overlay_greeting_text(_decode_artifact(scene_b64), message)
            return to_data_uri(encode_base64(overlay))

        stages = [
            (PipelineOutcome.FULL_SUCCESS, add_text_with_openai, None),
            (PipelineOutcome.OVERLAY_FALLBACK, add_text_overlay, OVERLAY_NOTE),
        ]
        for outcome, stage, note in stages:
            try:
                return CombinedResult(image=stage(), outcome=outcome, note=note)
            except (GreetingError, OSError, ValueError) as e:
                logger.error("Combined generation step %s failed: %s", outcome.value, e)

    logger.info("Returning Stability AI result without text")
    return CombinedResult(
        image=to_data_uri(scene_b64),
        outcome=PipelineOutcome.WITHOUT_TEXT,
        note=WITHOUT_TEXT_NOTE,
    )
