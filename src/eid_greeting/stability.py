"""
Cliente para la interacción con Stability AI.

Este módulo contiene toda la comunicación con la API de Stability AI,
proporcionando un método para enviar una imagen con su prompt y obtener el
artefacto generado.

Responsabilidades:
- Construir la petición multipart de image-to-image
- Enviar la petición con la clave de API configurada
- Extraer el artefacto en base64 de la respuesta
- Traducir los errores del proveedor a VendorError
"""

import logging

import requests

from eid_greeting.errors import ConfigurationError, VendorError
from eid_greeting.schemas import StabilityPreset

logger = logging.getLogger(__name__)


class StabilityClient:

    def __init__(
        self,
        api_key: str | None,
        api_host: str,
        engine_id: str,
        session: requests.Session | None = None,
        timeout: int = 120,
    ):
        self.api_key = api_key
        self.engine_id = engine_id
        self.image_to_image_url = (
            f"{api_host.rstrip('/')}/v1/generation/{engine_id}/image-to-image"
        )
        self.session = session or requests.Session()
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def build_form(self, prompt: str, preset: StabilityPreset) -> dict:
        data = {
            "text_prompts[0][text]": prompt,
            "text_prompts[0][weight]": str(preset.prompt_weight),
            "text_prompts[1][text]": preset.negative_prompt,
            "text_prompts[1][weight]": str(preset.negative_weight),
            "init_image_mode": "IMAGE_STRENGTH",
            "image_strength": str(preset.image_strength),
            "cfg_scale": str(preset.cfg_scale),
            "samples": "1",
            "steps": str(preset.steps),
        }
        if preset.style_preset:
            data["style_preset"] = preset.style_preset
        return data

    def image_to_image(self, image_bytes: bytes, prompt: str, preset: StabilityPreset) -> str:
        """
        Submit one image-to-image job and return the base64 of its single artifact.
        """
        if not self.api_key:
            raise ConfigurationError("STABILITY_API_KEY is not set in environment variables")

        files = {"init_image": ("image.png", image_bytes, "image/png")}
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        logger.info(
            "Sending image to Stability AI (preset=%s, cfg_scale=%s, image_strength=%s, steps=%s)",
            preset.name,
            preset.cfg_scale,
            preset.image_strength,
            preset.steps,
        )
        try:
            resp = self.session.post(
                self.image_to_image_url,
                headers=headers,
                data=self.build_form(prompt, preset),
                files=files,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("Error sending image to Stability AI: %s", e)
            raise VendorError(f"Stability API error: {e}", vendor="stability") from e

        if not resp.ok:
            try:
                error_data = resp.json()
            except ValueError:
                error_data = {}
            logger.error("Stability API Error: %s %s", resp.status_code, error_data)
            message = error_data.get("message") if isinstance(error_data, dict) else None
            raise VendorError(
                f"Stability API error: {message or resp.reason}", vendor="stability"
            )

        try:
            artifacts = resp.json().get("artifacts") or []
        except (ValueError, AttributeError) as e:
            raise VendorError(
                f"Stability API error: unreadable response ({e})", vendor="stability"
            ) from e
        if not artifacts or not artifacts[0].get("base64"):
            raise VendorError("No image generated by Stability AI", vendor="stability")

        logger.info("Received response from Stability AI")
        return artifacts[0]["base64"]

    def close(self):
        self.session.close()
