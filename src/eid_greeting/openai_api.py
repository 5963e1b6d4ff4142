"""
Cliente para la interacción con OpenAI.

Envuelve el SDK oficial para las dos operaciones que usa la aplicación:
la edición de imágenes con máscara y la generación de mensajes con un
modelo de chat en modo JSON.
"""

import logging

import openai

from eid_greeting.errors import ConfigurationError, VendorError

logger = logging.getLogger(__name__)


class OpenAIClient:

    def __init__(
        self,
        api_key: str | None,
        image_model: str = "dall-e-2",
        chat_model: str = "gpt-3.5-turbo",
        image_size: str = "1024x1024",
        timeout: int = 120,
    ):
        self.image_model = image_model
        self.chat_model = chat_model
        self.image_size = image_size
        self._client = openai.OpenAI(api_key=api_key, timeout=timeout) if api_key else None

    def is_configured(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> openai.OpenAI:
        if self._client is None:
            raise ConfigurationError("OPENAI_API_KEY is not set in environment variables")
        return self._client

    def edit_image(self, image_path: str, prompt: str, mask_path: str | None = None) -> str:
        """Run one image edit and return the URL of the generated image."""
        client = self.client
        try:
            with open(image_path, "rb") as image_file:
                kwargs = {
                    "model": self.image_model,
                    "image": image_file,
                    "prompt": prompt,
                    "n": 1,
                    "size": self.image_size,
                    "response_format": "url",
                }
                if mask_path:
                    with open(mask_path, "rb") as mask_file:
                        response = client.images.edit(mask=mask_file, **kwargs)
                else:
                    response = client.images.edit(**kwargs)
        except openai.OpenAIError as e:
            logger.error("OpenAI image edit failed: %s", e)
            raise VendorError(str(e), vendor="openai") from e

        url = response.data[0].url if response.data else None
        if not url:
            raise VendorError("No image generated by OpenAI", vendor="openai")
        logger.info("Received response from OpenAI: %s...", url[:50])
        return url

    def complete_json(self, prompt: str) -> str:
        """Ask the chat model for a JSON object and return the raw content."""
        client = self.client
        try:
            response = client.chat.completions.create(
                model=self.chat_model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            logger.error("OpenAI chat completion failed: %s", e)
            raise VendorError(str(e), vendor="openai") from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def close(self):
        if self._client is not None:
            self._client.close()
