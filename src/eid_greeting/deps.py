"""
Proporciona instancias compartidas de servicios y clientes que pueden ser inyectados en cualquier punto de la aplicación

Gestiona:
- Cliente de Stability AI
- Cliente de OpenAI

Los clientes se crean una sola vez por proceso durante el arranque de la
aplicación y se guardan en app.state; los endpoints los reciben como
dependencias de FastAPI, lo que permite sustituirlos en los tests.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Request

from eid_greeting import config
from eid_greeting.openai_api import OpenAIClient
from eid_greeting.stability import StabilityClient

logger = logging.getLogger(__name__)


def build_stability_client() -> StabilityClient:
    return StabilityClient(
        api_key=config.STABILITY_API_KEY,
        api_host=config.STABILITY_API_HOST,
        engine_id=config.STABILITY_ENGINE_ID,
        timeout=config.REQUEST_TIMEOUT,
    )


def build_openai_client() -> OpenAIClient:
    return OpenAIClient(
        api_key=config.OPENAI_API_KEY,
        image_model=config.OPENAI_IMAGE_MODEL,
        chat_model=config.OPENAI_CHAT_MODEL,
        image_size=config.OPENAI_IMAGE_SIZE,
        timeout=config.REQUEST_TIMEOUT,
    )


@asynccontextmanager
async def lifespan(app):
    app.state.stability_client = build_stability_client()
    app.state.openai_client = build_openai_client()
    if not app.state.stability_client.is_configured():
        logger.warning("STABILITY_API_KEY is not set; Stability endpoints will fail")
    if not app.state.openai_client.is_configured():
        logger.warning("OPENAI_API_KEY is not set; OpenAI endpoints will fail")
    yield

    app.state.stability_client.close()
    app.state.openai_client.close()
    logger.info("Vendor clients closed.")


def get_stability_client(request: Request) -> StabilityClient:
    return request.app.state.stability_client


def get_openai_client(request: Request) -> OpenAIClient:
    return request.app.state.openai_client
