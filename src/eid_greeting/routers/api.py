import logging

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from eid_greeting.deps import get_openai_client, get_stability_client
from eid_greeting.errors import GreetingError, UnexpectedError
from eid_greeting.openai_api import OpenAIClient
from eid_greeting.schemas import (
    CombinedResponse,
    ErrorResponse,
    GreetingRequest,
    ImageResponse,
    MessagesRequest,
    MessagesResponse,
    PortraitRequest,
    UrlResponse,
)
from eid_greeting.services.generation import (
    generate_card,
    generate_combined,
    generate_portrait,
    generate_stability_card,
)
from eid_greeting.services.messages import generate_messages
from eid_greeting.stability import StabilityClient

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}

router = APIRouter()


async def _run(label: str, func, *args):
    try:
        return await run_in_threadpool(func, *args)
    except GreetingError as e:
        logger.error("%s failed: %s", label, e.message)
        raise
    except Exception as e:
        logger.exception("Unexpected error in %s: %s", label, e)
        raise UnexpectedError() from e


@router.post("/generate", response_model=ImageResponse, responses=ERROR_RESPONSES)
async def generate_image(
    req: GreetingRequest, client: OpenAIClient = Depends(get_openai_client)
):
    """Generate a greeting card with a single OpenAI edit."""
    url = await _run("generate", generate_card, client, req.image, req.message)
    return ImageResponse(image=url)


@router.post("/stability/generate", response_model=ImageResponse, responses=ERROR_RESPONSES)
async def generate_stability_image(
    req: GreetingRequest, client: StabilityClient = Depends(get_stability_client)
):
    """Generate a greeting card with Stability AI image-to-image."""
    data_uri = await _run(
        "stability/generate", generate_stability_card, client, req.image, req.message
    )
    return ImageResponse(image=data_uri)


@router.post(
    "/combined-generate",
    response_model=CombinedResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def combined_generate(
    req: GreetingRequest,
    stability_client: StabilityClient = Depends(get_stability_client),
    openai_client: OpenAIClient = Depends(get_openai_client),
):
    """Stability scene first, then OpenAI text with local fallbacks."""
    result = await _run(
        "combined-generate",
        generate_combined,
        stability_client,
        openai_client,
        req.image,
        req.message,
    )
    logger.info("Combined generation finished: %s", result.outcome.value)
    return CombinedResponse(image=result.image, note=result.note)


@router.post("/openai/generate-image", response_model=UrlResponse, responses=ERROR_RESPONSES)
async def openai_generate_image(
    req: PortraitRequest, client: OpenAIClient = Depends(get_openai_client)
):
    url = await _run(
        "openai/generate-image", generate_portrait, client, req.base64Image, req.prompt
    )
    return UrlResponse(url=url)


@router.post("/openai/generate-messages", response_model=MessagesResponse)
async def openai_generate_messages(
    req: MessagesRequest, client: OpenAIClient = Depends(get_openai_client)
):
    messages = await _run("openai/generate-messages", generate_messages, client, req.name)
    return MessagesResponse(messages=messages)


@router.get("/health")
async def health(
    stability_client: StabilityClient = Depends(get_stability_client),
    openai_client: OpenAIClient = Depends(get_openai_client),
):
    return {
        "status": "ok",
        "openai": openai_client.is_configured(),
        "stability": stability_client.is_configured(),
    }


def get_router():
    return router
