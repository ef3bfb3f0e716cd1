"""Google Gemini vision API wrapper with error handling."""

import logging

from google import genai
from google.genai import types

from config import settings
from models.schemas import GenerationConfig

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def to_content_config(config: GenerationConfig) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        temperature=config.creativity_level,
        top_k=config.top_k,
        top_p=config.top_p,
        candidate_count=config.candidate_count,
        max_output_tokens=config.max_output_length,
        seed=config.seed,
    )


async def generate_analysis(
    image_bytes: bytes,
    mime_type: str,
    prompt: str,
    config: GenerationConfig,
) -> str | None:
    """Send an image and prompt to Gemini and return the response text.

    Returns ``None`` when Gemini is not configured, the call fails or the
    response carries no text.
    """
    client = get_client()
    if client is None:
        return None

    try:
        response = client.models.generate_content(
            model=settings.gemini_model,
            contents=[
                types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                prompt,
            ],
            config=to_content_config(config),
        )
    except Exception as e:
        logger.error("Gemini API error: %s", e)
        return None

    text = response.text
    if not text or not text.strip():
        logger.warning("Gemini returned an empty response")
        return None
    return text.strip()
