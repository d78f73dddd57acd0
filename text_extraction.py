"""
Recognize the wordmark of a logo with a multimodal OpenAI model.

One request per call, no retries. Any failure surfaces as ServiceError.
"""

import base64
import logging
from typing import Optional

import openai
from pydantic import BaseModel, ValidationError

from errors import ServiceError
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

INSTRUCTION = "Can you extract the text or letters from this logo?"
RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "text_reasoning",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {"output": {"type": "string"}},
            "required": ["output"],
            "additionalProperties": False,
        },
    },
}


class TextReasoning(BaseModel):
    output: str


def make_client(settings: Optional[Settings] = None) -> openai.OpenAI:
    """Create an OpenAI client from settings."""
    settings = settings or get_settings()
    if not settings.openai_api_key:
        raise ServiceError("OPENAI_API_KEY is not configured")

    kwargs = {"api_key": settings.openai_api_key}
    if settings.openai_timeout is not None:
        kwargs["timeout"] = settings.openai_timeout
    return openai.OpenAI(**kwargs)


def to_data_url(data: bytes, content_type: str) -> str:
    encoded = base64.b64encode(data).decode('utf-8')
    return f"data:{content_type};base64,{encoded}"


def build_messages(data_url: str) -> list[dict]:
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": INSTRUCTION},
                {"type": "image_url", "image_url": {"url": data_url}},
            ],
        }
    ]


def parse_response(response) -> str:
    """
    Pull the recognized text out of a chat completion.

    Raises:
        ServiceError: If the completion has no content or does not match the schema
    """
    if not response.choices:
        raise ServiceError("Text extraction returned no choices")

    content = response.choices[0].message.content
    if not content:
        raise ServiceError("Text extraction returned an empty message")

    try:
        return TextReasoning.model_validate_json(content).output
    except ValidationError as e:
        raise ServiceError(f"Text extraction returned an unusable payload: {e}") from e


def extract_logo_text(data: bytes, content_type: str, client: Optional[openai.OpenAI] = None,
                      model: Optional[str] = None) -> str:
    """
    Ask the model for the text or letters in a logo.

    Args:
        data: Raw image bytes
        content_type: MIME type of the image, used in the data URL
        client: OpenAI client, created from settings if omitted
        model: Model name, settings.openai_model if omitted

    Returns:
        The recognized text

    Raises:
        ServiceError: If the request fails or the response is unusable
    """
    client = client or make_client()
    model = model or get_settings().openai_model

    try:
        response = client.chat.completions.create(
            model=model,
            messages=build_messages(to_data_url(data, content_type)),
            response_format=RESPONSE_FORMAT,
        )
    except openai.OpenAIError as e:
        logger.error("Text extraction request failed: %s", e)
        raise ServiceError(f"Text extraction request failed: {e}") from e

    text = parse_response(response)
    logger.info("Extracted logo text: %r", text)
    return text
