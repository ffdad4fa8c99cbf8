from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .constants import DEFAULT_TEMPERATURE, MODEL_TEMPERATURES, RESPONSE_MIME_TYPE, get_api_key
from .errors import RemoteServiceError
from .logger_config import logger
from .models import CritiqueRequest, MediaPart
from .prompts import SYSTEM_INSTRUCTION
from .schema import CRITIQUE_RESPONSE_SCHEMA
from .utils import summarize_text


def resolve_temperature(model_name: str) -> float:
    return MODEL_TEMPERATURES.get(model_name, DEFAULT_TEMPERATURE)


def create_client(api_key: Optional[str] = None) -> genai.Client:
    key = api_key or get_api_key()
    if not key:
        logger.error("Gemini client requires an API key but none is configured")
        raise RemoteServiceError("Missing GEMINI_API_KEY")
    return genai.Client(api_key=key)


def build_contents(request: CritiqueRequest) -> types.Content:
    parts: List[types.Part] = []
    for part in request.parts:
        if isinstance(part, MediaPart):
            parts.append(types.Part.from_bytes(data=part.data, mime_type=part.mime_type))
        else:
            parts.append(types.Part.from_text(text=part.text))
    return types.Content(role="user", parts=parts)


def build_generation_config(
    temperature: float,
    schema: Optional[Dict[str, Any]] = None,
) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        system_instruction=SYSTEM_INSTRUCTION,
        temperature=temperature,
        response_mime_type=RESPONSE_MIME_TYPE,
        response_schema=schema if schema is not None else CRITIQUE_RESPONSE_SCHEMA,
    )


async def request_critique(
    request: CritiqueRequest,
    client: Optional[Any] = None,
    schema: Optional[Dict[str, Any]] = None,
) -> str:
    model_name = request.model
    temperature = resolve_temperature(model_name)
    logger.info(
        "Critique request: mode=%s model=%s temperature=%s media_parts=%d",
        request.mode.value,
        model_name,
        temperature,
        len(request.media_parts),
    )

    if client is None:
        client = create_client()

    try:
        response = await client.aio.models.generate_content(
            model=model_name,
            contents=build_contents(request),
            config=build_generation_config(temperature, schema),
        )
    except genai_errors.APIError as exc:
        logger.error("Gemini API error: model=%s code=%s %s", model_name, exc.code, exc)
        raise RemoteServiceError(f"Gemini API error: {exc.code}", model=model_name) from exc
    except httpx.HTTPError as exc:
        logger.error("Gemini connection error: model=%s %s", model_name, exc)
        raise RemoteServiceError(f"Gemini connection error: {exc}", model=model_name) from exc
    except Exception as exc:
        logger.error("Gemini request failed: model=%s %r", model_name, exc)
        raise RemoteServiceError(f"Gemini request failed: {exc}", model=model_name) from exc

    text = getattr(response, "text", None)
    if not text:
        logger.error("Gemini response missing text: model=%s", model_name)
        raise RemoteServiceError("Gemini response missing text", model=model_name)

    logger.info("Critique response received: %d chars", len(text))
    logger.info("Critique response preview: %s", summarize_text(text))
    return text
