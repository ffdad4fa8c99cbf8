from __future__ import annotations

from typing import List

from .constants import AVAILABLE_MODELS
from .errors import InvalidInputError
from .models import CritiqueRequest, InputMode, InputState, MediaPart, RequestMode, RequestPart, TextPart
from .prompts import AUDIO_PROMPT, AUDIO_WITH_LYRICS_PROMPT, LYRICS_ONLY_PROMPT


def resolve_request_mode(state: InputState) -> RequestMode:
    if state.mode == InputMode.UPLOAD:
        if state.staged_file is None:
            raise InvalidInputError("No audio file staged for upload mode")
        if state.auxiliary_lyrics.strip():
            return RequestMode.AUDIO_WITH_LYRICS
        return RequestMode.AUDIO
    if state.mode == InputMode.LYRICS:
        if not state.staged_lyrics.strip():
            raise InvalidInputError("No lyrics staged for lyrics mode")
        return RequestMode.LYRICS_ONLY
    raise InvalidInputError(f"Unknown input mode: {state.mode}")


def build_prompt_text(state: InputState, mode: RequestMode) -> str:
    if mode == RequestMode.AUDIO_WITH_LYRICS:
        return AUDIO_WITH_LYRICS_PROMPT.format(lyrics=state.auxiliary_lyrics.strip())
    if mode == RequestMode.AUDIO:
        return AUDIO_PROMPT
    return LYRICS_ONLY_PROMPT.format(lyrics=state.staged_lyrics)


def build_critique_request(state: InputState, model_name: str) -> CritiqueRequest:
    if model_name not in AVAILABLE_MODELS:
        raise InvalidInputError(f"Unknown model: {model_name}")

    mode = resolve_request_mode(state)
    parts: List[RequestPart] = [TextPart(text=build_prompt_text(state, mode))]
    if mode != RequestMode.LYRICS_ONLY:
        staged = state.staged_file
        parts.append(MediaPart(mime_type=staged.mime_type, data=staged.data))

    return CritiqueRequest(mode=mode, model=model_name, parts=tuple(parts))
