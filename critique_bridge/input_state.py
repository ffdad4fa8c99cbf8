from __future__ import annotations

from typing import Optional

from .constants import (
    ACCEPTED_MIME_PREFIX,
    FILE_TOO_LARGE_MESSAGE,
    INVALID_FILE_TYPE_MESSAGE,
    MAX_FILE_SIZE_BYTES,
    NO_FILE_LABEL,
)
from .logger_config import logger
from .models import InputMode, InputState, StagedFile


def validate_audio_file(mime_type: str, size: int) -> Optional[str]:
    if size > MAX_FILE_SIZE_BYTES:
        return FILE_TOO_LARGE_MESSAGE
    if not (mime_type or "").startswith(ACCEPTED_MIME_PREFIX):
        return INVALID_FILE_TYPE_MESSAGE
    return None


def select_mode(state: InputState, mode: InputMode) -> None:
    state.mode = InputMode(mode)


def clear_file(state: InputState) -> None:
    state.staged_file = None


def stage_file(state: InputState, name: str, mime_type: str, data: bytes) -> Optional[str]:
    """Stage an audio file, or reset the staged file and return the rejection message."""
    rejection = validate_audio_file(mime_type, len(data))
    if rejection:
        logger.info("Rejected file: name=%s mime=%s size=%d reason=%s", name, mime_type, len(data), rejection)
        clear_file(state)
        return rejection
    state.staged_file = StagedFile(name=name, mime_type=mime_type, data=data)
    logger.info("Staged file: name=%s mime=%s size=%d", name, mime_type, len(data))
    return None


def set_lyrics(state: InputState, text: str) -> None:
    state.staged_lyrics = text or ""


def set_auxiliary_lyrics(state: InputState, text: str) -> None:
    state.auxiliary_lyrics = text or ""


def can_submit(state: InputState) -> bool:
    if state.mode == InputMode.LYRICS:
        return bool(state.staged_lyrics.strip())
    return state.staged_file is not None


def file_label(state: InputState) -> str:
    if state.staged_file is None:
        return NO_FILE_LABEL
    return state.staged_file.name
