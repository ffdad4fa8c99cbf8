from __future__ import annotations

import os

APP_NAME = "Critique Bridge"

DEFAULT_BRIDGE_HOST = "127.0.0.1"
DEFAULT_BRIDGE_PORT = 8010

MAX_FILE_SIZE_MB = 10
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
ACCEPTED_MIME_PREFIX = "audio/"
RESPONSE_MIME_TYPE = "application/json"

DEFAULT_MODEL_NAME = "gemini-2.5-flash"
PRO_MODEL_NAME = "gemini-2.5-pro"
AVAILABLE_MODELS = (DEFAULT_MODEL_NAME, PRO_MODEL_NAME)

DEFAULT_TEMPERATURE = 0.0
MODEL_TEMPERATURES = {
    PRO_MODEL_NAME: 0.1,
}

SCORE_SCALE_MAX = 100
LOG_PREVIEW_CHARS = 400

NO_FILE_LABEL = "No file selected"
RESULT_PLACEHOLDER = "Your music critique will appear here."

FILE_TOO_LARGE_MESSAGE = f"File is too large. Please select a file smaller than {MAX_FILE_SIZE_MB} MB."
INVALID_FILE_TYPE_MESSAGE = "Invalid file type. Please select an audio file."
INVALID_INPUT_MESSAGE = "No valid input provided. Upload an audio file or paste lyrics before submitting."
REMOTE_FAILURE_MESSAGE = (
    "An error occurred while analyzing the song. The file might be corrupted or exceed the "
    f"{MAX_FILE_SIZE_MB}MB size limit. Please check the console for details and try again."
)
PARSE_FAILURE_MESSAGE = (
    "An error occurred while parsing the AI response. The response may not be valid JSON. "
    "Please check the console for details."
)
INCONSISTENT_RESPONSE_MESSAGE = (
    "The AI response was inconsistent with the submitted input and was discarded. "
    "Please check the console for details and try again."
)


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_api_key() -> str | None:
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def get_bridge_host() -> str:
    return os.getenv("CRITIQUE_BRIDGE_HOST", DEFAULT_BRIDGE_HOST)


def get_bridge_port() -> int:
    return int(os.getenv("CRITIQUE_BRIDGE_PORT", str(DEFAULT_BRIDGE_PORT)))


def strict_consistency_enabled() -> bool:
    return env_flag("CRITIQUE_STRICT_CONSISTENCY")
