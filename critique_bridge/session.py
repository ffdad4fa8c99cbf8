from __future__ import annotations

import html
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

from . import input_state
from .constants import (
    AVAILABLE_MODELS,
    DEFAULT_MODEL_NAME,
    INCONSISTENT_RESPONSE_MESSAGE,
    INVALID_INPUT_MESSAGE,
    PARSE_FAILURE_MESSAGE,
    REMOTE_FAILURE_MESSAGE,
    RESULT_PLACEHOLDER,
    strict_consistency_enabled,
)
from .critique_parser import parse_critique
from .critique_renderer import render_critique, render_score_summary
from .errors import (
    InconsistentResponseError,
    InvalidInputError,
    MalformedResponseError,
    RemoteServiceError,
    SubmissionInProgressError,
)
from .llm_client import request_critique
from .logger_config import logger
from .models import CritiqueRequest, InputMode, InputState, SessionView
from .prompt_builder import build_critique_request

Requester = Callable[[CritiqueRequest], Awaitable[str]]


class CritiqueSession:
    def __init__(self, requester: Optional[Requester] = None, strict: Optional[bool] = None) -> None:
        self.state = InputState()
        self.selected_model = DEFAULT_MODEL_NAME
        self.view = SessionView()
        self._requester = requester or request_critique
        self._strict = strict_consistency_enabled() if strict is None else strict
        self._in_flight = False
        self.refresh()

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def refresh(self) -> SessionView:
        self.view.mode = self.state.mode
        self.view.selected_model = self.selected_model
        self.view.file_label = input_state.file_label(self.state)
        self.view.submit_enabled = not self._in_flight and input_state.can_submit(self.state)
        return self.view

    def _ensure_idle(self) -> None:
        if self._in_flight:
            raise SubmissionInProgressError("A critique submission is already in progress")

    def select_mode(self, mode: InputMode) -> SessionView:
        self._ensure_idle()
        input_state.select_mode(self.state, mode)
        return self.refresh()

    def select_model(self, model_name: str) -> SessionView:
        self._ensure_idle()
        if model_name not in AVAILABLE_MODELS:
            raise InvalidInputError(f"Unknown model: {model_name}")
        self.selected_model = model_name
        return self.refresh()

    def stage_file(self, name: str, mime_type: str, data: bytes) -> SessionView:
        self._ensure_idle()
        self.view.message = input_state.stage_file(self.state, name, mime_type, data)
        return self.refresh()

    def clear_file(self) -> SessionView:
        self._ensure_idle()
        input_state.clear_file(self.state)
        return self.refresh()

    def set_lyrics(self, text: str) -> SessionView:
        self._ensure_idle()
        input_state.set_lyrics(self.state, text)
        return self.refresh()

    def set_auxiliary_lyrics(self, text: str) -> SessionView:
        self._ensure_idle()
        input_state.set_auxiliary_lyrics(self.state, text)
        return self.refresh()

    @asynccontextmanager
    async def submission(self) -> AsyncIterator[InputState]:
        self._ensure_idle()
        self._in_flight = True
        self.view.submit_enabled = False
        self.view.loading = True
        self.view.message = None
        self.view.document_html = RESULT_PLACEHOLDER
        self.view.summary_html = ""
        self.view.summary_hidden = True
        try:
            yield self.state.model_copy(deep=True)
        finally:
            self._in_flight = False
            self.view.loading = False
            self.refresh()

    def _show_error(self, message: str) -> None:
        self.view.message = message
        self.view.document_html = html.escape(message)
        self.view.summary_html = ""
        self.view.summary_hidden = True

    async def _fetch(self, request: CritiqueRequest) -> str:
        try:
            return await self._requester(request)
        except RemoteServiceError:
            raise
        except Exception as exc:
            raise RemoteServiceError(f"Critique request failed: {exc!r}", model=request.model) from exc

    async def submit(self) -> SessionView:
        async with self.submission() as snapshot:
            try:
                request = build_critique_request(snapshot, self.selected_model)
                text = await self._fetch(request)
                result = parse_critique(text, request.audio_submitted, strict=self._strict)
                document_html = await render_critique(result)
                summary_html = render_score_summary(result)
            except InvalidInputError as exc:
                logger.warning("Submission rejected: %s", exc)
                self._show_error(INVALID_INPUT_MESSAGE)
            except RemoteServiceError as exc:
                logger.error("Critique request failed: %s (cause: %r)", exc, exc.__cause__)
                self._show_error(REMOTE_FAILURE_MESSAGE)
            except MalformedResponseError as exc:
                logger.error("Failed to parse JSON response from AI: %s", exc)
                logger.error("Raw AI response: %s", exc.raw_text)
                self._show_error(PARSE_FAILURE_MESSAGE)
            except InconsistentResponseError as exc:
                logger.error("Inconsistent AI response: %s", exc.issues)
                self._show_error(INCONSISTENT_RESPONSE_MESSAGE)
            else:
                self.view.document_html = document_html
                self.view.summary_html = summary_html
                self.view.summary_hidden = not summary_html
        return self.view
