from __future__ import annotations

import base64
from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .constants import DEFAULT_MODEL_NAME, NO_FILE_LABEL, RESULT_PLACEHOLDER


class InputMode(str, Enum):
    UPLOAD = "upload"
    LYRICS = "lyrics"


class RequestMode(str, Enum):
    AUDIO = "audio"
    AUDIO_WITH_LYRICS = "audio_with_lyrics"
    LYRICS_ONLY = "lyrics_only"


class StagedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    mime_type: str
    data: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


class InputState(BaseModel):
    mode: InputMode = InputMode.UPLOAD
    staged_file: Optional[StagedFile] = None
    staged_lyrics: str = ""
    auxiliary_lyrics: str = ""


class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class MediaPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["media"] = "media"
    mime_type: str
    data: bytes = Field(repr=False)

    def base64_data(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


RequestPart = Union[TextPart, MediaPart]


class CritiqueRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: RequestMode
    model: str = DEFAULT_MODEL_NAME
    parts: Tuple[RequestPart, ...] = Field(default_factory=tuple)

    @property
    def audio_submitted(self) -> bool:
        return self.mode != RequestMode.LYRICS_ONLY

    @property
    def prompt_text(self) -> str:
        return "\n\n".join(part.text for part in self.parts if isinstance(part, TextPart))

    @property
    def media_parts(self) -> Tuple[MediaPart, ...]:
        return tuple(part for part in self.parts if isinstance(part, MediaPart))

    def to_wire(self) -> Dict[str, Any]:
        wire_parts = []
        for part in self.parts:
            if isinstance(part, MediaPart):
                wire_parts.append({"inlineData": {"mimeType": part.mime_type, "data": part.base64_data()}})
            else:
                wire_parts.append({"text": part.text})
        return {"model": self.model, "contents": {"parts": wire_parts}}


class CritiqueModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class AiDetection(CritiqueModel):
    is_detected: bool = False
    justification: str = ""


class MusicalAnalysis(CritiqueModel):
    instrumentation_and_arrangement: str = ""
    production_and_mix: str = ""
    composition_and_structure: str = ""
    overall_impression: str = ""


class ScoreEntry(CritiqueModel):
    category: str = ""
    score: Optional[float] = None
    max_score: Optional[float] = None
    justification: str = ""


class LyricalAnalysis(CritiqueModel):
    scorecard: Optional[Tuple[ScoreEntry, ...]] = None
    subtotal: Optional[float] = None
    penalties: Optional[float] = None
    final_score: Optional[float] = None
    score_lower_bound: Optional[float] = None
    score_upper_bound: Optional[float] = None
    interpretation: str = ""
    areas_for_improvement: str = ""


class CritiqueResult(CritiqueModel):
    is_instrumental: bool = False
    ai_generated_lyrics: Optional[AiDetection] = None
    ai_generated_music: Optional[AiDetection] = None
    musical_analysis: Optional[MusicalAnalysis] = None
    lyrical_analysis: Optional[LyricalAnalysis] = None


class SessionView(BaseModel):
    mode: InputMode = InputMode.UPLOAD
    selected_model: str = DEFAULT_MODEL_NAME
    file_label: str = NO_FILE_LABEL
    submit_enabled: bool = False
    loading: bool = False
    document_html: str = RESULT_PLACEHOLDER
    summary_html: str = ""
    summary_hidden: bool = True
    message: Optional[str] = None
