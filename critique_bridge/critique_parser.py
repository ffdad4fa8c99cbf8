from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .constants import SCORE_SCALE_MAX
from .errors import InconsistentResponseError, MalformedResponseError
from .logger_config import logger
from .models import AiDetection, CritiqueResult, LyricalAnalysis, MusicalAnalysis, ScoreEntry
from .schema import (
    CRITIQUE_RESPONSE_SCHEMA,
    KEY_AI_LYRICS,
    KEY_AI_MUSIC,
    KEY_IS_INSTRUMENTAL,
    KEY_LYRICAL_ANALYSIS,
    KEY_MUSICAL_ANALYSIS,
    KEY_SCORECARD,
    RUBRIC_MAX_SCORES,
    validate_against_schema,
)
from .utils import format_number, is_number, round_half_up, summarize_text

SCORE_TOLERANCE = 1e-6

MUSICAL_FIELDS = {
    "instrumentationAndArrangement": "instrumentation_and_arrangement",
    "productionAndMix": "production_and_mix",
    "compositionAndStructure": "composition_and_structure",
    "overallImpression": "overall_impression",
}

LYRICAL_NUMBER_FIELDS = {
    "subtotal": "subtotal",
    "penalties": "penalties",
    "finalScore": "final_score",
    "scoreLowerBound": "score_lower_bound",
    "scoreUpperBound": "score_upper_bound",
}

LYRICAL_TEXT_FIELDS = {
    "interpretation": "interpretation",
    "areasForImprovement": "areas_for_improvement",
}


def strip_code_fences(text: str) -> str:
    fence_start = text.find("```")
    if fence_start == -1:
        return text
    fence_end = text.rfind("```")
    if fence_end == fence_start:
        return text
    inner = text[fence_start + 3 : fence_end]
    if inner.lstrip().startswith("json"):
        inner = inner.lstrip()[4:]
    return inner.strip()


def decode_response(text: str) -> Dict[str, Any]:
    if not isinstance(text, str):
        raise MalformedResponseError("Response is not text", raw_text=str(text))
    sanitized = strip_code_fences(text.strip()).strip()
    try:
        data = json.loads(sanitized)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Invalid JSON from model: {exc}", raw_text=text) from exc
    if not isinstance(data, dict):
        raise MalformedResponseError("Model response root is not an object", raw_text=text)
    return data


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _number(value: Any) -> Optional[float]:
    return float(value) if is_number(value) else None


def normalize_ai_detection(raw: Any) -> Optional[AiDetection]:
    if not isinstance(raw, dict):
        return None
    return AiDetection(is_detected=raw.get("isDetected") is True, justification=_text(raw.get("justification")))


def normalize_musical_analysis(raw: Any) -> Optional[MusicalAnalysis]:
    if not isinstance(raw, dict):
        return None
    values = {field: _text(raw.get(key)) for key, field in MUSICAL_FIELDS.items()}
    return MusicalAnalysis(**values)


def normalize_score_entry(raw: Any) -> Optional[ScoreEntry]:
    if not isinstance(raw, dict):
        return None
    return ScoreEntry(
        category=_text(raw.get("category")),
        score=_number(raw.get("score")),
        max_score=_number(raw.get("maxScore")),
        justification=_text(raw.get("justification")),
    )


def normalize_lyrical_analysis(raw: Any) -> Optional[LyricalAnalysis]:
    if not isinstance(raw, dict):
        return None
    scorecard = None
    raw_scorecard = raw.get(KEY_SCORECARD)
    if isinstance(raw_scorecard, list):
        entries = (normalize_score_entry(item) for item in raw_scorecard)
        scorecard = tuple(entry for entry in entries if entry is not None)
    values: Dict[str, Any] = {"scorecard": scorecard}
    for key, field in LYRICAL_NUMBER_FIELDS.items():
        values[field] = _number(raw.get(key))
    for key, field in LYRICAL_TEXT_FIELDS.items():
        values[field] = _text(raw.get(key))
    return LyricalAnalysis(**values)


def normalize_critique(data: Dict[str, Any]) -> CritiqueResult:
    return CritiqueResult(
        is_instrumental=data.get(KEY_IS_INSTRUMENTAL) is True,
        ai_generated_lyrics=normalize_ai_detection(data.get(KEY_AI_LYRICS)),
        ai_generated_music=normalize_ai_detection(data.get(KEY_AI_MUSIC)),
        musical_analysis=normalize_musical_analysis(data.get(KEY_MUSICAL_ANALYSIS)),
        lyrical_analysis=normalize_lyrical_analysis(data.get(KEY_LYRICAL_ANALYSIS)),
    )


def _in_scale(value: float) -> bool:
    return 0 <= value <= SCORE_SCALE_MAX


def check_lyrical_numbers(lyrical: LyricalAnalysis) -> List[str]:
    issues: List[str] = []
    scorecard = lyrical.scorecard or ()

    for idx, entry in enumerate(scorecard):
        if entry.score is None or entry.max_score is None:
            issues.append(f"scorecard[{idx}]:missing_score")
            continue
        if entry.score < 0 or entry.score > entry.max_score:
            issues.append(
                f"scorecard[{idx}]:score_out_of_range:{format_number(entry.score)}/{format_number(entry.max_score)}"
            )
        rubric_max = RUBRIC_MAX_SCORES.get(entry.category)
        if rubric_max is not None and entry.max_score != rubric_max:
            issues.append(f"scorecard[{idx}]:unexpected_max_score:{entry.category}")

    scores = [entry.score for entry in scorecard if entry.score is not None]
    if lyrical.subtotal is not None and scorecard and len(scores) == len(scorecard):
        expected_subtotal = sum(scores)
        if abs(expected_subtotal - lyrical.subtotal) > SCORE_TOLERANCE:
            issues.append(
                f"subtotal_mismatch:{format_number(lyrical.subtotal)}!={format_number(expected_subtotal)}"
            )

    if lyrical.penalties is not None and lyrical.penalties < 0:
        issues.append(f"negative_penalties:{format_number(lyrical.penalties)}")

    if lyrical.subtotal is not None and lyrical.penalties is not None and lyrical.final_score is not None:
        expected_final = round_half_up(lyrical.subtotal - lyrical.penalties)
        if abs(lyrical.final_score - expected_final) > SCORE_TOLERANCE:
            issues.append(f"final_score_mismatch:{format_number(lyrical.final_score)}!={expected_final}")

    bounds = (lyrical.score_lower_bound, lyrical.final_score, lyrical.score_upper_bound)
    for name, value in zip(("score_lower_bound", "final_score", "score_upper_bound"), bounds):
        if value is not None and not _in_scale(value):
            issues.append(f"{name}_out_of_scale:{format_number(value)}")
    low, final, high = bounds
    if low is not None and final is not None and high is not None and not (low <= final <= high):
        issues.append(
            f"final_score_outside_interval:{format_number(low)}<={format_number(final)}<={format_number(high)}"
        )

    return issues


def check_consistency(result: CritiqueResult, audio_submitted: bool) -> List[str]:
    issues: List[str] = []
    if not audio_submitted:
        if result.is_instrumental:
            issues.append("instrumental_without_audio")
        if result.musical_analysis is not None:
            issues.append("musical_analysis_without_audio")
        if result.ai_generated_music is not None:
            issues.append("ai_music_detection_without_audio")
    elif result.musical_analysis is None:
        issues.append("missing_musical_analysis")
    else:
        for key, field in MUSICAL_FIELDS.items():
            if not getattr(result.musical_analysis, field).strip():
                issues.append(f"empty_musical_field:{key}")

    if result.is_instrumental:
        if result.lyrical_analysis is not None:
            issues.append("lyrical_analysis_for_instrumental")
    elif result.lyrical_analysis is None:
        issues.append("missing_lyrical_analysis")

    if result.lyrical_analysis is not None:
        issues.extend(check_lyrical_numbers(result.lyrical_analysis))
    return issues


def parse_critique(text: str, audio_submitted: bool, strict: bool = False) -> CritiqueResult:
    data = decode_response(text)

    schema_errors = validate_against_schema(data, CRITIQUE_RESPONSE_SCHEMA)
    if schema_errors:
        logger.warning("Critique response schema issues: %s", schema_errors)

    result = normalize_critique(data)
    issues = check_consistency(result, audio_submitted)
    if issues:
        if strict:
            logger.error("Critique response rejected: issues=%s raw=%s", issues, summarize_text(text))
            raise InconsistentResponseError("Critique response is inconsistent with the request", issues=issues)
        logger.warning("Critique response consistency issues (rendering anyway): %s", issues)
    return result
