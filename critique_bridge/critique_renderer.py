from __future__ import annotations

from typing import List, Optional

from .constants import SCORE_SCALE_MAX
from .html_utils import markdown_to_html, sanitize_document, sanitize_html
from .models import AiDetection, CritiqueResult, LyricalAnalysis, MusicalAnalysis
from .prompts import interpretation_for_score
from .utils import format_number

MISSING_NUMBER = "?"

MUSICAL_SUBSECTIONS = (
    ("Instrumentation & Arrangement", "instrumentation_and_arrangement"),
    ("Production & Mix", "production_and_mix"),
    ("Composition & Structure", "composition_and_structure"),
    ("Overall Impression", "overall_impression"),
)

INSTRUMENTAL_NOTICE = "<p><em>Instrumental track detected. Lyrical analysis has been skipped.</em></p>"

AI_MUSIC_DETECTED = (
    '<div class="ai-detection-summary">'
    "<p><strong>AI Music Detected:</strong> Our analysis suggests the musical composition may have been "
    "generated or heavily assisted by AI.</p>"
    "<p>{justification}</p>"
    "</div>"
)
AI_MUSIC_NEUTRAL = (
    '<div class="ai-detection-summary neutral">'
    "<p><strong>AI Music Detection:</strong> No clear indicators of AI generation were found in the "
    "musical composition.</p>"
    "</div>"
)
AI_LYRICS_DETECTED = (
    '<div class="ai-detection-summary">'
    "<p><strong>AI Lyrics Detected:</strong> Our analysis suggests the lyrics may have been generated or "
    "heavily assisted by AI.</p>"
    "<p>{justification}</p>"
    "</div>"
)
AI_LYRICS_NEUTRAL = (
    '<div class="ai-detection-summary neutral">'
    "<p><strong>AI Lyrics Detection:</strong> No clear indicators of AI generation were found in the lyrics.</p>"
    "</div>"
)


def display_number(value: Optional[float]) -> str:
    if value is None:
        return MISSING_NUMBER
    return format_number(value)


def render_detection_banner(detection: Optional[AiDetection], detected_template: str, neutral: str) -> str:
    if detection is not None and detection.is_detected:
        return detected_template.format(justification=sanitize_html(detection.justification))
    return neutral


async def render_musical_section(analysis: MusicalAnalysis, detection: Optional[AiDetection]) -> str:
    parts = ["<h2>Musical Analysis</h2>"]
    parts.append(render_detection_banner(detection, AI_MUSIC_DETECTED, AI_MUSIC_NEUTRAL))
    for heading, field in MUSICAL_SUBSECTIONS:
        value = getattr(analysis, field)
        if not value:
            continue
        parts.append(f"<h3>{heading}</h3>")
        parts.append(await markdown_to_html(value))
    return "".join(parts)


def render_score_lines(lyrical: LyricalAnalysis) -> List[str]:
    lines = ["<h3>Final Score & Interpretation</h3>"]
    if lyrical.subtotal is not None:
        lines.append(f"<p><strong>Subtotal:</strong> {format_number(lyrical.subtotal)} / {SCORE_SCALE_MAX}</p>")
    if lyrical.penalties is not None and lyrical.penalties > 0:
        lines.append(f"<p><strong>Penalties:</strong> -{format_number(lyrical.penalties)}</p>")
    if lyrical.final_score is not None:
        lines.append(f"<p><strong>Final Score:</strong> {format_number(lyrical.final_score)} / {SCORE_SCALE_MAX}</p>")
    if lyrical.score_lower_bound is not None and lyrical.score_upper_bound is not None:
        lines.append(
            "<p><strong>Confidence Interval:</strong> "
            f"{format_number(lyrical.score_lower_bound)} - {format_number(lyrical.score_upper_bound)}</p>"
        )

    interpretation = lyrical.interpretation
    if not interpretation and lyrical.final_score is not None:
        interpretation = interpretation_for_score(lyrical.final_score)
    if interpretation:
        lines.append(f"<blockquote>{sanitize_html(interpretation)}</blockquote>")
    return lines


async def render_lyrical_section(result: CritiqueResult) -> str:
    if result.is_instrumental:
        return "<h2>Lyrical Analysis</h2>" + INSTRUMENTAL_NOTICE

    lyrical = result.lyrical_analysis
    if lyrical is None:
        return ""

    parts = ["<h2>Lyrical Analysis</h2>"]
    parts.append(render_detection_banner(result.ai_generated_lyrics, AI_LYRICS_DETECTED, AI_LYRICS_NEUTRAL))

    for entry in lyrical.scorecard or ():
        parts.append(
            f"<h4>{entry.category} ({display_number(entry.score)} / {display_number(entry.max_score)})</h4>"
        )
        parts.append(await markdown_to_html(entry.justification))

    parts.extend(render_score_lines(lyrical))

    if lyrical.areas_for_improvement:
        parts.append("<h3>Areas for Improvement</h3>")
        parts.append(await markdown_to_html(lyrical.areas_for_improvement))
    return "".join(parts)


async def render_critique(result: CritiqueResult) -> str:
    html = ""
    if result.musical_analysis is not None:
        html += await render_musical_section(result.musical_analysis, result.ai_generated_music)
    html += await render_lyrical_section(result)
    return sanitize_document(html)


def render_score_summary(result: CritiqueResult) -> str:
    if result.is_instrumental or result.lyrical_analysis is None:
        return ""
    lyrical = result.lyrical_analysis
    if lyrical.scorecard is None:
        return ""

    rows = ["<h3>Score Summary</h3>"]
    for entry in lyrical.scorecard:
        rows.append(
            '<div class="score-item">'
            f'<span class="category">{sanitize_html(entry.category)}</span>'
            f'<span class="score">{display_number(entry.score)} / {display_number(entry.max_score)}</span>'
            "</div>"
        )
    rows.append('<div class="score-summary-divider"></div>')
    rows.append(
        '<div class="total-score">'
        "<span>Final Score</span>"
        f"<span>{display_number(lyrical.final_score)} / {SCORE_SCALE_MAX}</span>"
        "</div>"
    )
    return "".join(rows)
