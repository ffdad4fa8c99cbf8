from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .utils import is_number

SCHEMA_TYPE_OBJECT = "OBJECT"
SCHEMA_TYPE_ARRAY = "ARRAY"
SCHEMA_TYPE_STRING = "STRING"
SCHEMA_TYPE_NUMBER = "NUMBER"
SCHEMA_TYPE_BOOLEAN = "BOOLEAN"

KEY_IS_INSTRUMENTAL = "isInstrumental"
KEY_AI_LYRICS = "aiGeneratedLyrics"
KEY_AI_MUSIC = "aiGeneratedMusic"
KEY_MUSICAL_ANALYSIS = "musicalAnalysis"
KEY_LYRICAL_ANALYSIS = "lyricalAnalysis"
KEY_SCORECARD = "scorecard"

RUBRIC_CATEGORIES: Tuple[Tuple[str, int], ...] = (
    ("Theme and Concept", 10),
    ("Imagery and Language", 15),
    ("Narrative and Structure", 10),
    ("Voice and Point of View", 8),
    ("Emotional Authenticity and Impact", 15),
    ("Prosody and Singability", 10),
    ("Rhyme and Poetic Technique", 10),
    ("Originality and Risk", 10),
    ("Cohesion and Line Economy", 6),
    ("Memorability and Hook Quotient", 6),
)

RUBRIC_MAX_SCORES: Dict[str, int] = dict(RUBRIC_CATEGORIES)


def _ai_detection_schema(description: str, justification_description: str, detected_description: str) -> Dict[str, Any]:
    return {
        "type": SCHEMA_TYPE_OBJECT,
        "description": description,
        "properties": {
            "isDetected": {"type": SCHEMA_TYPE_BOOLEAN, "description": detected_description},
            "justification": {"type": SCHEMA_TYPE_STRING, "description": justification_description},
        },
        "required": ["isDetected", "justification"],
        "nullable": True,
    }


CRITIQUE_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": SCHEMA_TYPE_OBJECT,
    "properties": {
        KEY_IS_INSTRUMENTAL: {
            "type": SCHEMA_TYPE_BOOLEAN,
            "description": "Set to true if the audio track contains no discernible sung or rapped vocals, false otherwise.",
        },
        KEY_AI_LYRICS: _ai_detection_schema(
            "An assessment of whether the lyrics appear to be AI-generated. This field is null if the confidence is low or if the track is instrumental.",
            "A brief explanation for the detection assessment.",
            "True if the lyrics are likely AI-generated.",
        ),
        KEY_AI_MUSIC: _ai_detection_schema(
            "An assessment of whether the music appears to be AI-generated. This field is null if the confidence is low.",
            "A brief explanation for the music AI detection assessment (e.g., sterile production, unnatural patterns).",
            "True if the music is likely AI-generated.",
        ),
        KEY_MUSICAL_ANALYSIS: {
            "type": SCHEMA_TYPE_OBJECT,
            "description": "A harsh, deep, and objective critique of the music itself, broken down into distinct sections. This entire object must be null if no audio file was provided.",
            "properties": {
                "instrumentationAndArrangement": {
                    "type": SCHEMA_TYPE_STRING,
                    "description": "Critique of the choice of instruments, how they interact, and the overall arrangement.",
                },
                "productionAndMix": {
                    "type": SCHEMA_TYPE_STRING,
                    "description": "Analysis of the recording quality, mix clarity, use of effects, dynamics, and mastering.",
                },
                "compositionAndStructure": {
                    "type": SCHEMA_TYPE_STRING,
                    "description": "Evaluation of the song's structure, melody, harmony, rhythm, and overall compositional strength.",
                },
                "overallImpression": {
                    "type": SCHEMA_TYPE_STRING,
                    "description": "A summary of the musical analysis and its overall impact.",
                },
            },
            "required": [
                "instrumentationAndArrangement",
                "productionAndMix",
                "compositionAndStructure",
                "overallImpression",
            ],
            "nullable": True,
        },
        KEY_LYRICAL_ANALYSIS: {
            "type": SCHEMA_TYPE_OBJECT,
            "description": "A comprehensive analysis of the lyrics based on the provided rubric. This entire object MUST be null if 'isInstrumental' is true.",
            "properties": {
                KEY_SCORECARD: {
                    "type": SCHEMA_TYPE_ARRAY,
                    "description": "An array containing the score and justification for each lyrical category.",
                    "items": {
                        "type": SCHEMA_TYPE_OBJECT,
                        "properties": {
                            "category": {
                                "type": SCHEMA_TYPE_STRING,
                                "description": "The name of the scoring category (e.g., 'Theme and Concept').",
                            },
                            "score": {"type": SCHEMA_TYPE_NUMBER, "description": "The score awarded for this category."},
                            "maxScore": {
                                "type": SCHEMA_TYPE_NUMBER,
                                "description": "The maximum possible score for this category (e.g., 10 for Theme and Concept).",
                            },
                            "justification": {
                                "type": SCHEMA_TYPE_STRING,
                                "description": "Detailed, evidence-based justification for the score, citing specific lyrics.",
                            },
                        },
                        "required": ["category", "score", "maxScore", "justification"],
                    },
                },
                "subtotal": {"type": SCHEMA_TYPE_NUMBER, "description": "The sum of all scores from the scorecard."},
                "penalties": {
                    "type": SCHEMA_TYPE_NUMBER,
                    "description": "The total points deducted for penalties. Must be 0 if no penalties apply.",
                },
                "finalScore": {
                    "type": SCHEMA_TYPE_NUMBER,
                    "description": "The subtotal minus penalties, rounded to the nearest integer.",
                },
                "scoreLowerBound": {
                    "type": SCHEMA_TYPE_NUMBER,
                    "description": "The lower bound of the confidence interval for the final score.",
                },
                "scoreUpperBound": {
                    "type": SCHEMA_TYPE_NUMBER,
                    "description": "The upper bound of the confidence interval for the final score.",
                },
                "interpretation": {
                    "type": SCHEMA_TYPE_STRING,
                    "description": "The final score's corresponding interpretation text (e.g., 'Canon-level craft; rare.').",
                },
                "areasForImprovement": {
                    "type": SCHEMA_TYPE_STRING,
                    "description": "A bulleted list in markdown format of 2-3 concrete, actionable suggestions for improving the lyrics, directly tied to weaknesses identified in the scorecard.",
                },
            },
            "required": [
                KEY_SCORECARD,
                "subtotal",
                "penalties",
                "finalScore",
                "scoreLowerBound",
                "scoreUpperBound",
                "interpretation",
                "areasForImprovement",
            ],
            "nullable": True,
        },
    },
    "required": [KEY_IS_INSTRUMENTAL, KEY_MUSICAL_ANALYSIS],
}


def _matches_type(value: Any, schema_type: str) -> bool:
    if schema_type == SCHEMA_TYPE_OBJECT:
        return isinstance(value, dict)
    if schema_type == SCHEMA_TYPE_ARRAY:
        return isinstance(value, list)
    if schema_type == SCHEMA_TYPE_STRING:
        return isinstance(value, str)
    if schema_type == SCHEMA_TYPE_NUMBER:
        return is_number(value)
    if schema_type == SCHEMA_TYPE_BOOLEAN:
        return isinstance(value, bool)
    return True


def validate_against_schema(value: Any, schema: Dict[str, Any], path: str = "$") -> List[str]:
    # Structure only; cross-field rules live in critique_parser.check_consistency.
    errors: List[str] = []
    if value is None:
        if not schema.get("nullable", False):
            errors.append(f"{path}: null not allowed")
        return errors

    schema_type = schema.get("type", "")
    if not _matches_type(value, schema_type):
        errors.append(f"{path}: expected {schema_type.lower()}")
        return errors

    if schema_type == SCHEMA_TYPE_OBJECT:
        properties = schema.get("properties", {})
        for key in schema.get("required", []):
            if key not in value:
                errors.append(f"{path}.{key}: missing")
        for key, child_schema in properties.items():
            if key in value:
                errors.extend(validate_against_schema(value[key], child_schema, f"{path}.{key}"))
    elif schema_type == SCHEMA_TYPE_ARRAY:
        item_schema = schema.get("items")
        if item_schema:
            for idx, item in enumerate(value):
                errors.extend(validate_against_schema(item, item_schema, f"{path}[{idx}]"))

    return errors
