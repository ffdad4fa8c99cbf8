from critique_bridge.schema import (
    CRITIQUE_RESPONSE_SCHEMA,
    RUBRIC_CATEGORIES,
    RUBRIC_MAX_SCORES,
    validate_against_schema,
)


def test_rubric_has_ten_categories_summing_to_100() -> None:
    assert len(RUBRIC_CATEGORIES) == 10
    assert sum(max_score for _, max_score in RUBRIC_CATEGORIES) == 100
    assert RUBRIC_MAX_SCORES["Voice and Point of View"] == 8
    assert RUBRIC_MAX_SCORES["Memorability and Hook Quotient"] == 6


def test_schema_declares_top_level_required_fields_and_nullability() -> None:
    properties = CRITIQUE_RESPONSE_SCHEMA["properties"]

    assert CRITIQUE_RESPONSE_SCHEMA["required"] == ["isInstrumental", "musicalAnalysis"]
    assert properties["musicalAnalysis"]["nullable"] is True
    assert properties["lyricalAnalysis"]["nullable"] is True
    assert properties["aiGeneratedMusic"]["nullable"] is True
    assert properties["aiGeneratedLyrics"]["required"] == ["isDetected", "justification"]
    scorecard = properties["lyricalAnalysis"]["properties"]["scorecard"]
    assert scorecard["type"] == "ARRAY"
    assert scorecard["items"]["required"] == ["category", "score", "maxScore", "justification"]


def test_valid_payloads_have_no_structural_errors(payload_factory) -> None:
    assert validate_against_schema(payload_factory(), CRITIQUE_RESPONSE_SCHEMA) == []
    assert validate_against_schema(payload_factory(instrumental=True), CRITIQUE_RESPONSE_SCHEMA) == []
    assert validate_against_schema(payload_factory(audio=False), CRITIQUE_RESPONSE_SCHEMA) == []


def test_structural_errors_report_paths(payload_factory) -> None:
    payload = payload_factory()
    payload["isInstrumental"] = "no"
    del payload["musicalAnalysis"]
    payload["lyricalAnalysis"]["scorecard"][2]["score"] = "eight"
    del payload["lyricalAnalysis"]["finalScore"]

    errors = validate_against_schema(payload, CRITIQUE_RESPONSE_SCHEMA)

    assert "$.isInstrumental: expected boolean" in errors
    assert "$.musicalAnalysis: missing" in errors
    assert "$.lyricalAnalysis.scorecard[2].score: expected number" in errors
    assert "$.lyricalAnalysis.finalScore: missing" in errors


def test_null_rejected_where_schema_is_not_nullable(payload_factory) -> None:
    payload = payload_factory()
    payload["isInstrumental"] = None
    payload["lyricalAnalysis"]["interpretation"] = None

    errors = validate_against_schema(payload, CRITIQUE_RESPONSE_SCHEMA)

    assert "$.isInstrumental: null not allowed" in errors
    assert "$.lyricalAnalysis.interpretation: null not allowed" in errors


def test_booleans_are_not_numbers(payload_factory) -> None:
    payload = payload_factory()
    payload["lyricalAnalysis"]["penalties"] = True

    errors = validate_against_schema(payload, CRITIQUE_RESPONSE_SCHEMA)

    assert errors == ["$.lyricalAnalysis.penalties: expected number"]
