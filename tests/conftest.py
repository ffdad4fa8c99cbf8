import copy
import json
from typing import Any

import pytest

from critique_bridge.schema import RUBRIC_CATEGORIES

# Ten category scores that add up to 82.
RUBRIC_SCORES = (8, 12, 8, 7, 13, 8, 9, 8, 5, 4)


def build_scorecard() -> list[dict[str, Any]]:
    return [
        {
            "category": category,
            "score": score,
            "maxScore": max_score,
            "justification": f"Evidence for **{category.lower()}**: the second verse carries it.",
        }
        for (category, max_score), score in zip(RUBRIC_CATEGORIES, RUBRIC_SCORES)
    ]


def build_lyrical(**overrides: Any) -> dict[str, Any]:
    lyrical = {
        "scorecard": build_scorecard(),
        "subtotal": 82,
        "penalties": 5,
        "finalScore": 77,
        "scoreLowerBound": 74,
        "scoreUpperBound": 80,
        "interpretation": "Strong; clear competence with notable moments.",
        "areasForImprovement": "- Tighten the bridge\n- Replace the stock rain imagery",
    }
    lyrical.update(overrides)
    return lyrical


def build_musical() -> dict[str, str]:
    return {
        "instrumentationAndArrangement": "Sparse *acoustic* guitar with a late cello entry.",
        "productionAndMix": "Vocals sit a little hot in the mix.",
        "compositionAndStructure": "Verse-chorus form with a modulating bridge.",
        "overallImpression": "Earnest and mostly effective.",
    }


def build_payload(*, audio: bool = True, instrumental: bool = False, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "isInstrumental": instrumental,
        "aiGeneratedLyrics": None,
        "aiGeneratedMusic": None,
        "musicalAnalysis": build_musical() if audio else None,
        "lyricalAnalysis": None if instrumental else build_lyrical(),
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload_factory():
    def _factory(**kwargs: Any) -> dict[str, Any]:
        return copy.deepcopy(build_payload(**kwargs))

    return _factory


@pytest.fixture
def lyrical_factory():
    return build_lyrical


@pytest.fixture
def response_text_factory(payload_factory):
    def _factory(**kwargs: Any) -> str:
        return json.dumps(payload_factory(**kwargs))

    return _factory
