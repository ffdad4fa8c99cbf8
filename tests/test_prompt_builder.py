import base64
import json

import pytest

from critique_bridge.constants import DEFAULT_MODEL_NAME, PRO_MODEL_NAME
from critique_bridge.critique_parser import check_consistency, parse_critique
from critique_bridge.errors import InvalidInputError
from critique_bridge.models import InputMode, InputState, MediaPart, RequestMode, StagedFile, TextPart
from critique_bridge.prompt_builder import build_critique_request, build_prompt_text, resolve_request_mode
from critique_bridge.prompts import AUDIO_PROMPT, LYRICS_ONLY_PROMPT

SONG_BYTES = b"\xff\xfb" * (3 * 1024 * 1024 // 2)


def upload_state(aux: str = "") -> InputState:
    return InputState(
        mode=InputMode.UPLOAD,
        staged_file=StagedFile(name="demo.mp3", mime_type="audio/mpeg", data=SONG_BYTES),
        auxiliary_lyrics=aux,
    )


def test_audio_only_request_has_prompt_and_one_media_part() -> None:
    request = build_critique_request(upload_state(), DEFAULT_MODEL_NAME)

    assert request.mode == RequestMode.AUDIO
    assert request.audio_submitted is True
    assert request.model == DEFAULT_MODEL_NAME
    assert len(request.parts) == 2
    assert isinstance(request.parts[0], TextPart)
    assert request.prompt_text == AUDIO_PROMPT
    assert len(request.media_parts) == 1
    assert request.media_parts[0].mime_type == "audio/mpeg"
    assert len(request.media_parts[0].data) == 3 * 1024 * 1024


def test_audio_wire_format_carries_base64_inline_data() -> None:
    request = build_critique_request(upload_state(), PRO_MODEL_NAME)

    wire = request.to_wire()

    assert wire["model"] == PRO_MODEL_NAME
    text_part, media_part = wire["contents"]["parts"]
    assert text_part == {"text": AUDIO_PROMPT}
    assert media_part["inlineData"]["mimeType"] == "audio/mpeg"
    assert base64.b64decode(media_part["inlineData"]["data"]) == SONG_BYTES
    json.dumps(wire)


def test_auxiliary_lyrics_switch_to_audio_with_lyrics_and_are_trimmed() -> None:
    request = build_critique_request(upload_state(aux="  \nFirst line\nSecond line\n  "), DEFAULT_MODEL_NAME)

    assert request.mode == RequestMode.AUDIO_WITH_LYRICS
    assert request.prompt_text.endswith("consider in your analysis:\n\nFirst line\nSecond line")
    assert len(request.media_parts) == 1


def test_blank_auxiliary_lyrics_do_not_change_mode() -> None:
    assert resolve_request_mode(upload_state(aux="   \n\t")) == RequestMode.AUDIO


def test_lyrics_only_request_embeds_lyrics_verbatim() -> None:
    state = InputState(mode=InputMode.LYRICS, staged_lyrics="Rain on the window\nI stay")

    request = build_critique_request(state, DEFAULT_MODEL_NAME)

    assert request.mode == RequestMode.LYRICS_ONLY
    assert request.audio_submitted is False
    assert request.media_parts == ()
    assert request.prompt_text == LYRICS_ONLY_PROMPT.format(lyrics="Rain on the window\nI stay")
    assert "Rain on the window\nI stay" in request.prompt_text
    assert "you MUST set 'isInstrumental' to false" in request.prompt_text
    assert "'musicalAnalysis' and 'aiGeneratedMusic' to null" in request.prompt_text
    assert request.to_wire()["contents"]["parts"] == [{"text": request.prompt_text}]


def test_lyrics_mode_ignores_staged_file() -> None:
    state = upload_state()
    state.mode = InputMode.LYRICS
    state.staged_lyrics = "Only words"

    request = build_critique_request(state, DEFAULT_MODEL_NAME)

    assert request.mode == RequestMode.LYRICS_ONLY
    assert not any(isinstance(part, MediaPart) for part in request.parts)


def test_upload_mode_ignores_staged_lyrics() -> None:
    state = upload_state()
    state.staged_lyrics = "Pasted in the other panel"

    assert build_prompt_text(state, resolve_request_mode(state)) == AUDIO_PROMPT


@pytest.mark.parametrize(
    "state",
    [
        InputState(mode=InputMode.UPLOAD),
        InputState(mode=InputMode.UPLOAD, auxiliary_lyrics="lyrics but no file"),
        InputState(mode=InputMode.LYRICS),
        InputState(mode=InputMode.LYRICS, staged_lyrics=" \n "),
    ],
)
def test_nothing_usable_staged_raises_invalid_input(state: InputState) -> None:
    with pytest.raises(InvalidInputError):
        build_critique_request(state, DEFAULT_MODEL_NAME)


def test_unknown_model_is_rejected() -> None:
    with pytest.raises(InvalidInputError, match="Unknown model"):
        build_critique_request(upload_state(), "gemini-0.1-nano")


def test_lyrics_only_request_feeds_consistency_check(payload_factory) -> None:
    request = build_critique_request(
        InputState(mode=InputMode.LYRICS, staged_lyrics="Some verse"), DEFAULT_MODEL_NAME
    )

    clean = parse_critique(json.dumps(payload_factory(audio=False)), request.audio_submitted)
    leaked = parse_critique(json.dumps(payload_factory(audio=True)), request.audio_submitted)

    assert check_consistency(clean, request.audio_submitted) == []
    assert "musical_analysis_without_audio" in check_consistency(leaked, request.audio_submitted)
