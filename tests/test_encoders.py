from __future__ import annotations

import pytest

from encoders import (
    CONTINUE_PATH,
    EXTEND_LOOP_PATH,
    EXTEND_PATH,
    GENERATE_PATH,
    MODEL_NAMES,
    TRANSFORM_PATH,
    UNDO_PATH,
    VARIATION_NAMES,
    encode_continue,
    encode_extend,
    encode_generate,
    encode_transform,
    encode_undo,
    poll_path,
)
from models import ContinueParams, ExtendParams, GenerateParams, TransformParams, UndoParams


def test_generate_body_carries_fixed_sampling_settings() -> None:
    path, body = encode_generate(
        GenerateParams(audio_base64="QUJD", prompt_duration=6, model_index=1, description="dnb")
    )

    assert path == GENERATE_PATH
    assert body == {
        "model_name": "thepatch/bleeps-medium",
        "prompt_duration": 6,
        "audio_data": "QUJD",
        "top_k": 250,
        "temperature": 1.0,
        "cfg_coef": 3.0,
        "description": "dnb",
    }


@pytest.mark.parametrize("index", range(len(MODEL_NAMES)))
def test_generate_resolves_every_model_index(index: int) -> None:
    _, body = encode_generate(GenerateParams(audio_base64="", prompt_duration=3, model_index=index))
    assert body["model_name"] == MODEL_NAMES[index]


@pytest.mark.parametrize("index, expected", [(-5, 0), (4, 3), (99, 3)])
def test_generate_clamps_out_of_range_model_index(index: int, expected: int) -> None:
    _, body = encode_generate(GenerateParams(audio_base64="", prompt_duration=3, model_index=index))
    assert body["model_name"] == MODEL_NAMES[expected]


def test_extend_plain_path_omits_loop_type() -> None:
    path, body = encode_extend(ExtendParams(prompt_text="lofi 90bpm", steps=8, cfg_scale=1.0))

    assert path == EXTEND_PATH
    assert body["return_format"] == "base64"
    assert body["seed"] == -1
    assert "loop_type" not in body


def test_extend_loop_path_includes_loop_type() -> None:
    path, body = encode_extend(
        ExtendParams(prompt_text="drums 120bpm", steps=12, cfg_scale=1.5, generate_as_loop=True, loop_type="drums")
    )

    assert path == EXTEND_LOOP_PATH
    assert body["loop_type"] == "drums"
    assert body["steps"] == 12
    assert body["cfg_scale"] == 1.5


def test_transform_with_variation_skips_custom_prompt() -> None:
    path, body = encode_transform(TransformParams(audio_base64="QUJD", variation_index=2, custom_prompt=""))

    assert path == TRANSFORM_PATH
    assert body["variation"] == "piano_classical"
    assert "custom_prompt" not in body
    assert body["solver"] == "euler"


def test_transform_variation_takes_precedence_over_custom_prompt() -> None:
    _, body = encode_transform(
        TransformParams(audio_base64="", variation_index=0, custom_prompt="jazz trio", use_midpoint_solver=True)
    )

    assert body["variation"] == "accordion_folk"
    assert "custom_prompt" not in body
    assert body["solver"] == "midpoint"


def test_transform_custom_prompt_when_no_variation() -> None:
    _, body = encode_transform(TransformParams(audio_base64="", variation_index=-1, custom_prompt="jazz trio"))

    assert body["custom_prompt"] == "jazz trio"
    assert "variation" not in body


def test_transform_blank_prompt_and_no_variation_sends_neither() -> None:
    _, body = encode_transform(TransformParams(audio_base64="", variation_index=-1, custom_prompt="   "))

    assert "variation" not in body
    assert "custom_prompt" not in body


def test_transform_clamps_out_of_range_variation() -> None:
    _, body = encode_transform(TransformParams(audio_base64="", variation_index=500))
    assert body["variation"] == VARIATION_NAMES[-1]


def test_continue_uses_first_model() -> None:
    path, body = encode_continue(ContinueParams(audio_base64="QUJD", prompt_duration=8))

    assert path == CONTINUE_PATH
    assert body["model_name"] == MODEL_NAMES[0]
    assert body["prompt_duration"] == 8
    assert body["description"] == ""


def test_undo_body_is_only_session_id() -> None:
    assert encode_undo(UndoParams(session_id="abc")) == (UNDO_PATH, {"session_id": "abc"})


def test_poll_path_quotes_session_id() -> None:
    assert poll_path("abc") == "/api/juce/poll_status/abc"
    assert poll_path("a/b c") == "/api/juce/poll_status/a%2Fb%20c"
