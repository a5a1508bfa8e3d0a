"""Request body builders, one per backend operation.

Each encoder maps a parameter bundle to ``(endpoint_path, json_body)``.
Out-of-range lookup indices are clamped into their table, never rejected.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from models import ContinueParams, ExtendParams, GenerateParams, TransformParams, UndoParams

GENERATE_PATH = "/api/juce/process_audio"
EXTEND_PATH = "/audio/generate"
EXTEND_LOOP_PATH = "/audio/generate/loop"
TRANSFORM_PATH = "/api/juce/transform_audio"
CONTINUE_PATH = "/api/juce/continue_music"
UNDO_PATH = "/api/juce/undo_transform"
POLL_PATH = "/api/juce/poll_status/"
HEALTH_PATH = "/health"

TOP_K = 250
TEMPERATURE = 1.0
CFG_COEF = 3.0
RANDOM_SEED = -1

MODEL_NAMES = (
    "thepatch/vanya_ai_dnb_0.1",
    "thepatch/bleeps-medium",
    "thepatch/gary_orchestra_2",
    "thepatch/hoenn_lofi",
)

VARIATION_NAMES = (
    "accordion_folk", "banjo_bluegrass", "piano_classical", "celtic",
    "strings_quartet", "synth_retro", "synth_modern", "synth_edm",
    "lofi_chill", "synth_bass", "rock_band", "cinematic_epic",
    "retro_rpg", "chiptune", "steel_drums", "gamelan_fusion",
    "music_box", "trap_808", "lo_fi_drums", "boom_bap",
    "percussion_ensemble", "future_bass", "synthwave_retro", "melodic_techno",
    "dubstep_wobble", "glitch_hop", "digital_disruption", "circuit_bent",
    "orchestral_glitch", "vapor_drums", "industrial_textures", "jungle_breaks",
)

Encoded = tuple[str, dict[str, Any]]


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def model_name_for(index: int) -> str:
    return MODEL_NAMES[_clamp(index, 0, len(MODEL_NAMES) - 1)]


def variation_name_for(index: int) -> str:
    return VARIATION_NAMES[_clamp(index, 0, len(VARIATION_NAMES) - 1)]


def _sampling_body(audio_base64: str, prompt_duration: int, model_name: str, description: str) -> dict[str, Any]:
    return {
        "model_name": model_name,
        "prompt_duration": prompt_duration,
        "audio_data": audio_base64,
        "top_k": TOP_K,
        "temperature": TEMPERATURE,
        "cfg_coef": CFG_COEF,
        "description": description,
    }


def encode_generate(params: GenerateParams) -> Encoded:
    body = _sampling_body(
        params.audio_base64,
        params.prompt_duration,
        model_name_for(params.model_index),
        params.description,
    )
    return GENERATE_PATH, body


def encode_extend(params: ExtendParams) -> Encoded:
    body: dict[str, Any] = {
        "prompt": params.prompt_text,
        "steps": params.steps,
        "cfg_scale": params.cfg_scale,
        "return_format": "base64",
        "seed": RANDOM_SEED,
    }
    if params.generate_as_loop:
        body["loop_type"] = params.loop_type
        return EXTEND_LOOP_PATH, body
    return EXTEND_PATH, body


def encode_transform(params: TransformParams) -> Encoded:
    body: dict[str, Any] = {
        "audio_data": params.audio_base64,
        "flowstep": params.flowstep,
        "solver": "midpoint" if params.use_midpoint_solver else "euler",
    }
    # variation wins over a custom prompt; never send both
    if params.variation_index >= 0:
        body["variation"] = variation_name_for(params.variation_index)
    elif params.custom_prompt.strip():
        body["custom_prompt"] = params.custom_prompt
    return TRANSFORM_PATH, body


def encode_continue(params: ContinueParams) -> Encoded:
    body = _sampling_body(
        params.audio_base64,
        params.prompt_duration,
        MODEL_NAMES[0],
        params.description,
    )
    return CONTINUE_PATH, body


def encode_undo(params: UndoParams) -> Encoded:
    return UNDO_PATH, {"session_id": params.session_id}


def poll_path(session_id: str) -> str:
    return POLL_PATH + quote(session_id, safe="")
