"""
Parámetros predefinidos para Stability AI y para la máscara de texto de OpenAI.

Cada ruta elige el preset según lo que necesita: una tarjeta completa con
texto generado por Stability, o solo la escena festiva que después completa
OpenAI con el texto.
"""

from eid_greeting.prompts.card_prompts import (
    STABILITY_NEGATIVE_PROMPT,
    STABILITY_SCENE_NEGATIVE_PROMPT,
)
from eid_greeting.schemas import MaskLayout, StabilityPreset

CARD_PRESET = StabilityPreset(
    name="card",
    prompt_weight=1.2,
    negative_prompt=STABILITY_NEGATIVE_PROMPT,
    negative_weight=-0.9,
    cfg_scale=20,
    image_strength=0.55,
    steps=50,
    style_preset="photographic",
    headroom=156,
)

SCENE_PRESET = StabilityPreset(
    name="scene",
    prompt_weight=1.0,
    negative_prompt=STABILITY_SCENE_NEGATIVE_PROMPT,
    negative_weight=-0.8,
    cfg_scale=12,
    image_strength=0.55,
    steps=40,
)

CARD_MASK = MaskLayout(top=240, bottom=240, side=160)
TEXT_MASK = MaskLayout(top=200, bottom=200, side=150)
