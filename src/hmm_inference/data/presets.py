"""Bundled example models."""

from typing import Dict, List

from .model_spec import ModelSpec

# Textbook rain/umbrella world: the weather persists with probability 0.7,
# an umbrella is seen on 90% of rainy days and 20% of dry ones.
WEATHER_UMBRELLA = ModelSpec(
    name="weather_umbrella",
    states=["rain", "dry"],
    evidence=["umbrella", "no_umbrella"],
    transition=[[0.7], [0.3]],
    sensor=[[0.9], [0.2]],
    prior=[0.5],
)

# A casino switches between a fair die and a loaded one that rolls six half the time.
DISHONEST_CASINO = ModelSpec(
    name="dishonest_casino",
    states=["fair", "loaded"],
    evidence=["1", "2", "3", "4", "5", "6"],
    transition=[[0.95], [0.1]],
    sensor=[[1 / 6] * 5, [0.1] * 5],
    prior=[0.5],
)

MODEL_PRESETS: Dict[str, ModelSpec] = {
    "weather": WEATHER_UMBRELLA,
    "casino": DISHONEST_CASINO,
}


def get_model_preset(name: str) -> ModelSpec:
    """Return a bundled model by name ('weather', 'casino')."""
    if name not in MODEL_PRESETS:
        raise KeyError(f"Unknown model preset '{name}'. Available: {list_model_presets()}")
    return MODEL_PRESETS[name]


def list_model_presets() -> List[str]:
    return sorted(MODEL_PRESETS)
