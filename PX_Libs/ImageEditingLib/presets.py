"""
Named filter presets.

A preset sets brightness, contrast, saturation, blur and hue and leaves
rotate, opacity, sharpen and the flips alone. The set of presets is closed:
only members of FilterPreset can be applied.
"""

from enum import Enum
from typing import Dict, List, Union

from PX_Libs.constants import PRESET_VALUES
from PX_Libs.ImageEditingLib.filter_pipeline import FilterState


class FilterPreset(str, Enum):
    NONE = "none"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    VINTAGE = "vintage"
    COLD = "cold"
    WARM = "warm"

    @property
    def values(self) -> Dict[str, float]:
        return dict(PRESET_VALUES[self.value])


def get_preset(name: Union[str, FilterPreset]) -> FilterPreset:
    """
    Look up a preset by name (case-insensitive).

    Raises:
        ValueError: If name is not a known preset
    """
    if isinstance(name, FilterPreset):
        return name
    try:
        return FilterPreset(str(name).strip().lower())
    except ValueError:
        raise ValueError(
            f"Unknown preset: {name}. Valid presets: {', '.join(list_presets())}"
        ) from None


def list_presets() -> List[str]:
    return [preset.value for preset in FilterPreset]


def apply_preset_values(state: FilterState, name: Union[str, FilterPreset]) -> FilterState:
    """Return ``state`` with the preset's five fields replaced."""
    return state.with_values(get_preset(name).values)
