"""
Calculator registry — maps section keys to calculator classes.
"""

from .base import BaseSectionCalculator
from .metal_deck import MetalDeckCalculator
from .miscellaneous_steel import MiscellaneousSteelCalculator
from .structural_steel import StructuralSteelCalculator

CALCULATOR_REGISTRY: dict[str, type] = {
    "structural_steel": StructuralSteelCalculator,
    "metal_deck": MetalDeckCalculator,
    "miscellaneous_steel": MiscellaneousSteelCalculator,
}


def get_calculator(section_key: str) -> BaseSectionCalculator:
    """Returns an instance of the calculator for a section, or raises ValueError."""
    if section_key not in CALCULATOR_REGISTRY:
        raise ValueError(
            f"No calculator registered for section: {section_key}. "
            f"Available: {list(CALCULATOR_REGISTRY.keys())}"
        )
    return CALCULATOR_REGISTRY[section_key]()


def list_calculators() -> list[str]:
    """List all registered section keys, in grand-total order."""
    return list(CALCULATOR_REGISTRY.keys())
