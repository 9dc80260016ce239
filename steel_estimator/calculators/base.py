"""
Shared base for the section calculators.

Input: one section of an Estimate (pydantic model, mutated in place)
Output: the same section with every derived field recomputed

Money is always rounded UP to the next whole unit. Quotes lean slightly
high on purpose and every formula keeps that direction.
"""

import logging
import math
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

# Digits kept before a ceiling; anything below is binary float noise
NOISE_DIGITS = 9


def _parse_number(value):
    """float for numeric input ("1,250.5", "$30", 12), None when there is no usable number."""
    if value is None:
        return None
    if isinstance(value, (bool, int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "").lstrip("$")
        try:
            number = float(text)
        except (ValueError, TypeError):
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_number(value) -> float:
    """Parse user input into a float. Missing or unparseable input is 0, never NaN."""
    number = _parse_number(value)
    return 0.0 if number is None else number


def coerce_optional_number(value):
    """Like coerce_number, but empty or unparseable input clears the value (None)."""
    return _parse_number(value)


def coerce_text(value) -> str:
    if value is None:
        return ""
    return str(value)


def ceil_currency(value) -> float:
    """
    Round UP to the next whole currency unit.

    100 * 0.333 = 33.3 -> 34. An exact product carrying float noise
    (1.1 * 100 = 110.00000000000001) stays at 110.
    """
    return float(math.ceil(round(coerce_number(value), NOISE_DIGITS)))


def safe_divide(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return numerator / denominator


class BaseSectionCalculator(ABC):
    """All section calculators inherit from this."""

    section_key: str = ""

    @abstractmethod
    def derive(self, section):
        """
        Recompute every derived field of the section from its inputs.
        Must be idempotent: derive(derive(s)) == derive(s).
        """
        pass

    # --- Section-level operations shared by all three sections ---

    def toggle_visibility(self, section):
        """Flip visibility. The computed total is kept for when the section comes back."""
        section.visible = not section.visible
        return section

    def set_override(self, section, value):
        """Set or clear (None) the manually entered section total."""
        section.overridden_total_cost = value
        return section

    # --- Helpers for line-item lists ---

    def check_field(self, field: str, allowed: tuple):
        if field not in allowed:
            raise ValueError(
                f"Field '{field}' is not editable on {self.section_key}. "
                f"Editable: {list(allowed)}"
            )

    def find_item(self, items: list, item_id: str):
        """Item with the given id, or None (unknown ids are a no-op for callers)."""
        for item in items:
            if item.id == item_id:
                return item
        logger.debug("No item %s in %s", item_id, self.section_key)
        return None

    def without_item(self, items: list, item_id: str) -> list:
        return [item for item in items if item.id != item_id]

    def sum_totals(self, items: list) -> float:
        return ceil_currency(sum(item.total_cost for item in items))
