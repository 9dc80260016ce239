"""
Metal deck section calculator.

    deck_cost  = ceil(area * cost_per_sqft)
    erection   = ceil(erection.area * erection.price_per_sqft)
    total_cost = ceil(deck_cost + erection)

Deck area is entered on its own; editing the structural steel area
does not copy over.
"""

from ..schemas import MetalDeck
from .base import BaseSectionCalculator, ceil_currency


class MetalDeckCalculator(BaseSectionCalculator):

    section_key = "metal_deck"

    # command field -> (sub-block, attribute)
    FIELDS = {
        "area": (None, "area"),
        "cost_per_sqft": (None, "cost_per_sqft"),
        "erection_area": ("erection", "area"),
        "erection_price_per_sqft": ("erection", "price_per_sqft"),
    }

    def derive(self, section: MetalDeck) -> MetalDeck:
        section.deck_cost = ceil_currency(section.area * section.cost_per_sqft)
        erection = section.erection
        erection.total_cost = ceil_currency(erection.area * erection.price_per_sqft)
        section.total_cost = ceil_currency(section.deck_cost + erection.total_cost)
        return section

    def set_field(self, section: MetalDeck, field: str, value) -> MetalDeck:
        self.check_field(field, tuple(self.FIELDS))
        block, attr = self.FIELDS[field]
        target = getattr(section, block) if block else section
        setattr(target, attr, value)
        return self.derive(section)
