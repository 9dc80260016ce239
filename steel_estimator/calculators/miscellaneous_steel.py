"""
Miscellaneous steel section calculator.

A free list of unit-priced items (S/O shop-only or S/I supply-and-install):

    item.total_cost = ceil(unit * unit_rate)
    total_cost      = ceil(sum of item totals)
"""

from ..schemas import MiscellaneousItem, MiscellaneousSteel
from .base import BaseSectionCalculator, ceil_currency


class MiscellaneousSteelCalculator(BaseSectionCalculator):

    section_key = "miscellaneous_steel"

    ITEM_FIELDS = ("type", "description", "unit", "unit_rate")

    def derive(self, section: MiscellaneousSteel) -> MiscellaneousSteel:
        for item in section.items:
            item.total_cost = ceil_currency(item.unit * item.unit_rate)
        section.total_cost = self.sum_totals(section.items)
        return section

    def add_item(self, section: MiscellaneousSteel, item_type: str = "S/O",
                 description: str = "") -> MiscellaneousItem:
        item = MiscellaneousItem(type=item_type, description=description)
        section.items.append(item)
        self.derive(section)
        return item

    def update_item(self, section: MiscellaneousSteel, item_id: str, field: str, value) -> MiscellaneousSteel:
        """type must be "S/O" or "S/I"; anything else raises a ValidationError."""
        self.check_field(field, self.ITEM_FIELDS)
        item = self.find_item(section.items, item_id)
        if item is not None:
            setattr(item, field, value)
        return self.derive(section)

    def remove_item(self, section: MiscellaneousSteel, item_id: str) -> MiscellaneousSteel:
        section.items = self.without_item(section.items, item_id)
        return self.derive(section)
