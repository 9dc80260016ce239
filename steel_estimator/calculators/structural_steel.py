"""
Structural steel section calculator.

Weight and tonnage drive most of the section: tonnage is mirrored into
the drafting and erection blocks, trailer trips are counted from it, and
the first material row always carries the full weight. Overhead and
profit are percentages of the pre-overhead subtotal.

    total_weight = weight * (1 + connection_allowance / 100)
    total_tons   = total_weight / 2000
    subtotal     = material + shop labour + OWSJ + eng/drafting + erection/freight
    total_cost   = ceil(subtotal + ceil(subtotal * overhead%) + ceil(subtotal * profit%))
"""

import logging

from ..config import settings
from ..schemas import LabourItem, MaterialItem, StructuralSteel
from .base import BaseSectionCalculator, ceil_currency, safe_divide

logger = logging.getLogger(__name__)


class StructuralSteelCalculator(BaseSectionCalculator):

    section_key = "structural_steel"

    LBS_PER_TON = 2000.0
    TONS_PER_TRAILER = 20.0
    # Labour hours are quoted as pieces / pieces-per-day scaled by 100
    LABOUR_HOURS_FACTOR = 100.0

    BASE_FIELDS = ("area", "weight", "connection_allowance")
    MATERIAL_FIELDS = ("description", "weight", "unit_rate")
    LABOUR_FIELDS = ("member_group", "total_pcs", "pcs_per_day", "hourly_rate")
    OWSJ_FIELDS = ("supplier", "pcs", "weight", "price_per_weight")
    ENGINEERING_DRAFTING_FIELDS = ("engineering", "drafting_price_per_ton")
    ERECTION_FREIGHT_FIELDS = (
        "erector", "price_per_ton", "premium",
        "regular_trips", "regular_trip_cost", "trailer_trip_cost",
    )
    OVERHEAD_PROFIT_FIELDS = ("overhead", "profit")

    def __init__(self, labour_rate_default: float = None):
        if labour_rate_default is None:
            labour_rate_default = settings.LABOUR_RATE_DEFAULT
        self.labour_rate_default = labour_rate_default

    # --- Full derivation (shared by every command and by recalculate_all) ---

    def derive(self, section: StructuralSteel) -> StructuralSteel:
        self._derive_tonnage(section)
        self._derive_material(section)
        self._derive_shop_labour(section)
        self._derive_owsj(section)
        self._derive_engineering_drafting(section)
        self._derive_erection_freight(section)
        self._derive_totals(section)
        self._derive_reference_ratios(section)
        return section

    def _derive_tonnage(self, section: StructuralSteel):
        section.total_weight = section.weight * (1 + section.connection_allowance / 100.0)
        section.total_tons = section.total_weight / self.LBS_PER_TON

    def _derive_material(self, section: StructuralSteel):
        # Row 0 ("First Weight") is pinned to the total weight
        if section.material:
            section.material[0].weight = section.total_weight
        for item in section.material:
            item.total_cost = ceil_currency(item.weight * item.unit_rate)
        section.material_cost = self.sum_totals(section.material)

    def _derive_shop_labour(self, section: StructuralSteel):
        for item in section.shop_labour:
            item.hours = self.labour_hours(item.total_pcs, item.pcs_per_day)
            item.total_cost = ceil_currency(item.hours * item.hourly_rate)
        section.shop_labour_cost = self.sum_totals(section.shop_labour)

    def labour_hours(self, total_pcs: float, pcs_per_day: float) -> float:
        """ceil(total_pcs / pcs_per_day * 100); 0 when pcs_per_day is 0."""
        return ceil_currency(safe_divide(total_pcs, pcs_per_day) * self.LABOUR_HOURS_FACTOR)

    def _derive_owsj(self, section: StructuralSteel):
        owsj = section.owsj
        owsj.cost = ceil_currency(owsj.weight * owsj.price_per_weight)

    def _derive_engineering_drafting(self, section: StructuralSteel):
        ed = section.engineering_drafting
        ed.drafting_tons = section.total_tons
        ed.drafting_cost = ceil_currency(ed.drafting_tons * ed.drafting_price_per_ton)
        ed.total_cost = ceil_currency(ed.engineering + ed.drafting_cost)

    def _derive_erection_freight(self, section: StructuralSteel):
        # Erection tonnage is primary steel only; OWSJ weight is not added
        ef = section.erection_freight
        ef.tons = section.total_tons
        ef.erection_cost = ceil_currency(ef.tons * ef.price_per_ton + ef.premium)
        ef.trailer_trips = ceil_currency(section.total_tons / self.TONS_PER_TRAILER)
        ef.freight_cost = ceil_currency(
            ef.regular_trips * ef.regular_trip_cost + ef.trailer_trips * ef.trailer_trip_cost
        )
        ef.total_cost = ceil_currency(ef.erection_cost + ef.freight_cost)

    def _derive_totals(self, section: StructuralSteel):
        op = section.overhead_profit
        section.subtotal = (
            ceil_currency(section.material_cost)
            + ceil_currency(section.shop_labour_cost)
            + ceil_currency(section.owsj.cost)
            + ceil_currency(section.engineering_drafting.total_cost)
            + ceil_currency(section.erection_freight.total_cost)
        )
        op.total_percentage = op.overhead + op.profit
        op.overhead_amount = ceil_currency(section.subtotal * op.overhead / 100.0)
        op.profit_amount = ceil_currency(section.subtotal * op.profit / 100.0)
        section.total_cost = ceil_currency(section.subtotal + op.overhead_amount + op.profit_amount)

    def _derive_reference_ratios(self, section: StructuralSteel):
        total_hours = sum(item.hours for item in section.shop_labour)
        section.price_per_ton = round(safe_divide(section.total_cost, section.total_tons), 2)
        section.price_per_sqft = round(safe_divide(section.total_cost, section.area), 2)
        section.hours_per_ton = round(safe_divide(total_hours, section.total_tons), 2)

    # --- Commands ---

    def set_base_field(self, section: StructuralSteel, field: str, value) -> StructuralSteel:
        """area / weight / connection_allowance; tonnage flows through the whole section."""
        self.check_field(field, self.BASE_FIELDS)
        setattr(section, field, value)
        return self.derive(section)

    def add_material_item(self, section: StructuralSteel, description: str = "") -> MaterialItem:
        item = MaterialItem(description=description)
        section.material.append(item)
        self.derive(section)
        return item

    def update_material_item(self, section: StructuralSteel, item_id: str, field: str, value) -> StructuralSteel:
        """
        Edits on row 0 are accepted like any other row; its weight is
        re-pinned to total_weight by the derivation.
        """
        self.check_field(field, self.MATERIAL_FIELDS)
        item = self.find_item(section.material, item_id)
        if item is not None:
            setattr(item, field, value)
        return self.derive(section)

    def remove_material_item(self, section: StructuralSteel, item_id: str) -> StructuralSteel:
        """Delete a material row. Row 0 carries the pinned total weight and is kept."""
        if section.material and section.material[0].id == item_id:
            logger.info("Ignoring removal of pinned first material row %s", item_id)
            return self.derive(section)
        section.material = self.without_item(section.material, item_id)
        return self.derive(section)

    def add_labour_item(self, section: StructuralSteel, member_group: str = "") -> LabourItem:
        item = LabourItem(member_group=member_group, hourly_rate=self.labour_rate_default)
        section.shop_labour.append(item)
        self.derive(section)
        return item

    def update_labour_item(self, section: StructuralSteel, item_id: str, field: str, value) -> StructuralSteel:
        self.check_field(field, self.LABOUR_FIELDS)
        item = self.find_item(section.shop_labour, item_id)
        if item is not None:
            setattr(item, field, value)
        return self.derive(section)

    def remove_labour_item(self, section: StructuralSteel, item_id: str) -> StructuralSteel:
        section.shop_labour = self.without_item(section.shop_labour, item_id)
        return self.derive(section)

    def update_owsj_field(self, section: StructuralSteel, field: str, value) -> StructuralSteel:
        self.check_field(field, self.OWSJ_FIELDS)
        setattr(section.owsj, field, value)
        return self.derive(section)

    def update_engineering_drafting_field(self, section: StructuralSteel, field: str, value) -> StructuralSteel:
        self.check_field(field, self.ENGINEERING_DRAFTING_FIELDS)
        setattr(section.engineering_drafting, field, value)
        return self.derive(section)

    def update_erection_freight_field(self, section: StructuralSteel, field: str, value) -> StructuralSteel:
        self.check_field(field, self.ERECTION_FREIGHT_FIELDS)
        setattr(section.erection_freight, field, value)
        return self.derive(section)

    def update_overhead_profit_field(self, section: StructuralSteel, field: str, value) -> StructuralSteel:
        self.check_field(field, self.OVERHEAD_PROFIT_FIELDS)
        setattr(section.overhead_profit, field, value)
        return self.derive(section)
