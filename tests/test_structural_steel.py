"""
Structural steel calculator tests.

Tests:
1-3.   Tonnage and the worked example (1000 sqft, 20000 lb, 5% allowance)
4-8.   Material rows (row-0 pin, ceiling rounding, add/remove, pinned row kept, unknown ids)
9-11.  Shop labour (hours formula, zero pcs/day guard, default rate)
12-15. OWSJ, engineering/drafting, erection/freight
16-18. Overhead/profit, reference ratios, input coercion
"""

import pytest

from steel_estimator.calculators.base import ceil_currency, coerce_number
from steel_estimator.calculators.structural_steel import StructuralSteelCalculator
from steel_estimator.schemas import LabourItem, MaterialItem, StructuralSteel


def _worked_example():
    """area 1000, weight 20000, allowance 5, row-0 at 0.5/lb, overhead 5%, profit 10%."""
    section = StructuralSteel(
        area=1000,
        weight=20000,
        connection_allowance=5,
        material=[
            MaterialItem(description="First Weight", unit_rate=0.5),
            MaterialItem(description="HSS (All)"),
        ],
    )
    section.overhead_profit.overhead = 5
    section.overhead_profit.profit = 10
    return StructuralSteelCalculator(labour_rate_default=85).derive(section)


# ============================================================
# 1-3. Tonnage
# ============================================================

def test_total_weight_includes_connection_allowance():
    section = _worked_example()
    assert section.total_weight == pytest.approx(21000)
    assert section.total_tons == pytest.approx(10.5)


def test_worked_example_totals():
    section = _worked_example()
    assert section.material[0].total_cost == 10500
    assert section.material_cost == 10500
    assert section.subtotal == 10500
    assert section.overhead_profit.overhead_amount == 525
    assert section.overhead_profit.profit_amount == 1050
    assert section.overhead_profit.total_percentage == 15
    assert section.total_cost == 12075


def test_tonnage_mirrored_into_drafting_and_erection():
    section = _worked_example()
    assert section.engineering_drafting.drafting_tons == pytest.approx(10.5)
    assert section.erection_freight.tons == pytest.approx(10.5)
    assert section.erection_freight.trailer_trips == 1


# ============================================================
# 4-8. Material
# ============================================================

def test_first_material_row_is_pinned_to_total_weight():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    first = section.material[0]

    calc.update_material_item(section, first.id, "weight", 5)
    assert section.material[0].weight == pytest.approx(21000)

    calc.set_base_field(section, "weight", 40000)
    assert section.material[0].weight == pytest.approx(42000)
    assert section.material[0].total_cost == 21000


def test_material_cost_rounds_up():
    """100 lb at 0.333 is 33.30 -> 34."""
    calc = StructuralSteelCalculator()
    section = _worked_example()
    second = section.material[1]
    calc.update_material_item(section, second.id, "weight", 100)
    calc.update_material_item(section, second.id, "unit_rate", 0.333)
    assert section.material[1].total_cost == 34
    assert section.material_cost == 10500 + 34


def test_add_and_remove_material_item():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    item = calc.add_material_item(section, "Channel Premium")
    assert len(section.material) == 3
    assert item.description == "Channel Premium"

    calc.update_material_item(section, item.id, "weight", 1000)
    calc.update_material_item(section, item.id, "unit_rate", 0.1)
    assert section.material_cost == 10600

    calc.remove_material_item(section, item.id)
    assert len(section.material) == 2
    assert section.material_cost == 10500


def test_first_material_row_cannot_be_removed():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    first, hss = section.material
    calc.update_material_item(section, hss.id, "weight", 7)

    calc.remove_material_item(section, first.id)
    assert [m.id for m in section.material] == [first.id, hss.id]
    assert section.material[0].weight == pytest.approx(21000)
    assert section.material[1].weight == 7


def test_unknown_item_id_is_a_noop():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    before = section.model_dump()
    calc.update_material_item(section, "missing", "unit_rate", 99)
    calc.remove_material_item(section, "missing")
    calc.update_labour_item(section, "missing", "total_pcs", 5)
    assert section.model_dump() == before


def test_unknown_field_is_rejected():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    with pytest.raises(ValueError):
        calc.set_base_field(section, "total_tons", 99)


# ============================================================
# 9-11. Shop labour
# ============================================================

def test_labour_hours_formula():
    """10 pcs at 4 per day -> 250 hours; at 85/hr -> 21250."""
    calc = StructuralSteelCalculator()
    section = _worked_example()
    item = calc.add_labour_item(section, "Beam")
    calc.update_labour_item(section, item.id, "total_pcs", 10)
    calc.update_labour_item(section, item.id, "pcs_per_day", 4)
    assert section.shop_labour[0].hours == 250
    assert section.shop_labour[0].total_cost == 21250
    assert section.shop_labour_cost == 21250


def test_zero_pcs_per_day_gives_zero_hours():
    section = StructuralSteel(
        weight=1000,
        shop_labour=[LabourItem(member_group="Column", total_pcs=12, pcs_per_day=0, hourly_rate=85)],
    )
    StructuralSteelCalculator().derive(section)
    assert section.shop_labour[0].hours == 0
    assert section.shop_labour[0].total_cost == 0


def test_added_labour_item_uses_default_rate():
    calc = StructuralSteelCalculator(labour_rate_default=92.5)
    section = _worked_example()
    item = calc.add_labour_item(section, "Girts")
    assert item.hourly_rate == 92.5
    assert item.member_group == "Girts"


# ============================================================
# 12-15. OWSJ, engineering/drafting, erection/freight
# ============================================================

def test_owsj_cost():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    calc.update_owsj_field(section, "weight", 3000)
    calc.update_owsj_field(section, "price_per_weight", 1.25)
    assert section.owsj.cost == 3750
    assert section.subtotal == 10500 + 3750


def test_owsj_weight_does_not_change_erection_tonnage():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    calc.update_owsj_field(section, "weight", 50000)
    assert section.erection_freight.tons == pytest.approx(10.5)
    assert section.erection_freight.trailer_trips == 1


def test_engineering_and_drafting():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    calc.update_engineering_drafting_field(section, "engineering", 1500)
    calc.update_engineering_drafting_field(section, "drafting_price_per_ton", 100)
    assert section.engineering_drafting.drafting_cost == 1050
    assert section.engineering_drafting.total_cost == 2550


def test_erection_and_freight():
    """10.5 t at 200/t + 500 premium; 2 regular trips at 300, 1 trailer at 600."""
    calc = StructuralSteelCalculator()
    section = _worked_example()
    calc.update_erection_freight_field(section, "price_per_ton", 200)
    calc.update_erection_freight_field(section, "premium", 500)
    calc.update_erection_freight_field(section, "regular_trips", 2)
    calc.update_erection_freight_field(section, "regular_trip_cost", 300)
    calc.update_erection_freight_field(section, "trailer_trip_cost", 600)
    ef = section.erection_freight
    assert ef.erection_cost == 2600
    assert ef.freight_cost == 1200
    assert ef.total_cost == 3800


def test_trailer_trips_round_up_per_twenty_tons():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    calc.set_base_field(section, "connection_allowance", 0)
    calc.set_base_field(section, "weight", 80000)  # 40 t
    assert section.erection_freight.trailer_trips == 2
    calc.set_base_field(section, "weight", 80002)
    assert section.erection_freight.trailer_trips == 3


# ============================================================
# 16-18. Totals, ratios, coercion
# ============================================================

def test_overhead_and_profit_follow_subtotal():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    calc.update_overhead_profit_field(section, "overhead", 0)
    calc.update_overhead_profit_field(section, "profit", 0)
    assert section.total_cost == 10500
    calc.update_overhead_profit_field(section, "profit", 3.3)
    # 10500 * 3.3% = 346.5 -> 347
    assert section.overhead_profit.profit_amount == 347
    assert section.total_cost == 10847


def test_reference_ratios():
    section = _worked_example()
    assert section.price_per_ton == pytest.approx(1150.0)
    assert section.price_per_sqft == pytest.approx(12.08, abs=0.01)
    assert section.hours_per_ton == 0

    empty = StructuralSteelCalculator().derive(StructuralSteel())
    assert empty.price_per_ton == 0
    assert empty.price_per_sqft == 0


@pytest.mark.parametrize("field, values", [
    ("weight", (25000, 40000, 41000, 90000)),
    ("connection_allowance", (10, 25, 50, 100)),
])
def test_tonnage_increase_never_lowers_costs(field, values):
    calc = StructuralSteelCalculator()
    section = _worked_example()
    calc.update_engineering_drafting_field(section, "drafting_price_per_ton", 90)
    calc.update_erection_freight_field(section, "price_per_ton", 210)
    calc.update_erection_freight_field(section, "trailer_trip_cost", 600)

    previous = section.model_copy(deep=True)
    for value in values:
        calc.set_base_field(section, field, value)
        # Row 0 carries a rate, so weight and material cost must strictly rise
        assert section.total_weight > previous.total_weight
        assert section.total_tons > previous.total_tons
        assert section.material_cost > previous.material_cost
        assert section.engineering_drafting.drafting_cost >= previous.engineering_drafting.drafting_cost
        assert section.engineering_drafting.total_cost >= previous.engineering_drafting.total_cost
        assert section.erection_freight.total_cost >= previous.erection_freight.total_cost
        assert section.total_cost >= previous.total_cost
        previous = section.model_copy(deep=True)


def test_unparseable_input_becomes_zero():
    calc = StructuralSteelCalculator()
    section = _worked_example()
    calc.set_base_field(section, "weight", "abc")
    assert section.weight == 0
    assert section.total_cost == 0
    calc.set_base_field(section, "weight", "1,000")
    assert section.weight == 1000


def test_ceil_currency_and_coercion_helpers():
    assert ceil_currency(33.3) == 34
    assert ceil_currency(1.1 * 100) == 110
    assert ceil_currency(None) == 0
    assert coerce_number(float("nan")) == 0
    assert coerce_number("$30") == 30
    assert coerce_number("") == 0
