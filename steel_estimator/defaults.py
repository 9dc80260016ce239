"""
Seed rows for a new estimate.

Rates and percentages come from settings so a shop can change its
standard labour rate or markup without touching code.
"""

from datetime import date
from typing import Optional

from .calculators.aggregation import recalculate_all
from .config import settings
from .quote_numbers import first_quote_number
from .schemas import (
    EngineeringDrafting,
    ErectionFreight,
    Estimate,
    LabourItem,
    MaterialItem,
    MetalDeck,
    MiscellaneousItem,
    MiscellaneousSteel,
    OverheadProfit,
    ProjectInfo,
    StructuralSteel,
)

# Row 0 is pinned to the total structural weight
FIRST_WEIGHT = "First Weight"

DEFAULT_MATERIAL_ROWS = [
    FIRST_WEIGHT,
    "HSS (All)",
    'HSS (7" & 8")',
    "Channel Premium",
    'Plate Premium (3/4" & Higher)',
]

DEFAULT_LABOUR_GROUPS = ["Column", "Beam", "Brace", "Girts", "VBF"]

DEFAULT_MISCELLANEOUS_ROWS = [
    "Bent Plate Frame for Drive in Door (8' x 8')",
    "Roof Hatch Ladder with Cage x 18' high",
    "Shop drawings",
    "Stamp",
]


def default_material_items() -> list:
    return [MaterialItem(description=desc) for desc in DEFAULT_MATERIAL_ROWS]


def default_labour_items() -> list:
    return [
        LabourItem(member_group=group, hourly_rate=settings.LABOUR_RATE_DEFAULT)
        for group in DEFAULT_LABOUR_GROUPS
    ]


def default_miscellaneous_items() -> list:
    return [MiscellaneousItem(type="S/O", description=desc) for desc in DEFAULT_MISCELLANEOUS_ROWS]


def new_estimate(today: Optional[date] = None) -> Estimate:
    """
    Fresh in-memory estimate with the standard seed rows.

    The quote number is provisional; the store assigns the real one on
    first save.
    """
    today = today or date.today()
    overhead = settings.OVERHEAD_DEFAULT
    profit = settings.PROFIT_DEFAULT

    estimate = Estimate(
        project_info=ProjectInfo(
            quote_number=first_quote_number(today),
            date=today.isoformat(),
        ),
        structural_steel=StructuralSteel(
            connection_allowance=settings.CONNECTION_ALLOWANCE_DEFAULT,
            material=default_material_items(),
            shop_labour=default_labour_items(),
            engineering_drafting=EngineeringDrafting(),
            erection_freight=ErectionFreight(
                regular_trip_cost=settings.REGULAR_TRIP_COST_DEFAULT,
                trailer_trip_cost=settings.TRAILER_TRIP_COST_DEFAULT,
            ),
            overhead_profit=OverheadProfit(
                overhead=overhead,
                profit=profit,
                total_percentage=overhead + profit,
            ),
        ),
        metal_deck=MetalDeck(),
        miscellaneous_steel=MiscellaneousSteel(items=default_miscellaneous_items()),
    )
    return recalculate_all(estimate)
