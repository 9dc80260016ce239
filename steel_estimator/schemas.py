"""
Estimate data model.

Attribute names are snake_case; the JSON snapshot (API bodies and the
stored payload) uses camelCase aliases so documents keep the field names
of earlier estimates (totalCost, pcsPerDay, overriddenTotalCost, ...).

Every numeric field runs through coerce_number, on construction and on
assignment, so a derived field can never see NaN or a stray string.
"""

import uuid
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .calculators.base import coerce_number, coerce_optional_number, coerce_text


Number = Annotated[float, BeforeValidator(coerce_number)]
OptionalNumber = Annotated[Optional[float], BeforeValidator(coerce_optional_number)]
Text = Annotated[str, BeforeValidator(coerce_text)]

MiscItemType = Literal["S/O", "S/I"]
SectionKey = Literal["structural_steel", "metal_deck", "miscellaneous_steel"]

SECTION_KEYS: tuple = ("structural_steel", "metal_deck", "miscellaneous_steel")


def new_item_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )


# --- Project metadata (opaque to the calculators) ---

class ProjectInfo(CamelModel):
    # Unknown keys from older snapshots ride along untouched
    model_config = ConfigDict(extra="allow")

    quote_number: Text = ""
    date: Text = ""
    gc_name: Text = ""
    gc_address: Text = ""
    project_name: Text = ""
    project_address: Text = ""
    estimator: Text = ""
    closing_date: Text = ""
    contact_person: Text = ""
    contact_phone: Text = ""
    architect: Text = ""
    architect_phone: Text = ""
    engineer: Text = ""
    engineer_phone: Text = ""
    structural_drawings: Text = ""
    structural_drawings_date: Text = ""
    structural_drawings_revision: Text = ""
    architectural_drawings: Text = ""
    architectural_drawings_date: Text = ""
    architectural_drawings_revision: Text = ""


# --- Line items ---

class MaterialItem(CamelModel):
    id: str = Field(default_factory=new_item_id)
    description: Text = ""
    weight: Number = 0.0
    unit_rate: Number = 0.0
    total_cost: Number = 0.0


class LabourItem(CamelModel):
    id: str = Field(default_factory=new_item_id)
    member_group: Text = ""
    total_pcs: Number = 0.0
    pcs_per_day: Number = 0.0
    hours: Number = 0.0
    hourly_rate: Number = 0.0
    total_cost: Number = 0.0


class MiscellaneousItem(CamelModel):
    id: str = Field(default_factory=new_item_id)
    type: MiscItemType = "S/O"
    description: Text = ""
    unit: Number = 0.0
    unit_rate: Number = 0.0
    total_cost: Number = 0.0


# --- Structural steel sub-blocks ---

class OWSJ(CamelModel):
    """Open-web steel joists, priced separately from primary steel."""
    supplier: Text = ""
    pcs: Number = 0.0
    weight: Number = 0.0
    price_per_weight: Number = 0.0
    cost: Number = 0.0


class EngineeringDrafting(CamelModel):
    engineering: Number = 0.0
    drafting_tons: Number = 0.0  # mirrored from StructuralSteel.total_tons
    drafting_price_per_ton: Number = 0.0
    drafting_cost: Number = 0.0
    total_cost: Number = 0.0


class ErectionFreight(CamelModel):
    erector: Text = ""
    tons: Number = 0.0  # mirrored from StructuralSteel.total_tons
    price_per_ton: Number = 0.0
    premium: Number = 0.0
    erection_cost: Number = 0.0
    regular_trips: Number = 0.0
    regular_trip_cost: Number = 0.0
    trailer_trips: Number = 0.0
    trailer_trip_cost: Number = 0.0
    freight_cost: Number = 0.0
    total_cost: Number = 0.0


class OverheadProfit(CamelModel):
    overhead: Number = 0.0  # percent of the structural subtotal
    profit: Number = 0.0  # percent of the structural subtotal
    total_percentage: Number = 0.0
    overhead_amount: Number = 0.0
    profit_amount: Number = 0.0


# --- Sections ---

class Section(CamelModel):
    visible: bool = True
    total_cost: Number = 0.0
    overridden_total_cost: OptionalNumber = None


class StructuralSteel(Section):
    area: Number = 0.0
    weight: Number = 0.0
    connection_allowance: Number = 0.0
    total_weight: Number = 0.0
    total_tons: Number = 0.0

    # Reference ratios shown next to the section total
    price_per_ton: Number = 0.0
    price_per_sqft: Number = 0.0
    hours_per_ton: Number = 0.0

    material: List[MaterialItem] = Field(default_factory=list)
    material_cost: Number = 0.0

    shop_labour: List[LabourItem] = Field(default_factory=list)
    shop_labour_cost: Number = 0.0

    owsj: OWSJ = Field(default_factory=OWSJ)
    engineering_drafting: EngineeringDrafting = Field(default_factory=EngineeringDrafting)
    erection_freight: ErectionFreight = Field(default_factory=ErectionFreight)
    overhead_profit: OverheadProfit = Field(default_factory=OverheadProfit)

    subtotal: Number = 0.0


class MetalDeckErection(CamelModel):
    area: Number = 0.0
    price_per_sqft: Number = 0.0
    total_cost: Number = 0.0


class MetalDeck(Section):
    area: Number = 0.0
    cost_per_sqft: Number = 0.0
    deck_cost: Number = 0.0
    erection: MetalDeckErection = Field(default_factory=MetalDeckErection)


class MiscellaneousSteel(Section):
    items: List[MiscellaneousItem] = Field(default_factory=list)


# --- Root aggregate ---

class Estimate(CamelModel):
    id: Optional[str] = None
    project_info: ProjectInfo = Field(default_factory=ProjectInfo)
    structural_steel: StructuralSteel = Field(default_factory=StructuralSteel)
    metal_deck: MetalDeck = Field(default_factory=MetalDeck)
    miscellaneous_steel: MiscellaneousSteel = Field(default_factory=MiscellaneousSteel)
    remarks: Text = ""
    total_cost: Number = 0.0
    notes: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="created_at")
    updated_at: Optional[datetime] = Field(default=None, alias="updated_at")

    def section(self, key: str) -> Section:
        """Section by its snake_case key ("structural_steel", ...)."""
        if key not in SECTION_KEYS:
            raise ValueError(f"Unknown section: {key}. Available: {list(SECTION_KEYS)}")
        return getattr(self, key)

    def to_snapshot(self) -> dict:
        """JSON-ready camelCase document, as stored and exported."""
        return self.model_dump(mode="json", by_alias=True)


# --- Quotation letter (export decoration, not stored on the estimate) ---

class QuotationItem(CamelModel):
    id: str = Field(default_factory=new_item_id)
    type: MiscItemType = "S/O"
    description: Text = ""
    unit: Number = 0.0
    ref_drawing: Text = ""


class QuotationLetter(CamelModel):
    structural_description: Text = ""
    metal_deck_description: Text = ""
    miscellaneous_description: Text = ""
    additional_description: Text = ""
    items: List[QuotationItem] = Field(default_factory=list)


# --- Store results ---

class StoreResult(BaseModel):
    success: bool
    error: Optional[str] = None


class SaveResult(StoreResult):
    id: Optional[str] = None
    quote_number: Optional[str] = None


class LoadResult(StoreResult):
    found: bool = False
    estimate: Optional[Estimate] = None


class ListResult(StoreResult):
    estimates: List[Estimate] = Field(default_factory=list)


class NotesUpdate(BaseModel):
    notes: str = ""
