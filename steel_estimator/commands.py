"""
Estimate commands — one typed model per field-level edit.

Every edit a user can make to an estimate is one of these, tagged by
`kind` so a raw JSON body validates straight into the right command:

    {"kind": "update_labour_item", "item_id": "...", "field": "pcs_per_day", "value": 12}

Field names inside commands are snake_case attribute names.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from .schemas import MiscItemType, OptionalNumber, SectionKey, Text

# Raw user input; numeric targets coerce it (unparseable -> 0).
# int is listed so 5 reaches a text field as "5", not "5.0".
FieldValue = Optional[Union[int, float, str]]


# --- Estimate-level ---

class UpdateProjectInfo(BaseModel):
    kind: Literal["update_project_info"] = "update_project_info"
    field: str
    value: Text = ""


class UpdateRemarks(BaseModel):
    kind: Literal["update_remarks"] = "update_remarks"
    remarks: Text = ""


# --- Structural steel ---

class SetStructuralField(BaseModel):
    kind: Literal["set_structural_field"] = "set_structural_field"
    field: Literal["area", "weight", "connection_allowance"]
    value: FieldValue = None


class AddMaterialItem(BaseModel):
    kind: Literal["add_material_item"] = "add_material_item"
    description: str = ""


class UpdateMaterialItem(BaseModel):
    kind: Literal["update_material_item"] = "update_material_item"
    item_id: str
    field: Literal["description", "weight", "unit_rate"]
    value: FieldValue = None


class RemoveMaterialItem(BaseModel):
    kind: Literal["remove_material_item"] = "remove_material_item"
    item_id: str


class AddLabourItem(BaseModel):
    kind: Literal["add_labour_item"] = "add_labour_item"
    member_group: str = ""


class UpdateLabourItem(BaseModel):
    kind: Literal["update_labour_item"] = "update_labour_item"
    item_id: str
    field: Literal["member_group", "total_pcs", "pcs_per_day", "hourly_rate"]
    value: FieldValue = None


class RemoveLabourItem(BaseModel):
    kind: Literal["remove_labour_item"] = "remove_labour_item"
    item_id: str


class UpdateOWSJ(BaseModel):
    kind: Literal["update_owsj"] = "update_owsj"
    field: Literal["supplier", "pcs", "weight", "price_per_weight"]
    value: FieldValue = None


class UpdateEngineeringDrafting(BaseModel):
    kind: Literal["update_engineering_drafting"] = "update_engineering_drafting"
    field: Literal["engineering", "drafting_price_per_ton"]
    value: FieldValue = None


class UpdateErectionFreight(BaseModel):
    kind: Literal["update_erection_freight"] = "update_erection_freight"
    field: Literal[
        "erector", "price_per_ton", "premium",
        "regular_trips", "regular_trip_cost", "trailer_trip_cost",
    ]
    value: FieldValue = None


class UpdateOverheadProfit(BaseModel):
    kind: Literal["update_overhead_profit"] = "update_overhead_profit"
    field: Literal["overhead", "profit"]
    value: FieldValue = None


# --- Metal deck ---

class SetMetalDeckField(BaseModel):
    kind: Literal["set_metal_deck_field"] = "set_metal_deck_field"
    field: Literal["area", "cost_per_sqft", "erection_area", "erection_price_per_sqft"]
    value: FieldValue = None


# --- Miscellaneous steel ---

class AddMiscellaneousItem(BaseModel):
    kind: Literal["add_miscellaneous_item"] = "add_miscellaneous_item"
    type: MiscItemType = "S/O"
    description: str = ""


class UpdateMiscellaneousItem(BaseModel):
    kind: Literal["update_miscellaneous_item"] = "update_miscellaneous_item"
    item_id: str
    field: Literal["type", "description", "unit", "unit_rate"]
    value: FieldValue = None


class RemoveMiscellaneousItem(BaseModel):
    kind: Literal["remove_miscellaneous_item"] = "remove_miscellaneous_item"
    item_id: str


# --- Any section ---

class ToggleVisibility(BaseModel):
    kind: Literal["toggle_visibility"] = "toggle_visibility"
    section: SectionKey


class SetOverride(BaseModel):
    """value=None clears the override."""
    kind: Literal["set_override"] = "set_override"
    section: SectionKey
    value: OptionalNumber = None


class RecalculateAll(BaseModel):
    kind: Literal["recalculate_all"] = "recalculate_all"


Command = Annotated[
    Union[
        UpdateProjectInfo,
        UpdateRemarks,
        SetStructuralField,
        AddMaterialItem,
        UpdateMaterialItem,
        RemoveMaterialItem,
        AddLabourItem,
        UpdateLabourItem,
        RemoveLabourItem,
        UpdateOWSJ,
        UpdateEngineeringDrafting,
        UpdateErectionFreight,
        UpdateOverheadProfit,
        SetMetalDeckField,
        AddMiscellaneousItem,
        UpdateMiscellaneousItem,
        RemoveMiscellaneousItem,
        ToggleVisibility,
        SetOverride,
        RecalculateAll,
    ],
    Field(discriminator="kind"),
]

_command_adapter = TypeAdapter(Command)


def parse_command(payload: dict) -> BaseModel:
    """Validate a raw dict into its command model. Raises pydantic.ValidationError."""
    return _command_adapter.validate_python(payload)
