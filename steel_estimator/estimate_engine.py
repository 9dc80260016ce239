"""
Estimate engine — applies commands to an estimate.

apply_command is a pure function of (estimate, command): it edits a deep
copy through the owning section's calculator and always finishes with
the full recompute, so the incremental path and the load-time path share
one set of formulas.

EstimateEngine is the single owner of the "current" estimate for a
caller that edits interactively. It holds no globals; views subscribe
and get the new estimate after every change.
"""

import logging
from datetime import date
from typing import Callable, List, Optional

from .calculators.aggregation import recalculate_all
from .calculators.registry import get_calculator
from .commands import (
    AddLabourItem,
    AddMaterialItem,
    AddMiscellaneousItem,
    RecalculateAll,
    RemoveLabourItem,
    RemoveMaterialItem,
    RemoveMiscellaneousItem,
    SetMetalDeckField,
    SetOverride,
    SetStructuralField,
    ToggleVisibility,
    UpdateEngineeringDrafting,
    UpdateErectionFreight,
    UpdateLabourItem,
    UpdateMaterialItem,
    UpdateMiscellaneousItem,
    UpdateOverheadProfit,
    UpdateOWSJ,
    UpdateProjectInfo,
    UpdateRemarks,
    parse_command,
)
from .defaults import new_estimate
from .schemas import Estimate, ProjectInfo

logger = logging.getLogger(__name__)

Listener = Callable[[Estimate], None]


# --- Command handlers (mutate the working copy) ---

def _project_info_attr(field: str) -> str:
    """Accept either the attribute name or its camelCase alias."""
    if field in ProjectInfo.model_fields:
        return field
    for name, info in ProjectInfo.model_fields.items():
        if info.alias == field:
            return name
    return field


def _update_project_info(estimate: Estimate, command: UpdateProjectInfo):
    setattr(estimate.project_info, _project_info_attr(command.field), command.value)


def _update_remarks(estimate: Estimate, command: UpdateRemarks):
    estimate.remarks = command.remarks


def _set_structural_field(estimate: Estimate, command: SetStructuralField):
    get_calculator("structural_steel").set_base_field(
        estimate.structural_steel, command.field, command.value,
    )
    if command.field == "area":
        # Deck area is its own input; the deck is only re-derived, never copied into
        get_calculator("metal_deck").derive(estimate.metal_deck)


def _add_material_item(estimate: Estimate, command: AddMaterialItem):
    get_calculator("structural_steel").add_material_item(estimate.structural_steel, command.description)


def _update_material_item(estimate: Estimate, command: UpdateMaterialItem):
    get_calculator("structural_steel").update_material_item(
        estimate.structural_steel, command.item_id, command.field, command.value,
    )


def _remove_material_item(estimate: Estimate, command: RemoveMaterialItem):
    get_calculator("structural_steel").remove_material_item(estimate.structural_steel, command.item_id)


def _add_labour_item(estimate: Estimate, command: AddLabourItem):
    get_calculator("structural_steel").add_labour_item(estimate.structural_steel, command.member_group)


def _update_labour_item(estimate: Estimate, command: UpdateLabourItem):
    get_calculator("structural_steel").update_labour_item(
        estimate.structural_steel, command.item_id, command.field, command.value,
    )


def _remove_labour_item(estimate: Estimate, command: RemoveLabourItem):
    get_calculator("structural_steel").remove_labour_item(estimate.structural_steel, command.item_id)


def _update_owsj(estimate: Estimate, command: UpdateOWSJ):
    get_calculator("structural_steel").update_owsj_field(
        estimate.structural_steel, command.field, command.value,
    )


def _update_engineering_drafting(estimate: Estimate, command: UpdateEngineeringDrafting):
    get_calculator("structural_steel").update_engineering_drafting_field(
        estimate.structural_steel, command.field, command.value,
    )


def _update_erection_freight(estimate: Estimate, command: UpdateErectionFreight):
    get_calculator("structural_steel").update_erection_freight_field(
        estimate.structural_steel, command.field, command.value,
    )


def _update_overhead_profit(estimate: Estimate, command: UpdateOverheadProfit):
    get_calculator("structural_steel").update_overhead_profit_field(
        estimate.structural_steel, command.field, command.value,
    )


def _set_metal_deck_field(estimate: Estimate, command: SetMetalDeckField):
    get_calculator("metal_deck").set_field(estimate.metal_deck, command.field, command.value)


def _add_miscellaneous_item(estimate: Estimate, command: AddMiscellaneousItem):
    get_calculator("miscellaneous_steel").add_item(
        estimate.miscellaneous_steel, command.type, command.description,
    )


def _update_miscellaneous_item(estimate: Estimate, command: UpdateMiscellaneousItem):
    get_calculator("miscellaneous_steel").update_item(
        estimate.miscellaneous_steel, command.item_id, command.field, command.value,
    )


def _remove_miscellaneous_item(estimate: Estimate, command: RemoveMiscellaneousItem):
    get_calculator("miscellaneous_steel").remove_item(estimate.miscellaneous_steel, command.item_id)


def _toggle_visibility(estimate: Estimate, command: ToggleVisibility):
    get_calculator(command.section).toggle_visibility(estimate.section(command.section))


def _set_override(estimate: Estimate, command: SetOverride):
    get_calculator(command.section).set_override(estimate.section(command.section), command.value)


def _recalculate_all(estimate: Estimate, command: RecalculateAll):
    pass  # the post-step below is the whole operation


COMMAND_HANDLERS = {
    UpdateProjectInfo: _update_project_info,
    UpdateRemarks: _update_remarks,
    SetStructuralField: _set_structural_field,
    AddMaterialItem: _add_material_item,
    UpdateMaterialItem: _update_material_item,
    RemoveMaterialItem: _remove_material_item,
    AddLabourItem: _add_labour_item,
    UpdateLabourItem: _update_labour_item,
    RemoveLabourItem: _remove_labour_item,
    UpdateOWSJ: _update_owsj,
    UpdateEngineeringDrafting: _update_engineering_drafting,
    UpdateErectionFreight: _update_erection_freight,
    UpdateOverheadProfit: _update_overhead_profit,
    SetMetalDeckField: _set_metal_deck_field,
    AddMiscellaneousItem: _add_miscellaneous_item,
    UpdateMiscellaneousItem: _update_miscellaneous_item,
    RemoveMiscellaneousItem: _remove_miscellaneous_item,
    ToggleVisibility: _toggle_visibility,
    SetOverride: _set_override,
    RecalculateAll: _recalculate_all,
}


def apply_command(estimate: Estimate, command) -> Estimate:
    """
    Return a new, fully consistent estimate with the command applied.
    The input estimate is not modified. Accepts a command model or its raw dict.
    """
    if isinstance(command, dict):
        command = parse_command(command)
    handler = COMMAND_HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unknown estimate command: {type(command).__name__}")

    updated = estimate.model_copy(deep=True)
    handler(updated, command)
    logger.debug("Applied %s to estimate %s", command.kind, updated.id or "(unsaved)")
    return recalculate_all(updated)


def normalize(estimate: Estimate) -> Estimate:
    """Pure full recompute (the input is not modified)."""
    return recalculate_all(estimate.model_copy(deep=True))


class EstimateEngine:
    """
    Owns the estimate being edited.

    Readers get copies; the only way to change state is apply(),
    load(), reset() or recalculate_all(), and every change notifies
    subscribers with the new estimate.
    """

    def __init__(self, estimate: Optional[Estimate] = None):
        self._estimate = normalize(estimate) if estimate is not None else new_estimate()
        self._listeners: List[Listener] = []

    @property
    def estimate(self) -> Estimate:
        return self._estimate.model_copy(deep=True)

    @property
    def total_cost(self) -> float:
        return self._estimate.total_cost

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def reset(self, today: Optional[date] = None) -> Estimate:
        """Start over with a fresh default estimate."""
        return self._replace(new_estimate(today))

    def load(self, estimate: Estimate) -> Estimate:
        """Take over a stored snapshot, normalizing any stale derived fields."""
        return self._replace(normalize(estimate))

    def apply(self, command) -> Estimate:
        return self._replace(apply_command(self._estimate, command))

    def recalculate_all(self) -> Estimate:
        return self._replace(normalize(self._estimate))

    def _replace(self, estimate: Estimate) -> Estimate:
        self._estimate = estimate
        for listener in list(self._listeners):
            listener(self.estimate)
        return self.estimate
