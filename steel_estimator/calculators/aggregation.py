"""
Override & aggregation layer.

The grand total is the ceiling of the sum, over visible sections, of
each section's override-or-actual cost. It is always read from the
sections at evaluation time; nothing caches an effective cost.
"""

from ..schemas import Estimate
from .base import ceil_currency
from .registry import get_calculator, list_calculators


def effective_cost(section) -> float:
    """overridden_total_cost when set, else the computed total_cost."""
    if section.overridden_total_cost is not None:
        return section.overridden_total_cost
    return section.total_cost


def section_contribution(section) -> float:
    """What a section adds to the grand total: 0 while hidden."""
    if not section.visible:
        return 0.0
    return effective_cost(section)


def grand_total(estimate: Estimate) -> float:
    return ceil_currency(sum(
        section_contribution(estimate.section(key)) for key in list_calculators()
    ))


def aggregate(estimate: Estimate) -> Estimate:
    """Recompute only the grand total (sections are taken as already derived)."""
    estimate.total_cost = grand_total(estimate)
    return estimate


def recalculate_all(estimate: Estimate) -> Estimate:
    """
    Full recompute, in place: every section re-derived from its inputs,
    then the grand total. Used on load to normalize snapshots written by
    older rules, and after every command. Idempotent.
    """
    for key in list_calculators():
        get_calculator(key).derive(estimate.section(key))
    return aggregate(estimate)
