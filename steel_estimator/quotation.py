"""
Quotation letter content shared by the PDF and Excel exports.

The letter quotes each visible section at its effective cost (override
when set, else the computed total) and lists the miscellaneous items
with their drawing references. Standard clauses are fixed text.
"""

from typing import List, Optional, Tuple

from .calculators.aggregation import effective_cost
from .schemas import Estimate, QuotationItem, QuotationLetter

SECTION_LABELS = {
    "structural_steel": "Structural Steel",
    "metal_deck": "Metal Deck",
    "miscellaneous_steel": "Miscellaneous Steel",
}

QUALIFICATIONS = [
    "All materials to receive one coat of commercial grey primer as per CISC/CPMA 1-73a standard.",
    "Area to be free and clear of any obstruction before installation can commence.",
    "One mobilization allowed for each scope: structural steel, steel deck and miscellaneous steel.",
    "This quotation is to be read in conjunction with attached Appendix A.",
]

EXCLUSIONS = (
    "Finish paint, insulation, fireproofing, galvanizing unless noted, metal stud framing, "
    "shoring, rebar, wood blocking, concrete scanning, Lateral connections to precast "
    "wall/glazing/imp wall panel, testing and inspection."
)

DELIVERY = "To be arranged."

TERMS = (
    "Net 30 days from date of invoice. Subject to progress invoicing. Supply of material may "
    "be invoice separately, 10% holdback applies to installation portion only and it is due "
    "within 60 days from date of substantial completion of our portion of the scope."
)

TAX_NOTE = "All prices are exclusive of H.S.T."
CLOSING = "Trusting the above meets with your approval, we look forward to working with you."


def default_quotation_letter(estimate: Estimate) -> QuotationLetter:
    """Blank descriptions; misc items copied over (without drawing refs) when that section is shown."""
    items = []
    if estimate.miscellaneous_steel.visible:
        items = [
            QuotationItem(type=item.type, description=item.description, unit=item.unit)
            for item in estimate.miscellaneous_steel.items
        ]
    return QuotationLetter(items=items)


def section_description(letter: QuotationLetter, key: str) -> str:
    return {
        "structural_steel": letter.structural_description,
        "metal_deck": letter.metal_deck_description,
        "miscellaneous_steel": letter.miscellaneous_description,
    }[key]


def quoted_sections(estimate: Estimate, letter: Optional[QuotationLetter] = None) -> List[Tuple[str, float, str]]:
    """(label, effective cost, description) for each visible section, in letter order."""
    letter = letter or QuotationLetter()
    rows = []
    for key, label in SECTION_LABELS.items():
        section = estimate.section(key)
        if section.visible:
            rows.append((label, effective_cost(section), section_description(letter, key)))
    return rows


def intro_text(estimate: Estimate) -> str:
    scope = "structural steel"
    if estimate.metal_deck.visible:
        scope += " and metal deck"
    return f"We are pleased to submit our quotation for the supply and installation of {scope} as per referenced drawings:"


def drawing_lines(estimate: Estimate) -> List[str]:
    info = estimate.project_info
    lines = []
    for name, dated, revision in (
        (info.structural_drawings, info.structural_drawings_date, info.structural_drawings_revision),
        (info.architectural_drawings, info.architectural_drawings_date, info.architectural_drawings_revision),
    ):
        if not name:
            continue
        line = f"{name} dated {dated}"
        if revision:
            line += f" (Rev. {revision})"
        lines.append(line)
    return lines
