"""
Excel exports — front sheet and quotation workbooks.

pandas builds the sheets, written through the XlsxWriter engine. Every
workbook starts with a "Project Information" sheet; the front sheet
workbook adds the per-section cost build-up, the quotation workbook the
quoted components and misc item list.
"""

import io
import logging

import pandas as pd

from .calculators.aggregation import effective_cost
from .quotation import default_quotation_letter, quoted_sections
from .schemas import Estimate, QuotationLetter

logger = logging.getLogger(__name__)


def _project_info_frame(estimate: Estimate) -> pd.DataFrame:
    info = estimate.project_info
    rows = [
        ("Quote #", info.quote_number),
        ("Date", info.date),
        ("Project Name", info.project_name),
        ("Project Address", info.project_address),
        ("General Contractor", info.gc_name),
        ("GC Address", info.gc_address),
        ("Contact Person", info.contact_person),
        ("Contact Phone", info.contact_phone),
        ("Closing Date", info.closing_date),
        ("Estimator", info.estimator),
    ]
    return pd.DataFrame(rows, columns=["Field", "Value"])


def _front_sheet_frame(estimate: Estimate) -> pd.DataFrame:
    """One row per cost line: section, line, quantity, rate, amount."""
    ss = estimate.structural_steel
    md = estimate.metal_deck
    ms = estimate.miscellaneous_steel
    rows = []

    def add(section, line, quantity=None, rate=None, amount=None):
        rows.append({"Section": section, "Line": line, "Quantity": quantity, "Rate": rate, "Amount": amount})

    s = "Structural Steel" if ss.visible else "Structural Steel (excluded)"
    add(s, "Total weight (lbs)", ss.total_weight)
    add(s, "Total tons", ss.total_tons)
    for item in ss.material:
        add(s, f"Material: {item.description}", item.weight, item.unit_rate, item.total_cost)
    add(s, "Material subtotal", amount=ss.material_cost)
    for item in ss.shop_labour:
        add(s, f"Shop labour: {item.member_group}", item.hours, item.hourly_rate, item.total_cost)
    add(s, "Shop labour subtotal", amount=ss.shop_labour_cost)
    add(s, f"O.W.S.J {ss.owsj.supplier}".strip(), ss.owsj.weight, ss.owsj.price_per_weight, ss.owsj.cost)
    add(s, "Engineering", amount=ss.engineering_drafting.engineering)
    add(s, "Drafting", ss.engineering_drafting.drafting_tons,
        ss.engineering_drafting.drafting_price_per_ton, ss.engineering_drafting.drafting_cost)
    ef = ss.erection_freight
    add(s, "Erection", ef.tons, ef.price_per_ton, ef.erection_cost)
    add(s, "Freight (regular trips)", ef.regular_trips, ef.regular_trip_cost)
    add(s, "Freight (trailer trips)", ef.trailer_trips, ef.trailer_trip_cost)
    add(s, "Freight", amount=ef.freight_cost)
    add(s, "Subtotal", amount=ss.subtotal)
    add(s, "Overhead", rate=ss.overhead_profit.overhead, amount=ss.overhead_profit.overhead_amount)
    add(s, "Profit", rate=ss.overhead_profit.profit, amount=ss.overhead_profit.profit_amount)
    add(s, "Total Structural Steel Cost", amount=effective_cost(ss))

    d = "Metal Deck" if md.visible else "Metal Deck (excluded)"
    add(d, "Deck", md.area, md.cost_per_sqft, md.deck_cost)
    add(d, "Deck erection", md.erection.area, md.erection.price_per_sqft, md.erection.total_cost)
    add(d, "Total Metal Deck Cost", amount=effective_cost(md))

    m = "Miscellaneous Steel" if ms.visible else "Miscellaneous Steel (excluded)"
    for item in ms.items:
        add(m, f"{item.type} {item.description}", item.unit, item.unit_rate, item.total_cost)
    add(m, "Total Miscellaneous Steel Cost", amount=effective_cost(ms))

    add("", "TOTAL COST", amount=estimate.total_cost)
    if estimate.remarks:
        add("", f"Remarks: {estimate.remarks}")
    return pd.DataFrame(rows, columns=["Section", "Line", "Quantity", "Rate", "Amount"])


def _quotation_frames(estimate: Estimate, letter: QuotationLetter):
    components = pd.DataFrame(
        quoted_sections(estimate, letter),
        columns=["Component", "Cost", "Description"],
    )
    items = pd.DataFrame(
        [(i.type, i.description, i.unit, i.ref_drawing) for i in letter.items],
        columns=["Type", "Description", "Unit", "Ref. Dwg."],
    )
    return components, items


def _write_project_info(writer, estimate: Estimate):
    _project_info_frame(estimate).to_excel(writer, sheet_name="Project Information", index=False)
    writer.sheets["Project Information"].set_column("A:A", 22)
    writer.sheets["Project Information"].set_column("B:B", 50)


def generate_front_sheet_xlsx(estimate: Estimate) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        _write_project_info(writer, estimate)
        _front_sheet_frame(estimate).to_excel(writer, sheet_name="Front Sheet", index=False)

        workbook = writer.book
        currency_format = workbook.add_format({"num_format": "$#,##0.00"})
        number_format = workbook.add_format({"num_format": "#,##0.###"})
        sheet = writer.sheets["Front Sheet"]
        sheet.set_column("A:A", 28)
        sheet.set_column("B:B", 50)
        sheet.set_column("C:C", 14, number_format)
        sheet.set_column("D:D", 14, number_format)
        sheet.set_column("E:E", 16, currency_format)

    logger.debug("Front sheet workbook built for %s", estimate.project_info.quote_number)
    return output.getvalue()


def generate_quotation_xlsx(estimate: Estimate, letter: QuotationLetter = None) -> bytes:
    letter = letter or default_quotation_letter(estimate)
    components, items = _quotation_frames(estimate, letter)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        _write_project_info(writer, estimate)
        components.to_excel(writer, sheet_name="Quotation", index=False)

        sheet = writer.sheets["Quotation"]
        workbook = writer.book
        bold = workbook.add_format({"bold": True})
        sheet.set_column("A:A", 24)
        sheet.set_column("B:B", 16, workbook.add_format({"num_format": "$#,##0.00"}))
        sheet.set_column("C:C", 60)
        sheet.set_column("D:D", 14)

        row = len(components) + 2
        sheet.write(row, 0, "Additional Description", bold)
        sheet.write(row, 1, letter.additional_description)

        if not items.empty:
            sheet.write(row + 2, 0, "Miscellaneous Items", bold)
            items.to_excel(writer, sheet_name="Quotation", index=False, startrow=row + 3)

    logger.debug("Quotation workbook built for %s", estimate.project_info.quote_number)
    return output.getvalue()
