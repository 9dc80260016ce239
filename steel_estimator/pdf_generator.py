"""
PDF exports — front sheet and quotation letter.

Uses fpdf2 (pure Python, no system dependencies). Both documents only
format numbers the engine has already computed; nothing is recalculated
here.

Front sheet: project info, then every section with its cost build-up,
the override (if any) and the grand total. Hidden sections are still
printed, marked as excluded, so the estimator sees the whole picture.

Quotation letter: client-facing; visible sections only, each at its
effective (override-or-actual) price.
"""

from datetime import datetime

from fpdf import FPDF

from .calculators.aggregation import effective_cost
from .config import settings
from .quotation import (
    CLOSING,
    DELIVERY,
    EXCLUSIONS,
    QUALIFICATIONS,
    TAX_NOTE,
    TERMS,
    default_quotation_letter,
    drawing_lines,
    intro_text,
    quoted_sections,
)
from .schemas import Estimate, QuotationLetter


def _fmt(amount) -> str:
    """Format a number as $X,XXX.XX"""
    try:
        return f"${float(amount):,.2f}"
    except (ValueError, TypeError):
        return "$0.00"


def _fmt_num(value, digits=2) -> str:
    try:
        return f"{float(value):,.{digits}f}"
    except (ValueError, TypeError):
        return "0"


def _safe(text) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        str(text)
        .replace("\u2022", "-")    # bullet
        .replace("\u2014", " - ")  # em dash
        .replace("\u2013", "-")    # en dash
        .replace("\u201c", '"')    # left double quote
        .replace("\u201d", '"')    # right double quote
        .replace("\u2018", "'")    # left single quote
        .replace("\u2019", "'")    # right single quote
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


def _letter_date(value: str) -> str:
    """ISO date -> 'January 15, 2025'; anything else is printed as given."""
    try:
        return datetime.fromisoformat(value).strftime("%B %d, %Y")
    except (ValueError, TypeError):
        return value or datetime.utcnow().strftime("%B %d, %Y")


class EstimatePDF(FPDF):
    """Shared page furniture and table helpers for both documents."""

    def __init__(self, company_name="", company_info=""):
        super().__init__()
        self.company_name = company_name
        self.company_info = company_info
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # We handle headers manually per document

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="C")

    def letterhead(self):
        self.set_font("Helvetica", "B", 16)
        self.cell(0, 8, _safe(self.company_name), new_x="LMARGIN", new_y="NEXT")
        if self.company_info:
            self.set_font("Helvetica", "", 9)
            self.set_text_color(100, 100, 100)
            self.cell(0, 5, _safe(self.company_info), new_x="LMARGIN", new_y="NEXT")
            self.set_text_color(0, 0, 0)
        self.ln(4)

    def section_header(self, title):
        """Render a section header bar."""
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(45, 55, 72)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, f"  {_safe(title)}", fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def sub_header(self, title):
        self.set_font("Helvetica", "B", 9)
        self.cell(0, 6, _safe(title), new_x="LMARGIN", new_y="NEXT")

    def table_header(self, cols):
        """Render a table header row. cols: [(label, width), ...]; the first column is left-aligned."""
        self.set_font("Helvetica", "B", 8)
        self.set_fill_color(240, 240, 240)
        for i, (label, width) in enumerate(cols):
            self.cell(width, 6, label, border="B", fill=True, align="L" if i == 0 else "R")
        self.ln()

    def table_row(self, values, widths, bold=False):
        """Render a table data row."""
        self.set_font("Helvetica", "B" if bold else "", 8)
        for i, (val, width) in enumerate(zip(values, widths)):
            self.cell(width, 5.5, _safe(val), align="L" if i == 0 else "R")
        self.ln()

    def field_row(self, label, value):
        """Label on the left, value right-aligned."""
        self.set_font("Helvetica", "", 9)
        self.cell(130, 5.5, _safe(label))
        self.cell(60, 5.5, _safe(value), align="R")
        self.ln()

    def subtotal_row(self, label, amount):
        """Render a subtotal row spanning the full width."""
        self.set_font("Helvetica", "B", 9)
        self.cell(140, 6, _safe(label), align="R", border="T")
        self.cell(50, 6, _fmt(amount), align="R", border="T")
        self.ln(8)

    def total_bar(self, label, amount):
        self.set_fill_color(45, 55, 72)
        self.set_text_color(255, 255, 255)
        self.set_font("Helvetica", "B", 13)
        self.cell(130, 10, f"  {_safe(label)}", fill=True)
        self.cell(60, 10, f"{_fmt(amount)}  ", fill=True, align="R")
        self.set_text_color(0, 0, 0)
        self.ln(14)


def _new_pdf() -> EstimatePDF:
    pdf = EstimatePDF(company_name=settings.COMPANY_NAME, company_info=settings.COMPANY_ADDRESS)
    pdf.alias_nb_pages()
    pdf.add_page()
    return pdf


def _section_title(title: str, section) -> str:
    return title if section.visible else f"{title} (EXCLUDED)"


def _override_rows(pdf: EstimatePDF, section):
    if section.overridden_total_cost is not None:
        pdf.field_row("Calculated total", _fmt(section.total_cost))
        pdf.field_row("Override", _fmt(section.overridden_total_cost))


# --- Front sheet ---

def _front_sheet_project_info(pdf: EstimatePDF, estimate: Estimate):
    info = estimate.project_info
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, _safe(f"FRONT SHEET - QUOTE #{info.quote_number}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(2)

    pdf.section_header("PROJECT INFORMATION")
    for label, value in (
        ("Date", info.date),
        ("Project Name", info.project_name),
        ("Project Address", info.project_address),
        ("General Contractor", info.gc_name),
        ("GC Address", info.gc_address),
        ("Contact Person", info.contact_person),
        ("Contact Phone", info.contact_phone),
        ("Closing Date", info.closing_date),
        ("Estimator", info.estimator),
        ("Architect", f"{info.architect} {info.architect_phone}".strip()),
        ("Structural Engineer", f"{info.engineer} {info.engineer_phone}".strip()),
    ):
        pdf.field_row(label, value)
    for line in drawing_lines(estimate):
        pdf.field_row("Drawings", line)
    pdf.ln(4)


def _front_sheet_structural(pdf: EstimatePDF, estimate: Estimate):
    ss = estimate.structural_steel
    pdf.section_header(_section_title("STRUCTURAL STEEL", ss))
    pdf.field_row("Area (SQFT)", _fmt_num(ss.area, 0))
    pdf.field_row("Weight (lbs)", _fmt_num(ss.weight, 0))
    pdf.field_row("Allowance for connections (%)", _fmt_num(ss.connection_allowance))
    pdf.field_row("Total weight (lbs)", _fmt_num(ss.total_weight, 0))
    pdf.field_row("Total tons", _fmt_num(ss.total_tons, 3))
    pdf.ln(2)

    pdf.sub_header("Material")
    cols = [("Description", 85), ("Weight", 35), ("Unit Rate", 30), ("Total", 40)]
    widths = [c[1] for c in cols]
    pdf.table_header(cols)
    for item in ss.material:
        pdf.table_row(
            [item.description[:45], _fmt_num(item.weight, 0), _fmt(item.unit_rate), _fmt(item.total_cost)],
            widths,
        )
    pdf.subtotal_row("Material Subtotal", ss.material_cost)

    pdf.sub_header("Shop Labour")
    cols = [("Member Group", 60), ("Pcs", 25), ("Pcs/Day", 25), ("Hours", 25), ("Rate", 25), ("Total", 30)]
    widths = [c[1] for c in cols]
    pdf.table_header(cols)
    for item in ss.shop_labour:
        pdf.table_row(
            [
                item.member_group[:30], _fmt_num(item.total_pcs, 0), _fmt_num(item.pcs_per_day),
                _fmt_num(item.hours, 0), f"{_fmt(item.hourly_rate)}/hr", _fmt(item.total_cost),
            ],
            widths,
        )
    pdf.subtotal_row("Shop Labour Subtotal", ss.shop_labour_cost)

    owsj = ss.owsj
    pdf.sub_header("O.W.S.J")
    pdf.field_row("Supplier", owsj.supplier)
    pdf.field_row(f"{_fmt_num(owsj.pcs, 0)} pcs, {_fmt_num(owsj.weight, 0)} x {_fmt(owsj.price_per_weight)}", "")
    pdf.subtotal_row("O.W.S.J Cost", owsj.cost)

    ed = ss.engineering_drafting
    pdf.sub_header("Engineering & Drafting")
    pdf.field_row("Engineering", _fmt(ed.engineering))
    pdf.field_row(
        f"Drafting: {_fmt_num(ed.drafting_tons, 3)} tons x {_fmt(ed.drafting_price_per_ton)}/ton",
        _fmt(ed.drafting_cost),
    )
    pdf.subtotal_row("Engineering & Drafting Cost", ed.total_cost)

    ef = ss.erection_freight
    pdf.sub_header("Erection & Freight")
    pdf.field_row("Erector", ef.erector)
    pdf.field_row(
        f"Erection: {_fmt_num(ef.tons, 3)} tons x {_fmt(ef.price_per_ton)}/ton + premium {_fmt(ef.premium)}",
        _fmt(ef.erection_cost),
    )
    pdf.field_row(
        f"Freight: {_fmt_num(ef.regular_trips, 0)} regular x {_fmt(ef.regular_trip_cost)}, "
        f"{_fmt_num(ef.trailer_trips, 0)} trailer x {_fmt(ef.trailer_trip_cost)}",
        _fmt(ef.freight_cost),
    )
    pdf.subtotal_row("Erection & Freight Cost", ef.total_cost)

    op = ss.overhead_profit
    pdf.field_row("Subtotal", _fmt(ss.subtotal))
    pdf.field_row(f"Overhead ({_fmt_num(op.overhead)}%)", _fmt(op.overhead_amount))
    pdf.field_row(f"Profit ({_fmt_num(op.profit)}%)", _fmt(op.profit_amount))
    pdf.field_row(
        "Price per ton / per SQFT / hours per ton",
        f"{_fmt(ss.price_per_ton)} / {_fmt(ss.price_per_sqft)} / {_fmt_num(ss.hours_per_ton)}",
    )
    _override_rows(pdf, ss)
    pdf.subtotal_row("Total Structural Steel Cost", effective_cost(ss))


def _front_sheet_metal_deck(pdf: EstimatePDF, estimate: Estimate):
    md = estimate.metal_deck
    pdf.section_header(_section_title("METAL DECK", md))
    pdf.field_row(f"Deck: {_fmt_num(md.area, 0)} SQFT x {_fmt(md.cost_per_sqft)}", _fmt(md.deck_cost))
    pdf.field_row(
        f"Erection: {_fmt_num(md.erection.area, 0)} SQFT x {_fmt(md.erection.price_per_sqft)}",
        _fmt(md.erection.total_cost),
    )
    _override_rows(pdf, md)
    pdf.subtotal_row("Total Metal Deck Cost", effective_cost(md))


def _front_sheet_miscellaneous(pdf: EstimatePDF, estimate: Estimate):
    ms = estimate.miscellaneous_steel
    pdf.section_header(_section_title("MISCELLANEOUS STEEL", ms))
    cols = [("Description", 85), ("Type", 20), ("Unit", 20), ("Unit Rate", 30), ("Total", 35)]
    widths = [c[1] for c in cols]
    pdf.table_header(cols)
    for item in ms.items:
        pdf.table_row(
            [item.description[:45], item.type, _fmt_num(item.unit, 0), _fmt(item.unit_rate), _fmt(item.total_cost)],
            widths,
        )
    _override_rows(pdf, ms)
    pdf.subtotal_row("Total Miscellaneous Steel Cost", effective_cost(ms))


def generate_front_sheet_pdf(estimate: Estimate) -> bytes:
    """Internal cost build-up of the whole estimate. Returns PDF bytes."""
    pdf = _new_pdf()
    pdf.letterhead()
    _front_sheet_project_info(pdf, estimate)
    _front_sheet_structural(pdf, estimate)
    _front_sheet_metal_deck(pdf, estimate)
    _front_sheet_miscellaneous(pdf, estimate)

    pdf.ln(2)
    pdf.total_bar("TOTAL COST", estimate.total_cost)

    if estimate.remarks:
        pdf.section_header("REMARKS")
        pdf.set_font("Helvetica", "", 9)
        pdf.multi_cell(0, 4.5, _safe(estimate.remarks))

    return bytes(pdf.output())


# --- Quotation letter ---

def generate_quotation_pdf(estimate: Estimate, letter: QuotationLetter = None) -> bytes:
    """Client-facing quotation letter. Returns PDF bytes."""
    letter = letter or default_quotation_letter(estimate)
    info = estimate.project_info
    pdf = _new_pdf()
    pw = pdf.w - pdf.l_margin - pdf.r_margin  # printable width

    pdf.letterhead()
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, _safe(_letter_date(info.date)), align="R", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    pdf.cell(0, 5, _safe(info.gc_name), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, _safe(info.gc_address), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)
    pdf.cell(0, 5, _safe(f"Attention: {info.contact_person}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 6, _safe(f"Re: {info.project_name}"), new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, _safe(info.project_address), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, _safe(f"Quote #{info.quote_number}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    pdf.cell(0, 5, _safe(f"Dear {info.contact_person},"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(2)
    pdf.multi_cell(pw, 5, _safe(intro_text(estimate)), new_x="LMARGIN", new_y="NEXT")
    for line in drawing_lines(estimate):
        pdf.cell(0, 5, _safe(f"    - {line}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    for label, cost, description in quoted_sections(estimate, letter):
        pdf.set_font("Helvetica", "B", 10)
        pdf.cell(130, 6, _safe(label))
        pdf.cell(60, 6, _fmt(cost), align="R")
        pdf.ln()
        if description:
            pdf.set_font("Helvetica", "", 9)
            pdf.set_x(pdf.l_margin + 6)
            pdf.multi_cell(pw - 6, 4.5, _safe(description), new_x="LMARGIN", new_y="NEXT")
        pdf.ln(2)

    if letter.items:
        pdf.ln(2)
        pdf.section_header("MISCELLANEOUS STEEL ITEMS")
        cols = [("Description", 105), ("Type", 25), ("Unit", 25), ("Ref. Dwg.", 35)]
        widths = [c[1] for c in cols]
        pdf.table_header(cols)
        for item in letter.items:
            pdf.table_row([item.description[:55], item.type, _fmt_num(item.unit, 0), item.ref_drawing], widths)
        pdf.ln(4)

    if letter.additional_description:
        pdf.set_font("Helvetica", "", 9)
        pdf.multi_cell(pw, 4.5, _safe(letter.additional_description), new_x="LMARGIN", new_y="NEXT")
        pdf.ln(4)

    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, TAX_NOTE, new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    pdf.section_header("QUALIFICATIONS")
    pdf.set_font("Helvetica", "", 9)
    for q in QUALIFICATIONS:
        pdf.multi_cell(pw, 4.5, _safe(f"  - {q}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(3)

    for title, text in (("EXCLUSIONS", EXCLUSIONS), ("DELIVERY", DELIVERY), ("TERMS", TERMS)):
        pdf.section_header(title)
        pdf.set_font("Helvetica", "", 9)
        pdf.multi_cell(pw, 4.5, _safe(text), new_x="LMARGIN", new_y="NEXT")
        pdf.ln(3)

    pdf.set_font("Helvetica", "I", 8)
    pdf.set_text_color(100, 100, 100)
    pdf.cell(pw, 4, f"This quotation is valid for {settings.QUOTE_VALID_DAYS} days from the date above.",
             new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(4)

    pdf.set_font("Helvetica", "", 10)
    pdf.multi_cell(pw, 5, CLOSING, new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)
    pdf.cell(0, 5, "Yours truly,", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(6)
    pdf.set_font("Helvetica", "B", 10)
    pdf.cell(0, 5, _safe(info.estimator), new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())
