"""
Export downloads for stored estimates.

GET  /api/estimates/{id}/front-sheet.pdf   internal cost build-up
GET  /api/estimates/{id}/front-sheet.xlsx
POST /api/estimates/{id}/quotation.pdf     client letter; body is the letter
POST /api/estimates/{id}/quotation.xlsx    (optional, defaults from the estimate)
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..database import get_db
from ..excel_export import generate_front_sheet_xlsx, generate_quotation_xlsx
from ..pdf_generator import generate_front_sheet_pdf, generate_quotation_pdf
from ..schemas import Estimate, QuotationLetter
from .estimates import _load_or_404

router = APIRouter(prefix="/estimates", tags=["exports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _download(content: bytes, media_type: str, estimate: Estimate, kind: str, ext: str) -> Response:
    filename = f"{estimate.project_info.quote_number or estimate.id}-{kind}.{ext}"
    return Response(
        content=content,
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )


@router.get("/{estimate_id}/front-sheet.pdf")
def front_sheet_pdf(estimate_id: str, db: Session = Depends(get_db)):
    estimate = _load_or_404(db, estimate_id)
    return _download(generate_front_sheet_pdf(estimate), "application/pdf", estimate, "front-sheet", "pdf")


@router.get("/{estimate_id}/front-sheet.xlsx")
def front_sheet_xlsx(estimate_id: str, db: Session = Depends(get_db)):
    estimate = _load_or_404(db, estimate_id)
    return _download(generate_front_sheet_xlsx(estimate), XLSX_MEDIA_TYPE, estimate, "front-sheet", "xlsx")


@router.post("/{estimate_id}/quotation.pdf")
def quotation_pdf(
    estimate_id: str,
    letter: Optional[QuotationLetter] = Body(None),
    db: Session = Depends(get_db),
):
    estimate = _load_or_404(db, estimate_id)
    return _download(generate_quotation_pdf(estimate, letter), "application/pdf", estimate, "quotation", "pdf")


@router.post("/{estimate_id}/quotation.xlsx")
def quotation_xlsx(
    estimate_id: str,
    letter: Optional[QuotationLetter] = Body(None),
    db: Session = Depends(get_db),
):
    estimate = _load_or_404(db, estimate_id)
    return _download(generate_quotation_xlsx(estimate, letter), XLSX_MEDIA_TYPE, estimate, "quotation", "xlsx")
