from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..auth.security import get_current_user
from ..schemas.reports import FinancialReport, ProfitMarginReport
from ..services.summaries import financial_report, profit_margins
from ..document_creator.pdf_builder import build_financial_report_pdf
from ..logging import structlog
from .common import get_locale


router = APIRouter(prefix="/api", tags=["reports"])


@router.get("/reports/financial", response_model=FinancialReport)
def get_financial_report(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    _=Depends(get_current_user),
):
    return financial_report(db, start_date, end_date, locale)


@router.get("/reports/financial.pdf")
def download_financial_report(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    _=Depends(get_current_user),
):
    report = financial_report(db, start_date, end_date, locale)
    pdf = build_financial_report_pdf(report, locale)
    structlog.get_logger().info("financial_report_rendered", start=report["startDate"], end=report["endDate"], size=len(pdf))
    filename = f"financial-report-{report['startDate']}-{report['endDate']}.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/financial/profit-margin", response_model=ProfitMarginReport)
def get_profit_margin(db: Session = Depends(get_db), _=Depends(get_current_user)):
    return profit_margins(db)
