from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from io import BytesIO
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
import logging
import pandas as pd

from database import get_db
from models.farm import Farm
from models.production_records import ProductionRecord
from models.sales_invoices import SalesInvoice
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_current_user, get_user_identifier, scoped_farm_id
from utils.jalali import normalize_jalali, today_jalali

router = APIRouter(prefix="/api/reports", tags=["Reports"])
logger = logging.getLogger("reports")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADER_FILL = PatternFill(start_color="16A34A", end_color="16A34A", fill_type="solid")
STRIPE_FILL = PatternFill(start_color="F0FDF4", end_color="F0FDF4", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF", size=12)
THIN = Side(style="thin")
CELL_BORDER = Border(top=THIN, left=THIN, bottom=THIN, right=THIN)
CENTER = Alignment(horizontal="center", vertical="center")

# (column key, sheet header, width)
PRODUCTION_COLUMNS = [
    ("date", "تاریخ", 15),
    ("farm_name", "نام فارم", 15),
    ("egg_count", "تعداد تخم‌مرغ", 15),
    ("broken_eggs", "تخم‌مرغ شکسته", 15),
    ("mortality", "تلفات", 12),
    ("feed_consumption", "مصرف دان (کیلوگرم)", 18),
    ("water_consumption", "مصرف آب (لیتر)", 15),
    ("notes", "یادداشت", 25),
]

INVOICE_COLUMNS = [
    ("invoice_number", "شماره حواله", 22),
    ("date", "تاریخ", 15),
    ("farm_name", "نام فارم", 15),
    ("customer_name", "نام مشتری", 20),
    ("customer_phone", "تلفن", 15),
    ("quantity", "تعداد", 12),
    ("price_per_unit", "قیمت واحد", 15),
    ("total_price", "جمع کل", 18),
    ("is_paid", "وضعیت پرداخت", 15),
]

def _parse_range(start_date: Optional[str], end_date: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    try:
        start = normalize_jalali(start_date) if start_date else None
        end = normalize_jalali(end_date) if end_date else None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if start and end and start > end:
        raise HTTPException(status_code=400, detail="startDate must not be after endDate")
    return start, end

def _rows_with_farm_name(db: Session, model, farm_id: Optional[int], start: Optional[str], end: Optional[str]) -> List[dict]:
    query = db.query(model, Farm.name).join(Farm, model.farm_id == Farm.id)
    if farm_id is not None:
        query = query.filter(model.farm_id == farm_id)
    if start:
        query = query.filter(model.date >= start)
    if end:
        query = query.filter(model.date <= end)

    rows = []
    for obj, farm_name in query.order_by(model.date.desc(), model.id.desc()).all():
        row = sqlalchemy_to_dict(obj)
        row["farm_name"] = farm_name
        rows.append(row)
    return rows

def build_workbook(rows: List[dict], columns, sheet_name: str) -> BytesIO:
    """Render rows into a styled right-to-left worksheet and return the xlsx bytes."""
    keys = [key for key, _, _ in columns]
    df = pd.DataFrame(rows, columns=keys)
    df.columns = [header for _, header, _ in columns]

    excel_file = BytesIO()
    with pd.ExcelWriter(excel_file, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        ws = writer.sheets[sheet_name]
        ws.sheet_view.rightToLeft = True

        for idx, (_, _, width) in enumerate(columns, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = width

        for row_idx, row in enumerate(ws.iter_rows(min_row=1, max_row=ws.max_row, max_col=len(columns)), start=1):
            for cell in row:
                cell.alignment = CENTER
                cell.border = CELL_BORDER
                if row_idx == 1:
                    cell.font = HEADER_FONT
                    cell.fill = HEADER_FILL
                elif row_idx % 2 == 0:
                    cell.fill = STRIPE_FILL
    excel_file.seek(0)
    return excel_file

def _excel_response(excel_file: BytesIO, prefix: str) -> StreamingResponse:
    filename = f"{prefix}-{today_jalali().replace('/', '-')}.xlsx"
    headers = {
        'Content-Disposition': f'attachment; filename="{filename}"'
    }
    return StreamingResponse(excel_file, media_type=XLSX_MEDIA_TYPE, headers=headers)

@router.get("/production/export")
def export_production_report(
    farm_id: Optional[int] = Query(None, alias="farmId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    """Production records in the given Jalali date range as an Excel workbook."""
    farm_filter = scoped_farm_id(user, farm_id)
    start, end = _parse_range(start_date, end_date)

    rows = _rows_with_farm_name(db, ProductionRecord, farm_filter, start, end)
    for row in rows:
        row["notes"] = row.get("notes") or "-"

    logger.info(f"Production report ({len(rows)} rows) exported by user {get_user_identifier(user)}")
    return _excel_response(build_workbook(rows, PRODUCTION_COLUMNS, "گزارش تولید"), "production-report")

@router.get("/invoices/export")
def export_invoice_report(
    farm_id: Optional[int] = Query(None, alias="farmId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    """Sales invoices in the given Jalali date range as an Excel workbook."""
    farm_filter = scoped_farm_id(user, farm_id)
    start, end = _parse_range(start_date, end_date)

    rows = _rows_with_farm_name(db, SalesInvoice, farm_filter, start, end)
    for row in rows:
        row["customer_phone"] = row.get("customer_phone") or "-"
        row["is_paid"] = "پرداخت شده" if row.get("is_paid") else "پرداخت نشده"

    logger.info(f"Invoice report ({len(rows)} rows) exported by user {get_user_identifier(user)}")
    return _excel_response(build_workbook(rows, INVOICE_COLUMNS, "گزارش فروش"), "sales-report")
