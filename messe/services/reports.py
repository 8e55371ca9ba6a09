import calendar
from datetime import datetime, timedelta
from io import BytesIO

from flask import current_app
from openpyxl import Workbook
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from sqlalchemy.orm import joinedload

from messe.exceptions import ValidationError
from messe.models import Requisition, StockItem
from messe.services.stock import stats

PERIODS = {"weekly": "Semanal", "monthly": "Mensal"}


# =========================
# Helpers
# =========================
def _one_month_before(d: datetime) -> datetime:
    year, month = (d.year, d.month - 1) if d.month > 1 else (d.year - 1, 12)
    day = min(d.day, calendar.monthrange(year, month)[1])
    return d.replace(year=year, month=month, day=day)


def period_range(period: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    if period not in PERIODS:
        raise ValidationError("Período inválido (use weekly ou monthly).", period=period)
    now = now or datetime.utcnow()
    if period == "weekly":
        return now - timedelta(days=7), now
    return _one_month_before(now), now


def build_report(period: str, now: datetime | None = None) -> dict:
    start, end = period_range(period, now)

    requisitions = (
        Requisition.query
        .options(joinedload(Requisition.items), joinedload(Requisition.sector))
        .filter(Requisition.date >= start, Requisition.date <= end)
        .order_by(Requisition.date.asc())
        .all()
    )
    low_stock = (
        StockItem.query
        .filter(StockItem.quantity <= StockItem.min_level)
        .order_by(StockItem.name.asc())
        .all()
    )
    s = stats()

    return {
        "period": period,
        "label": PERIODS[period],
        "start": start,
        "end": end,
        "summary": [
            ("Total de Requisições no Período", len(requisitions)),
            ("Itens com Stock Crítico (Atual)", s["lowStockItems"]),
            ("Total de Itens Cadastrados", s["totalItems"]),
        ],
        "requisitions": [
            [
                r.date.strftime("%d/%m/%Y"),
                f"#{r.id}",
                r.nome_requisitante,
                r.sector.name if r.sector else "-",
                str(len(r.items)),
                r.status,
            ]
            for r in requisitions
        ],
        "low_stock": [
            [i.name, i.category, str(i.quantity), str(i.min_level), i.unit]
            for i in low_stock
        ],
    }


def report_filename(report: dict, ext: str) -> str:
    return f"relatorio_messe_{report['period']}_{report['end'].strftime('%Y-%m-%d')}.{ext}"


# =========================
# PDF
# =========================
REQ_HEADERS = ["Data", "ID", "Requisitante", "Setor", "Qtd Itens", "Estado"]
LOW_HEADERS = ["Item", "Categoria", "Atual", "Mínimo", "Unidade"]


def render_pdf(report: dict) -> BytesIO:
    bio = BytesIO()
    c = canvas.Canvas(bio, pagesize=A4)
    w, h = A4

    x = 15 * mm
    y = h - 20 * mm

    c.setFont("Helvetica-Bold", 16)
    c.drawString(x, y, current_app.config.get("HOTEL_NAME", "Messe"))
    y -= 8 * mm

    c.setFont("Helvetica-Bold", 12)
    c.drawString(x, y, f"Relatório de Gestão de Stock ({report['label']})")
    y -= 7 * mm

    c.setFont("Helvetica", 9)
    c.drawString(x, y, f"Gerado em: {datetime.now().strftime('%d/%m/%Y %H:%M')}")
    y -= 5 * mm
    c.drawString(
        x, y,
        f"Período: {report['start'].strftime('%d/%m/%Y')} até {report['end'].strftime('%d/%m/%Y')}",
    )
    y -= 10 * mm

    summary_rows = [[label, str(value)] for label, value in report["summary"]]
    y = _pdf_section(c, "Resumo Geral", ["Indicador", "Valor"], summary_rows, y)

    if report["requisitions"]:
        y = _pdf_section(c, "Detalhamento de Requisições", REQ_HEADERS, report["requisitions"], y)
    else:
        y = _pdf_section(c, "Detalhamento de Requisições", [], [], y)
        c.setFont("Helvetica", 9)
        c.drawString(x, y, "Nenhuma requisição encontrada neste período.")
        y -= 10 * mm

    if report["low_stock"]:
        _pdf_section(c, "Alerta de Reposição (Stock Crítico)", LOW_HEADERS, report["low_stock"], y)

    c.showPage()
    c.save()
    bio.seek(0)
    return bio


def _pdf_section(c, title: str, headers: list[str], rows: list[list[str]], y: float) -> float:
    w, h = A4
    x = 15 * mm

    if y < 40 * mm:
        c.showPage()
        y = h - 20 * mm

    c.setFont("Helvetica-Bold", 11)
    c.drawString(x, y, title)
    y -= 7 * mm

    if not headers:
        return y

    colw = (w - 30 * mm) / max(1, len(headers))

    def _header(y):
        c.setFont("Helvetica-Bold", 9)
        for i, head in enumerate(headers):
            c.drawString(x + i * colw, y, head[:28])
        c.setFont("Helvetica", 9)
        return y - 6 * mm

    y = _header(y)
    for row in rows:
        if y < 20 * mm:
            c.showPage()
            y = _header(h - 20 * mm)
        for i, cell in enumerate(row):
            c.drawString(x + i * colw, y, str(cell)[:28])
        y -= 5 * mm

    return y - 8 * mm


# =========================
# XLSX
# =========================
def render_xlsx(report: dict) -> BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = "Resumo"
    ws.append(["Indicador", "Valor"])
    for label, value in report["summary"]:
        ws.append([label, value])
    ws.append([])
    ws.append(["Início", report["start"].strftime("%d/%m/%Y")])
    ws.append(["Fim", report["end"].strftime("%d/%m/%Y")])

    ws = wb.create_sheet("Requisições")
    ws.append(REQ_HEADERS)
    for row in report["requisitions"]:
        ws.append(row)

    ws = wb.create_sheet("Stock Crítico")
    ws.append(LOW_HEADERS)
    for name, category, qty, minimo, unit in report["low_stock"]:
        ws.append([name, category, int(qty), int(minimo), unit])

    bio = BytesIO()
    wb.save(bio)
    bio.seek(0)
    return bio
