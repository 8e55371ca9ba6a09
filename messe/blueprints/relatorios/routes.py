from flask import send_file
from flask_login import login_required

from messe.services import reports
from . import relatorios_bp

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@relatorios_bp.get("/<period>.pdf")
@login_required
def relatorio_pdf(period):
    report = reports.build_report(period)
    return send_file(
        reports.render_pdf(report),
        as_attachment=True,
        download_name=reports.report_filename(report, "pdf"),
        mimetype="application/pdf",
    )


@relatorios_bp.get("/<period>.xlsx")
@login_required
def relatorio_xlsx(period):
    report = reports.build_report(period)
    return send_file(
        reports.render_xlsx(report),
        as_attachment=True,
        download_name=reports.report_filename(report, "xlsx"),
        mimetype=XLSX_MIMETYPE,
    )
