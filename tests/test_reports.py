"""
Tests for the weekly/monthly report exports.
"""

from datetime import datetime, timedelta
from io import BytesIO

import pytest
from openpyxl import load_workbook

from messe.exceptions import ValidationError
from messe.extensions import db
from messe.models import Requisition
from messe.services import reports


class TestPeriodRange:

    def test_weekly(self):
        now = datetime(2026, 10, 18, 12, 0)
        assert reports.period_range("weekly", now) == (datetime(2026, 10, 11, 12, 0), now)

    def test_monthly_clamps_day(self):
        now = datetime(2026, 3, 31, 9, 30)
        start, _ = reports.period_range("monthly", now)
        assert start == datetime(2026, 2, 28, 9, 30)

    def test_monthly_across_year(self):
        start, _ = reports.period_range("monthly", datetime(2026, 1, 15))
        assert start == datetime(2025, 12, 15)

    def test_unknown_period(self):
        with pytest.raises(ValidationError):
            reports.period_range("daily")


class TestBuildReport:

    def test_only_requisitions_in_period(self, app, admin_client, make_item, sector_id):
        rice = make_item(name="Arroz", quantity=10, min_level=5)
        make_item(name="Feijão", quantity=1, min_level=3)
        admin_client.post("/api/requisitions", json={
            "sectorId": sector_id, "nomeRequisitante": "Chefe Cozinha",
            "items": [{"itemId": rice, "quantity": 1}],
        })
        old = admin_client.post("/api/requisitions", json={
            "sectorId": sector_id, "nomeRequisitante": "Antigo",
            "items": [{"itemId": rice, "quantity": 1}],
        }).get_json()

        with app.app_context():
            db.session.get(Requisition, old["id"]).date = datetime.utcnow() - timedelta(days=20)
            db.session.commit()

            weekly = reports.build_report("weekly")
            monthly = reports.build_report("monthly")

        assert [r[2] for r in weekly["requisitions"]] == ["Chefe Cozinha"]
        assert len(monthly["requisitions"]) == 2
        assert weekly["low_stock"] == [["Feijão", "Mercearia", "1", "3", "kg"]]
        assert dict(weekly["summary"])["Total de Itens Cadastrados"] == 2


class TestExportEndpoints:

    def test_pdf(self, admin_client, make_item):
        make_item(name="Feijão", quantity=1, min_level=3)

        resp = admin_client.get("/api/reports/weekly.pdf")

        assert resp.status_code == 200
        assert resp.mimetype == "application/pdf"
        assert resp.data.startswith(b"%PDF")
        assert "relatorio_messe_weekly_" in resp.headers["Content-Disposition"]

    def test_pdf_without_requisitions(self, admin_client):
        resp = admin_client.get("/api/reports/monthly.pdf")
        assert resp.status_code == 200
        assert resp.data.startswith(b"%PDF")

    def test_xlsx(self, admin_client, make_item):
        make_item(name="Feijão", quantity=1, min_level=3)

        resp = admin_client.get("/api/reports/monthly.xlsx")

        assert resp.status_code == 200
        wb = load_workbook(BytesIO(resp.data))
        assert wb.sheetnames == ["Resumo", "Requisições", "Stock Crítico"]
        rows = list(wb["Stock Crítico"].iter_rows(values_only=True))
        assert rows[1] == ("Feijão", "Mercearia", 1, 3, "kg")

    def test_bad_period(self, admin_client):
        assert admin_client.get("/api/reports/daily.pdf").status_code == 400

    def test_requires_login(self, client):
        assert client.get("/api/reports/weekly.pdf").status_code == 401
