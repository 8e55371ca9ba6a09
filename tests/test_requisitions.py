"""
Tests for requisition submission: all-or-nothing stock withdrawal.
"""

import pytest

from config import TestingConfig
from messe import create_app
from messe.exceptions import InsufficientStock, NotFound, ValidationError
from messe.extensions import db
from messe.models import Requisition, Sector, StockItem, StockMovement, User
from messe.services import requisitions

from conftest import ADMIN_EMAIL


def _submit(client, sector_id, items, nome="Chefe Cozinha"):
    return client.post("/api/requisitions", json={
        "sectorId": sector_id,
        "nomeRequisitante": nome,
        "items": items,
    })


class TestRiceExample:

    def test_above_stock_rejected_citing_available(self, admin_client, make_item, quantity_of, sector_id):
        rice = make_item(name="Rice", quantity=10, min_level=5)

        resp = _submit(admin_client, sector_id, [{"itemId": rice, "quantity": 12}])

        assert resp.status_code == 409
        body = resp.get_json()
        assert body["code"] == "INSUFFICIENT_STOCK"
        assert "Rice" in body["error"]
        assert "Disponível: 10" in body["error"]
        assert body["data"]["available"] == 10
        assert body["data"]["item_id"] == rice
        assert quantity_of(rice) == 10

    def test_within_stock_succeeds_and_leaves_critical(self, admin_client, make_item, quantity_of, sector_id):
        rice = make_item(name="Rice", quantity=10, min_level=5)

        resp = _submit(admin_client, sector_id, [{"itemId": rice, "quantity": 8}])

        assert resp.status_code == 201
        assert quantity_of(rice) == 2
        item = admin_client.get(f"/api/stock/{rice}").get_json()
        assert item["status"] == "Crítico"


class TestAllOrNothing:

    def test_one_bad_line_changes_nothing(self, app, admin_client, make_item, quantity_of, sector_id):
        rice = make_item(name="Arroz", quantity=10)
        beans = make_item(name="Feijão", quantity=2)

        resp = _submit(admin_client, sector_id, [
            {"itemId": rice, "quantity": 5},
            {"itemId": beans, "quantity": 3},
        ])

        assert resp.status_code == 409
        assert resp.get_json()["data"]["item_name"] == "Feijão"
        assert quantity_of(rice) == 10
        assert quantity_of(beans) == 2
        with app.app_context():
            assert Requisition.query.count() == 0
            assert StockMovement.query.count() == 0

    def test_success_decrements_exactly_and_only_referenced_items(self, admin_client, make_item, quantity_of, sector_id):
        rice = make_item(name="Arroz", quantity=10)
        beans = make_item(name="Feijão", quantity=6)
        salt = make_item(name="Sal", quantity=4)

        resp = _submit(admin_client, sector_id, [
            {"itemId": rice, "quantity": 3},
            {"itemId": beans, "quantity": 6},
        ])

        assert resp.status_code == 201
        assert quantity_of(rice) == 7
        assert quantity_of(beans) == 0
        assert quantity_of(salt) == 4

    def test_repeated_item_lines_are_summed(self, admin_client, make_item, quantity_of, sector_id):
        rice = make_item(name="Arroz", quantity=10)

        resp = _submit(admin_client, sector_id, [
            {"itemId": rice, "quantity": 6},
            {"itemId": rice, "quantity": 6},
        ])

        assert resp.status_code == 409
        assert quantity_of(rice) == 10

    def test_sequential_requisitions_cannot_overdraw(self, admin_client, make_item, quantity_of, sector_id):
        rice = make_item(name="Arroz", quantity=10)

        assert _submit(admin_client, sector_id, [{"itemId": rice, "quantity": 8}]).status_code == 201
        assert _submit(admin_client, sector_id, [{"itemId": rice, "quantity": 8}]).status_code == 409
        assert quantity_of(rice) == 2


class TestRecord:

    def test_response_shape(self, admin_client, make_item, sector_id, admin_id):
        rice = make_item(name="Arroz", quantity=10)

        body = _submit(admin_client, sector_id, [{"itemId": rice, "quantity": 1}], nome="Maria Lopes").get_json()

        assert body["sectorId"] == sector_id
        assert body["sectorName"] == "Cozinha"
        assert body["nomeRequisitante"] == "Maria Lopes"
        assert body["status"] == "CONCLUIDO"
        assert body["createdByUserId"] == admin_id
        assert body["createdByName"] == "Administrador"
        assert body["items"] == [{"itemId": rice, "itemName": "Arroz", "quantity": 1}]

    def test_created_by_is_the_session_user(self, operator_client, make_item, sector_id, operator_id, admin_id):
        rice = make_item(quantity=10)

        body = operator_client.post("/api/requisitions", json={
            "sectorId": sector_id,
            "nomeRequisitante": "Operador",
            "createdByUserId": admin_id,
            "items": [{"itemId": rice, "quantity": 1}],
        }).get_json()

        assert body["createdByUserId"] == operator_id

    def test_each_line_writes_an_out_movement(self, admin_client, make_item, sector_id):
        rice = make_item(name="Arroz", quantity=10)

        req_id = _submit(admin_client, sector_id, [{"itemId": rice, "quantity": 4}]).get_json()["id"]

        history = admin_client.get(f"/api/movements/item/{rice}").get_json()
        assert len(history) == 1
        assert history[0]["type"] == "OUT"
        assert history[0]["quantity"] == 4
        assert history[0]["reason"] == f"Requisição #{req_id}"

    def test_list_and_detail(self, admin_client, make_item, sector_id):
        rice = make_item(quantity=10)
        first = _submit(admin_client, sector_id, [{"itemId": rice, "quantity": 1}]).get_json()
        second = _submit(admin_client, sector_id, [{"itemId": rice, "quantity": 1}]).get_json()

        listed = admin_client.get("/api/requisitions").get_json()
        assert [r["id"] for r in listed] == [second["id"], first["id"]]
        assert admin_client.get(f"/api/requisitions/{first['id']}").get_json()["id"] == first["id"]
        assert admin_client.get("/api/requisitions/999").status_code == 404


class TestValidation:

    def test_missing_sector(self, admin_client, make_item):
        rice = make_item()
        resp = _submit(admin_client, None, [{"itemId": rice, "quantity": 1}])
        assert resp.status_code == 400
        assert resp.get_json()["data"]["field"] == "sectorId"

    def test_unknown_sector(self, admin_client, make_item):
        rice = make_item()
        assert _submit(admin_client, 999, [{"itemId": rice, "quantity": 1}]).status_code == 404

    @pytest.mark.parametrize("nome", ["", "  ", "Jo"])
    def test_requester_name_required(self, admin_client, make_item, sector_id, nome):
        rice = make_item()
        resp = _submit(admin_client, sector_id, [{"itemId": rice, "quantity": 1}], nome=nome)
        assert resp.status_code == 400
        assert resp.get_json()["data"]["field"] == "nomeRequisitante"

    def test_at_least_one_line(self, admin_client, sector_id):
        resp = _submit(admin_client, sector_id, [])
        assert resp.status_code == 400
        assert resp.get_json()["data"]["field"] == "items"

    def test_line_quantity_at_least_one(self, admin_client, make_item, quantity_of, sector_id):
        rice = make_item(quantity=10)
        resp = _submit(admin_client, sector_id, [{"itemId": rice, "quantity": 0}])
        assert resp.status_code == 400
        assert quantity_of(rice) == 10

    def test_unknown_item(self, admin_client, make_item, quantity_of, sector_id):
        rice = make_item(quantity=10)
        resp = _submit(admin_client, sector_id, [
            {"itemId": rice, "quantity": 1},
            {"itemId": 999, "quantity": 1},
        ])
        assert resp.status_code == 404
        assert quantity_of(rice) == 10


class TestServiceErrors:

    def test_insufficient_stock_exception(self, ctx, make_item):
        rice = make_item(name="Rice", quantity=10)
        admin = User.query.filter_by(email=ADMIN_EMAIL).first()
        sector = Sector.query.first()

        with pytest.raises(InsufficientStock) as exc:
            requisitions.submit_requisition(sector.id, "Chefe", [{"itemId": rice, "quantity": 12}], admin)

        assert exc.value.available == 10
        assert exc.value.data["requested"] == 12

    def test_validation_exception(self, ctx):
        admin = User.query.filter_by(email=ADMIN_EMAIL).first()
        with pytest.raises(ValidationError):
            requisitions.submit_requisition(1, "Chefe", None, admin)

    def test_not_found_exception(self, ctx):
        admin = User.query.filter_by(email=ADMIN_EMAIL).first()
        with pytest.raises(NotFound):
            requisitions.submit_requisition(1, "Chefe", [{"itemId": 42, "quantity": 1}], admin)


class TestConcurrentRequisitions:
    """
    Another request commits between this request's read of the items and its
    stock update. Both ask for 8 of 10: only one may succeed.
    """

    @pytest.fixture
    def file_app(self, tmp_path):
        class FileConfig(TestingConfig):
            SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'race.db'}"

        app = create_app(FileConfig)
        yield app
        with app.app_context():
            db.session.remove()
            db.engine.dispose()

    def test_interleaved_requisition_is_rejected(self, file_app, monkeypatch):
        app = file_app
        with app.app_context():
            rice = StockItem(name="Rice", category="Mercearia", unit="kg", quantity=10, min_level=5)
            db.session.add(rice)
            db.session.commit()
            rice_id = rice.id
            admin_id = User.query.filter_by(email=ADMIN_EMAIL).first().id
            sector_id = Sector.query.first().id

        real_load_items = requisitions._load_items
        competed = []

        def load_then_compete(item_ids):
            items = real_load_items(item_ids)
            if not competed:
                competed.append(True)
                # novo app context = nova sessão/ligação, como outro pedido
                with app.app_context():
                    other = db.session.get(User, admin_id)
                    requisitions.submit_requisition(
                        sector_id, "Outro Requisitante", [{"itemId": rice_id, "quantity": 8}], other,
                    )
            return items

        monkeypatch.setattr(requisitions, "_load_items", load_then_compete)

        with app.app_context():
            admin = db.session.get(User, admin_id)
            with pytest.raises(InsufficientStock) as exc:
                requisitions.submit_requisition(
                    sector_id, "Primeiro Requisitante", [{"itemId": rice_id, "quantity": 8}], admin,
                )

            assert exc.value.available == 2

        with app.app_context():
            assert db.session.get(StockItem, rice_id).quantity == 2
            assert Requisition.query.count() == 1
            assert Requisition.query.first().nome_requisitante == "Outro Requisitante"
