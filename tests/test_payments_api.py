import json

import pytest

from models import db
from models.booking import Booking
from models.payment import Payment


@pytest.fixture
def booking_id(book):
    # 09:00-11:00 on the main space: 30.00
    return book("user", "09:00", "11:00").get_json()["data"]["booking"]["id"]


def _pay(client, auth, booking_id, amount="30.00", who="user", **extra):
    payload = {"booking_id": booking_id, "amount": amount, "payment_method": "card", **extra}
    return client.post("/payments", json=payload, headers=auth(who))


def _payment_count(app, booking_id):
    with app.app_context():
        return Payment.query.filter_by(booking_id=booking_id).count()


def _booking_status(app, booking_id):
    with app.app_context():
        return db.session.get(Booking, booking_id).status


def test_exact_payment_confirms_the_booking(app, client, auth, booking_id):
    resp = _pay(client, auth, booking_id, transaction_id="tx-001")
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["payment"]["status"] == "completed"
    assert data["payment"]["amount"] == "30.00"
    assert data["payment"]["transaction_id"] == "tx-001"
    assert data["booking"]["status"] == "confirmed"

    assert _booking_status(app, booking_id) == "confirmed"


def test_numeric_amount_is_compared_by_value(client, auth, booking_id):
    assert _pay(client, auth, booking_id, amount=30).status_code == 201


@pytest.mark.parametrize("amount", ["29.99", "30.01", "30.001"])
def test_amount_mismatch_changes_nothing(app, client, auth, booking_id, amount):
    resp = _pay(client, auth, booking_id, amount=amount)
    assert resp.status_code == 400
    assert "does not match" in resp.get_json()["message"]

    assert _booking_status(app, booking_id) == "pending"
    assert _payment_count(app, booking_id) == 0


@pytest.mark.parametrize("payload", [
    {"amount": "30.00", "payment_method": "card"},
    {"booking_id": 1, "payment_method": "card"},
    {"booking_id": 1, "amount": "30.00"},
    {"booking_id": 1, "amount": "-5", "payment_method": "card"},
    {"booking_id": 1, "amount": "thirty", "payment_method": "card"},
    {"booking_id": "abc", "amount": "30.00", "payment_method": "card"},
])
def test_invalid_payment_requests(client, auth, booking_id, payload):
    assert client.post("/payments", json=payload, headers=auth("user")).status_code == 400


def test_unknown_booking_is_not_found(client, auth, catalogue):
    assert _pay(client, auth, 9999).status_code == 404


def test_only_the_owner_or_managing_staff_pays(app, client, auth, booking_id):
    assert _pay(client, auth, booking_id, who="other_user").status_code == 403
    assert _pay(client, auth, booking_id, who="other_manager").status_code == 403
    assert _payment_count(app, booking_id) == 0


@pytest.mark.parametrize("who", ["manager", "admin"])
def test_staff_pays_for_a_client_booking(app, client, auth, users, booking_id, who):
    resp = _pay(client, auth, booking_id, who=who, payment_method="cash")
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["booking"]["status"] == "confirmed"
    assert data["booking"]["user_id"] == users["user"]
    assert data["payment"]["transaction_id"].startswith(f"MANAGER_{booking_id}_")

    rows = client.get("/audit-logs?action=PAYMENT_CREATE", headers=auth("admin")).get_json()["data"]["audit_logs"]
    assert rows[0]["user_id"] == users[who]
    assert json.loads(rows[0]["metadata"])["client_id"] == users["user"]


def test_staff_payment_still_checks_the_amount(app, client, auth, booking_id):
    assert _pay(client, auth, booking_id, amount="25.00", who="manager").status_code == 400
    assert _booking_status(app, booking_id) == "pending"
    assert _payment_count(app, booking_id) == 0


def test_second_payment_is_a_conflict(app, client, auth, booking_id):
    assert _pay(client, auth, booking_id).status_code == 201
    assert _pay(client, auth, booking_id).status_code == 409
    assert _payment_count(app, booking_id) == 1


def test_cancelled_booking_cannot_be_paid(app, client, auth, booking_id):
    client.patch(f"/bookings/{booking_id}/status", json={"status": "cancelled"}, headers=auth("manager"))

    resp = _pay(client, auth, booking_id)
    assert resp.status_code == 400
    assert _booking_status(app, booking_id) == "cancelled"
    assert _payment_count(app, booking_id) == 0


@pytest.mark.parametrize("status", ["failed", "refunded"])
def test_failed_or_refunded_payment_cancels_the_booking(app, client, auth, booking_id, status):
    payment_id = _pay(client, auth, booking_id).get_json()["data"]["payment"]["id"]

    resp = client.patch(f"/payments/{payment_id}/status", json={"status": status}, headers=auth("manager"))
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["payment"]["status"] == status
    assert data["booking"]["status"] == "cancelled"
    assert _booking_status(app, booking_id) == "cancelled"


def test_payment_status_change_on_terminal_booking_is_rejected(app, client, auth, booking_id):
    payment_id = _pay(client, auth, booking_id).get_json()["data"]["payment"]["id"]
    client.patch(f"/payments/{payment_id}/status", json={"status": "failed"}, headers=auth("admin"))

    # booking is cancelled now: re-completing the payment must not revive it
    resp = client.patch(f"/payments/{payment_id}/status", json={"status": "completed"}, headers=auth("admin"))
    assert resp.status_code == 400

    assert _booking_status(app, booking_id) == "cancelled"
    with app.app_context():
        assert db.session.get(Payment, payment_id).status == "failed"


def test_payment_status_permissions_and_validation(client, auth, booking_id):
    payment_id = _pay(client, auth, booking_id).get_json()["data"]["payment"]["id"]
    url = f"/payments/{payment_id}/status"

    assert client.patch(url, json={"status": "refunded"}, headers=auth("user")).status_code == 403
    assert client.patch(url, json={"status": "refunded"}, headers=auth("other_manager")).status_code == 403
    assert client.patch(url, json={"status": "pending"}, headers=auth("admin")).status_code == 400
    assert client.patch(url, json={}, headers=auth("admin")).status_code == 400
    assert client.patch("/payments/9999/status", json={"status": "failed"}, headers=auth("admin")).status_code == 404


def test_payment_reads_are_scoped(client, auth, book, booking_id):
    _pay(client, auth, booking_id)
    other = book("other_user", "14:00", "15:00").get_json()["data"]["booking"]["id"]
    other_payment = _pay(client, auth, other, amount="15.00", who="other_user").get_json()["data"]["payment"]["id"]

    def count(who):
        return client.get("/payments", headers=auth(who)).get_json()["results"]

    assert count("user") == 1
    assert count("other_user") == 1
    assert count("manager") == 2
    assert count("other_manager") == 0
    assert count("admin") == 2

    assert client.get(f"/payments/{other_payment}", headers=auth("other_user")).status_code == 200
    assert client.get(f"/payments/{other_payment}", headers=auth("user")).status_code == 403
    assert client.get(f"/payments/{other_payment}", headers=auth("manager")).status_code == 200
    assert client.get("/payments/9999", headers=auth("admin")).status_code == 404


def test_payment_changes_are_audited(client, auth, booking_id):
    payment_id = _pay(client, auth, booking_id).get_json()["data"]["payment"]["id"]
    client.patch(f"/payments/{payment_id}/status", json={"status": "refunded"}, headers=auth("admin"))

    rows = client.get("/audit-logs?entity=payment", headers=auth("admin")).get_json()["data"]["audit_logs"]
    assert sorted(r["action"] for r in rows) == ["PAYMENT_CREATE", "PAYMENT_STATUS_UPDATE"]


def test_completing_the_payment_again_reconfirms_a_reopened_booking(app, client, auth, booking_id):
    payment_id = _pay(client, auth, booking_id).get_json()["data"]["payment"]["id"]

    resp = client.patch(f"/bookings/{booking_id}/status", json={"status": "pending"}, headers=auth("manager"))
    assert resp.status_code == 200
    assert _booking_status(app, booking_id) == "pending"

    resp = client.patch(f"/payments/{payment_id}/status", json={"status": "completed"}, headers=auth("manager"))
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["payment"]["status"] == "completed"
    assert data["booking"]["status"] == "confirmed"
    assert _booking_status(app, booking_id) == "confirmed"
