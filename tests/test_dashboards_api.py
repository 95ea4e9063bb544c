import pytest


@pytest.fixture
def activity(client, auth, book):
    """A paid booking at the main location and a pending one at the branch."""
    paid = book("user", "09:00", "11:00").get_json()["data"]["booking"]["id"]
    client.post(
        "/payments",
        json={"booking_id": paid, "amount": "30.00", "payment_method": "card"},
        headers=auth("user"),
    )
    pending = book("other_user", "10:00", "11:00", space_key="branch_space_id").get_json()["data"]["booking"]["id"]
    return {"paid": paid, "pending": pending}


def test_admin_dashboard_totals(client, auth, activity):
    resp = client.get("/admin/dashboard", headers=auth("admin"))
    assert resp.status_code == 200
    data = resp.get_json()["data"]

    assert data["users"] == {"total": 5, "by_role": {"user": 2, "manager": 2, "admin": 1}}
    assert data["locations"] == {"total": 2, "with_managers": 2, "without_managers": 0}
    assert data["spaces"]["total"] == 2
    assert data["bookings"]["total"] == 2
    assert data["bookings"]["by_status"] == {"pending": 1, "confirmed": 1, "cancelled": 0, "completed": 0}
    assert {b["id"] for b in data["bookings"]["recent"]} == {activity["paid"], activity["pending"]}
    assert data["revenue"] == "30.00"


def test_admin_dashboard_is_admin_only(client, auth, activity):
    assert client.get("/admin/dashboard", headers=auth("manager")).status_code == 403
    assert client.get("/admin/dashboard", headers=auth("user")).status_code == 403
    assert client.get("/admin/dashboard").status_code == 401


def test_manager_dashboard_only_counts_own_locations(client, auth, activity):
    resp = client.get("/manager/dashboard?date_from=2025-01-01", headers=auth("manager"))
    assert resp.status_code == 200
    data = resp.get_json()["data"]

    assert data["locations"]["total"] == 1
    assert data["locations"]["items"][0]["location_name"] == "Centro"
    assert data["locations"]["items"][0]["spaces"] == 1
    assert data["bookings"]["total"] == 1
    assert data["bookings"]["by_status"]["confirmed"] == 1
    assert [b["id"] for b in data["upcoming"]] == [activity["paid"]]
    assert data["revenue"] == "30.00"

    data = client.get("/manager/dashboard?date_from=2025-01-01", headers=auth("other_manager")).get_json()["data"]
    assert data["bookings"]["by_status"]["pending"] == 1
    assert [b["id"] for b in data["upcoming"]] == [activity["pending"]]
    assert data["revenue"] == "0.00"


def test_manager_dashboard_upcoming_starts_from_date(client, auth, activity):
    data = client.get("/manager/dashboard?date_from=2025-07-01", headers=auth("manager")).get_json()["data"]
    assert data["upcoming"] == []
    assert data["bookings"]["total"] == 1


def test_manager_dashboard_access(client, auth, activity):
    assert client.get("/manager/dashboard", headers=auth("user")).status_code == 403
    assert client.get("/manager/dashboard?date_from=June", headers=auth("manager")).status_code == 400

    data = client.get("/manager/dashboard?date_from=2025-01-01", headers=auth("admin")).get_json()["data"]
    assert data["locations"]["total"] == 2
    assert data["bookings"]["total"] == 2
