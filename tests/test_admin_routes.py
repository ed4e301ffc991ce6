from datetime import datetime, timedelta, timezone

from sqlmodel import select

from walkin_queue.models import DailyLimit, QueueEntry


def _join(client, mobile: str, service_id: int = 1) -> dict:
    response = client.post(
        "/api/users/join-queue",
        json={"name": f"Customer {mobile[-2:]}", "mobile": mobile, "serviceId": service_id},
    )
    assert response.status_code == 201
    return response.json()


def _entry_id(session, queue_number: int) -> int:
    return session.exec(
        select(QueueEntry.id).where(QueueEntry.queue_number == queue_number)
    ).one()


def test_admin_routes_require_a_token(client) -> None:
    assert client.get("/api/admin/stats").status_code == 401
    bad = client.get("/api/admin/stats", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_login_rejects_bad_password(client, admin_headers) -> None:
    response = client.post("/api/auth/login", data={"username": "admin", "password": "wrong"})

    assert response.status_code == 401


def test_queue_listing_and_status_filter(client, session, admin_headers) -> None:
    _join(client, "5551230001")
    _join(client, "5551230002")
    client.put(
        f"/api/admin/queue/{_entry_id(session, 1)}/status",
        json={"status": "in-progress"},
        headers=admin_headers,
    )

    everything = client.get("/api/admin/queue", headers=admin_headers).json()
    assert [e["queueNumber"] for e in everything] == [1, 2]
    assert everything[0]["customer"]["mobile"] == "5551230001"

    waiting = client.get("/api/admin/queue?status=waiting", headers=admin_headers).json()
    assert [e["queueNumber"] for e in waiting] == [2]

    bad = client.get("/api/admin/queue?status=sleeping", headers=admin_headers)
    assert bad.status_code == 422


def test_status_update_walks_the_state_machine(client, session, gateway, clock, admin_headers) -> None:
    _join(client, "5551230001")
    entry_id = _entry_id(session, 1)

    started = client.put(
        f"/api/admin/queue/{entry_id}/status", json={"status": "in-progress"}, headers=admin_headers
    )
    assert started.status_code == 200
    assert started.json()["queue"]["status"] == "in-progress"
    assert started.json()["queue"]["startTime"] is not None
    assert "barber is ready" in gateway.sent[-1][1]

    clock.advance(minutes=25)
    done = client.put(
        f"/api/admin/queue/{entry_id}/status", json={"status": "completed"}, headers=admin_headers
    )
    assert done.status_code == 200
    queue = done.json()["queue"]
    assert queue["endTime"] > queue["startTime"]

    again = client.put(
        f"/api/admin/queue/{entry_id}/status", json={"status": "completed"}, headers=admin_headers
    )
    assert again.status_code == 409
    assert "completed" in again.json()["message"]


def test_admin_cancellation_uses_its_own_message(client, session, gateway, admin_headers) -> None:
    _join(client, "5551230001")

    response = client.put(
        f"/api/admin/queue/{_entry_id(session, 1)}/status",
        json={"status": "cancelled"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert "cancelled by the shop" in gateway.sent[-1][1]


def test_status_update_for_unknown_entry_is_404(client, admin_headers) -> None:
    response = client.put("/api/admin/queue/999/status", json={"status": "completed"}, headers=admin_headers)

    assert response.status_code == 404


def test_stats_count_today_by_status(client, session, admin_headers) -> None:
    for i in range(3):
        _join(client, f"55512300{i:02d}")
    client.put(
        f"/api/admin/queue/{_entry_id(session, 3)}/status",
        json={"status": "cancelled"},
        headers=admin_headers,
    )

    stats = client.get("/api/admin/stats", headers=admin_headers).json()

    assert stats["waiting"] == 2
    assert stats["inProgress"] == 0
    assert stats["cancelled"] == 1
    assert stats["total"] == 3
    assert stats["maxCustomers"] == 50
    assert stats["currentCount"] == 3


def test_daily_limit_update(client, session, clock, admin_headers) -> None:
    response = client.put("/api/admin/daily-limit", json={"maxCustomers": 2}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["dailyLimit"]["maxCustomers"] == 2

    _join(client, "5551230001")
    _join(client, "5551230002")
    third = client.post(
        "/api/users/join-queue",
        json={"name": "Late", "mobile": "5551230003", "serviceId": 1},
    )
    assert third.status_code == 400

    session.expire_all()
    assert session.get(DailyLimit, clock.today()).current_count == 2

    assert client.put("/api/admin/daily-limit", json={"maxCustomers": 0}, headers=admin_headers).status_code == 422


def test_records_are_paginated_newest_first(client, clock, admin_headers) -> None:
    for i in range(5):
        _join(client, f"55512300{i:02d}")
        clock.advance(minutes=1)

    page = client.get("/api/admin/records?period=today&page=1&limit=2", headers=admin_headers).json()

    assert page["total"] == 5
    assert page["totalPages"] == 3
    assert page["currentPage"] == 1
    assert [r["queueNumber"] for r in page["records"]] == [5, 4]

    last = client.get("/api/admin/records?period=today&page=3&limit=2", headers=admin_headers).json()
    assert [r["queueNumber"] for r in last["records"]] == [1]


def test_records_period_filter(client, session, clock, admin_headers) -> None:
    _join(client, "5551230001")
    old = session.exec(select(QueueEntry)).one()
    old.check_in_time = datetime(2026, 9, 1, 12, 0, tzinfo=timezone.utc)
    old.service_date = old.check_in_time.date()
    old.status = "completed"
    session.add(old)
    session.commit()
    _join(client, "5551230002")

    week = client.get("/api/admin/records?period=week", headers=admin_headers).json()
    every = client.get("/api/admin/records?period=all", headers=admin_headers).json()
    done = client.get("/api/admin/records?period=all&status=completed", headers=admin_headers).json()

    assert week["total"] == 1
    assert every["total"] == 2
    assert done["total"] == 1


def test_purge_removes_only_old_records(client, session, clock, admin_headers) -> None:
    _join(client, "5551230001")
    _join(client, "5551230002")
    old = session.exec(select(QueueEntry).where(QueueEntry.queue_number == 1)).one()
    old.check_in_time = clock.utcnow() - timedelta(days=40)
    old.status = "completed"
    session.add(old)
    session.commit()

    response = client.request("DELETE", "/api/admin/records", json={"days": 30}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["deleted"] == 1
    assert response.json()["message"] == "Deleted 1 records older than 30 days"
    session.expire_all()
    assert [e.queue_number for e in session.exec(select(QueueEntry)).all()] == [2]


def test_purge_defaults_to_retention_setting(client, admin_headers) -> None:
    response = client.request("DELETE", "/api/admin/records", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Deleted 0 records older than 30 days"
