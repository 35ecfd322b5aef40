from conftest import add_artist, auth_headers


def test_profile_edit_ignores_privileged_fields(client, fake, planner):
    res = client.patch(
        "/api/v1/profiles/me",
        json={"city": "Parramatta", "is_admin": True, "role": "artist"},
        headers=auth_headers(planner),
    )
    assert res.status_code == 200
    assert res.json()["city"] == "Parramatta"
    stored = fake.get("profiles", planner["id"])
    assert stored["is_admin"] is False
    assert stored["role"] == "planner"


def test_subscription_card(client, fake, artist):
    res = client.get("/api/v1/subscriptions/me", headers=auth_headers(artist["user"]))
    assert res.status_code == 200
    assert res.json()["status"] == "active"

    never = add_artist(fake, "Never Paid", subscription=None)
    assert client.get("/api/v1/subscriptions/me", headers=auth_headers(never["user"])).json() is None


def test_availability_entries_show_on_artist_calendar(client, fake, artist):
    headers = auth_headers(artist["user"])
    res = client.post(
        "/api/v1/calendar/availability",
        json={"title": "Studio day", "event_date": "2025-06-20", "start_time": "10:00"},
        headers=headers,
    )
    assert res.status_code == 201
    entry = res.json()

    moved = client.patch(
        f"/api/v1/calendar/availability/{entry['id']}", json={"event_date": "2025-06-21"}, headers=headers
    )
    assert moved.json()["event_date"] == "2025-06-21"

    listed = client.get("/api/v1/calendar/availability?month=2025-06", headers=headers).json()
    assert [e["title"] for e in listed] == ["Studio day"]

    cal = client.get("/api/v1/calendar/artist?month=2025-06", headers=headers).json()
    assert [(d["date"], len(d["availability"])) for d in cal["days"]] == [("2025-06-21", 1)]

    assert client.delete(f"/api/v1/calendar/availability/{entry['id']}", headers=headers).status_code == 204
    assert fake.rows("artist_availability") == []


def test_availability_is_private_to_its_artist(client, fake, artist):
    other = add_artist(fake, "Other Act")
    entry = fake.add("artist_availability", artist_id=other["id"], title="Gig", event_date="2025-06-20")
    res = client.delete(f"/api/v1/calendar/availability/{entry['id']}", headers=auth_headers(artist["user"]))
    assert res.status_code == 404


def test_invalid_month_is_rejected(client, artist):
    res = client.get("/api/v1/calendar/artist?month=June", headers=auth_headers(artist["user"]))
    assert res.status_code == 422
