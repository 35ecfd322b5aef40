import httpx

from conftest import add_user, auth_headers

EVENT = {"title": "Jazz on the Lawn", "event_date": "2025-07-01", "city": "Brisbane", "type": "Concert"}


def create_event(client, owner, **overrides):
    res = client.post("/api/v1/events/", json={**EVENT, **overrides}, headers=auth_headers(owner))
    assert res.status_code == 201, res.text
    return res.json()


def test_new_events_start_as_drafts(client, fake, planner):
    event = create_event(client, planner)
    assert event["status"] == "draft"
    assert event["creator_id"] == planner["id"]
    assert client.get("/api/v1/events/").json() == []
    assert [e["id"] for e in client.get("/api/v1/events/me", headers=auth_headers(planner)).json()] == [event["id"]]


def test_drafts_are_hidden_from_others(client, fake, planner):
    event = create_event(client, planner)
    other = add_user(fake, "planner", "Other Planner")
    assert client.get(f"/api/v1/events/{event['id']}").status_code == 404
    assert client.get(f"/api/v1/events/{event['id']}", headers=auth_headers(other)).status_code == 404
    assert client.get(f"/api/v1/events/{event['id']}", headers=auth_headers(planner)).status_code == 200


def test_only_the_creator_edits_or_deletes(client, fake, planner):
    event = create_event(client, planner)
    other = add_user(fake, "planner", "Other Planner")
    url = f"/api/v1/events/{event['id']}"

    assert client.patch(url, json={"venue": "Hijack"}, headers=auth_headers(other)).status_code == 403
    res = client.patch(url, json={"venue": "Botanic Gardens"}, headers=auth_headers(planner))
    assert res.json()["venue"] == "Botanic Gardens"

    assert client.delete(f"{url}?confirm=true", headers=auth_headers(other)).status_code == 403
    assert client.delete(url, headers=auth_headers(planner)).status_code == 400
    assert client.delete(f"{url}?confirm=true", headers=auth_headers(planner)).status_code == 204
    assert fake.rows("events") == []


def test_artist_publishes_for_free(client, fake, artist):
    event = create_event(client, artist["user"])
    res = client.post(f"/api/v1/events/{event['id']}/publish", headers=auth_headers(artist["user"]))
    assert res.status_code == 200
    assert res.json()["published"] is True
    assert fake.get("events", event["id"])["status"] == "published"
    assert fake.checkout_calls == []


def test_planner_pays_after_free_publish(client, fake, planner):
    headers = auth_headers(planner)
    first = create_event(client, planner)
    res = client.post(f"/api/v1/events/{first['id']}/publish", headers=headers)
    assert res.json()["published"] is True

    second = create_event(client, planner, title="Second Show")
    res = client.post(f"/api/v1/events/{second['id']}/publish", headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["published"] is False
    assert body["requires_payment"] is True
    assert body["checkout_url"] == "https://checkout.test/pay/cs_test_1"
    assert fake.get("events", second["id"])["status"] == "draft"

    [call] = fake.checkout_calls
    assert call["body"] == {"event_id": second["id"]}
    assert call["headers"]["authorization"] == headers["Authorization"]


def test_checkout_failure_is_bad_gateway(client, fake, planner):
    fake.add("events", creator_id=planner["id"], title="Earlier", status="published", event_date="2025-05-01")
    fake.checkout_response = httpx.Response(400, json={"error": "Payments are not configured"})
    event = create_event(client, planner)
    res = client.post(f"/api/v1/events/{event['id']}/publish", headers=auth_headers(planner))
    assert res.status_code == 502
    assert res.json()["detail"]["message"] == "Payments are not configured"
    assert fake.get("events", event["id"])["status"] == "draft"


def test_published_event_cannot_be_republished(client, fake, artist):
    event = create_event(client, artist["user"])
    url = f"/api/v1/events/{event['id']}/publish"
    client.post(url, headers=auth_headers(artist["user"]))
    again = client.post(url, headers=auth_headers(artist["user"]))
    assert again.status_code == 409


def test_public_listing_and_attendance(client, fake, planner, artist):
    fake.add("events", creator_id=artist["user"]["id"], title="Late", status="published", event_date="2025-09-01")
    soon = fake.add("events", creator_id=artist["user"]["id"], title="Soon", status="published", event_date="2025-06-01")
    assert [e["title"] for e in client.get("/api/v1/events/").json()] == ["Soon", "Late"]
    assert [e["title"] for e in client.get("/api/v1/events/?from_date=2025-07-01").json()] == ["Late"]

    headers = auth_headers(planner)
    res = client.post(f"/api/v1/events/{soon['id']}/attendance", headers=headers)
    assert res.json() == {"event_id": soon["id"], "going": True}
    client.post(f"/api/v1/events/{soon['id']}/attendance", headers=headers)
    assert len(fake.rows("event_attendance", user_id=planner["id"])) == 1

    cal = client.get("/api/v1/calendar/planner?month=2025-06", headers=headers).json()
    assert [d["date"] for d in cal["days"]] == ["2025-06-01"]

    res = client.delete(f"/api/v1/events/{soon['id']}/attendance", headers=headers)
    assert res.json()["going"] is False
    assert fake.rows("event_attendance") == []


def test_cannot_attend_a_draft(client, fake, planner, artist):
    draft = fake.add("events", creator_id=artist["user"]["id"], title="Secret", event_date="2025-06-01")
    res = client.post(f"/api/v1/events/{draft['id']}/attendance", headers=auth_headers(planner))
    assert res.status_code == 404
