from conftest import auth_headers


def test_user_writes_to_support_and_reads_replies(client, fake, planner):
    headers = auth_headers(planner)
    res = client.post("/api/v1/support/messages", json={"message": "Can't upload my logo"}, headers=headers)
    assert res.status_code == 201
    assert res.json()["sender"] == "user"

    fake.add("admin_messages", user_id=planner["id"], sender="admin", message="Try a PNG under 5MB")
    thread = client.get("/api/v1/support/messages", headers=headers).json()
    assert [m["sender"] for m in thread] == ["user", "admin"]

    assert client.get("/api/v1/support/unread", headers=headers).json() == {"count": 1}
    assert client.post("/api/v1/support/messages/read", headers=headers).json() == {"marked": 1}
    assert client.get("/api/v1/support/unread", headers=headers).json() == {"count": 0}


def test_unread_counter_honours_etag(client, fake, planner):
    headers = auth_headers(planner)
    fake.add("admin_messages", user_id=planner["id"], sender="admin", message="Welcome!")
    first = client.get("/api/v1/support/unread", headers=headers)
    etag = first.headers["ETag"]

    cached = client.get("/api/v1/support/unread", headers={**headers, "If-None-Match": etag})
    assert cached.status_code == 304

    fake.add("admin_messages", user_id=planner["id"], sender="admin", message="Any luck?")
    fresh = client.get("/api/v1/support/unread", headers={**headers, "If-None-Match": etag})
    assert fresh.status_code == 200
    assert fresh.json() == {"count": 2}


def test_threads_are_per_user(client, fake, planner, artist):
    fake.add("admin_messages", user_id=artist["user"]["id"], sender="admin", message="For the artist")
    assert client.get("/api/v1/support/messages", headers=auth_headers(planner)).json() == []
    assert client.get("/api/v1/support/unread", headers=auth_headers(planner)).json() == {"count": 0}


def test_blank_support_message_is_rejected(client, planner):
    res = client.post("/api/v1/support/messages", json={"message": " "}, headers=auth_headers(planner))
    assert res.status_code == 422
