from conftest import add_user, auth_headers

POOL = {"link_url": "  https://pool.test/nova ", "title": "Nova Edits", "description": " "}


def test_artist_shares_a_link_tagged_with_their_profile(client, fake, artist, planner):
    res = client.post("/api/v1/music-pool/", json=POOL, headers=auth_headers(artist["user"]))
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["link_url"] == "https://pool.test/nova"
    assert body["description"] is None
    assert body["artist_id"] == artist["id"]
    assert body["is_owner"] is True

    listed = client.get("/api/v1/music-pool/", headers=auth_headers(planner)).json()
    [link] = listed
    assert link["is_owner"] is False
    assert link["owner"]["name"] == artist["user"]["name"]
    assert link["artist"]["stage_name"] == "DJ Nova"


def test_planner_link_has_no_artist(client, fake, planner):
    res = client.post("/api/v1/music-pool/", json=POOL, headers=auth_headers(planner))
    assert res.status_code == 201
    assert res.json()["artist_id"] is None
    assert res.json()["artist"] is None


def test_one_link_per_user(client, fake, planner):
    headers = auth_headers(planner)
    assert client.post("/api/v1/music-pool/", json=POOL, headers=headers).status_code == 201
    dup = client.post("/api/v1/music-pool/", json=POOL, headers=headers)
    assert dup.status_code == 409
    assert dup.json()["detail"]["message"].startswith("You already have a music pool link")


def test_url_must_be_http(client, planner):
    res = client.post("/api/v1/music-pool/", json={"link_url": "ftp://pool.test"}, headers=auth_headers(planner))
    assert res.status_code == 422


def test_only_owner_edits_and_admin_may_delete(client, fake, planner, admin):
    other = add_user(fake, "planner", "Other Planner")
    link = fake.add("music_pool_links", user_id=other["id"], link_url="https://pool.test/other")
    url = f"/api/v1/music-pool/{link['id']}"

    assert client.patch(url, json={"title": "Mine now"}, headers=auth_headers(planner)).status_code == 403
    res = client.patch(url, json={"title": "  Weekly drops "}, headers=auth_headers(other))
    assert res.status_code == 200
    assert res.json()["title"] == "Weekly drops"
    assert client.patch(url, json={"link_url": None}, headers=auth_headers(other)).status_code == 422

    assert client.delete(url, headers=auth_headers(admin)).status_code == 400
    assert client.delete(f"{url}?confirm=true", headers=auth_headers(planner)).status_code == 403
    assert client.delete(f"{url}?confirm=true", headers=auth_headers(admin)).status_code == 204
    assert fake.rows("music_pool_links") == []
    assert client.patch(url, json={"title": "x"}, headers=auth_headers(other)).status_code == 404
