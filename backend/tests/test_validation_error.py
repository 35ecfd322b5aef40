from conftest import auth_headers


def test_booking_request_missing_artist_id(client, planner):
    response = client.post(
        "/api/v1/booking-requests/", json={"message": "hi"}, headers=auth_headers(planner)
    )
    assert response.status_code == 422
    data = response.json()
    assert any(err["loc"][-1] == "artist_id" for err in data["detail"])
