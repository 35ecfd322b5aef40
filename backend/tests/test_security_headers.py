def test_security_headers(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers.get("Content-Security-Policy") == "default-src 'self'; frame-ancestors 'none'"
    assert (
        response.headers.get("Strict-Transport-Security")
        == "max-age=63072000; includeSubDomains"
    )
    assert response.headers.get("X-Frame-Options") == "DENY"
    assert response.headers.get("X-Content-Type-Options") == "nosniff"


def test_docs_skip_content_security_policy(client):
    response = client.get("/openapi.json")
    assert response.status_code == 200
    assert "Content-Security-Policy" not in response.headers
    assert response.headers.get("X-Frame-Options") == "DENY"
