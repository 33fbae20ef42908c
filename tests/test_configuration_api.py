"""
Tests for the configuration and freshness-marker routes.
"""

from .conftest import USER_LOGIN, USER_PASSWORD


def test_get_configuration(client):
    response = client.get("/api/configuration")
    assert response.status_code == 200
    assert set(response.json()) == {"configData", "configPos", "configPbar"}


def test_post_then_get(client):
    current = client.get("/api/configuration").json()["configData"]
    merged = {**current, "config": "antiprotons"}

    response = client.post("/api/configuration", json=merged)
    assert response.status_code == 200
    assert client.get("/api/configuration").json()["configData"] == merged


def test_post_invalid_particle(client):
    response = client.post("/api/configuration", json={"config": "electrons"})
    assert response.status_code == 400
    assert "positrons or antiprotons" in response.json()["detail"]


def test_missing_document_is_500(client, analysis_root):
    (analysis_root / "configurations" / "default_config_positrons.json").unlink()
    response = client.get("/api/configuration")
    assert response.status_code == 500
    assert "default_config_positrons.json" in response.json()["detail"]


def test_defaults(client):
    assert client.get("/api/configuration/defaults/positrons").json() == {"config": "positrons", "fit": False}
    assert client.get("/api/configuration/defaults/muons").status_code == 400


def test_latest(client):
    assert client.get("/api/latest").json() == {"latest": "2025-05-14_10-30-00", "particle": "positrons"}


def test_latest_missing(client, analysis_root):
    (analysis_root / "configurations" / "latest.json").unlink()
    assert client.get("/api/latest").status_code == 404


def test_post_requires_login_when_configured(auth_client):
    assert auth_client.post("/api/configuration", json={"config": "positrons"}).status_code == 401

    auth_client.post("/api/login", json={"login": USER_LOGIN, "password": USER_PASSWORD})
    assert auth_client.post("/api/configuration", json={"config": "positrons"}).status_code == 200
