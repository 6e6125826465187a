from detection_platform.api_service.db import create_db_engine, create_session_factory


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["service"] == "Detection Platform API"
    assert data["version"] == "1.0.0"
    assert "timestamp" in data


def test_ready_with_database(client):
    resp = client.get("/ready")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ready"
    assert data["database"] == "connected"


def test_ready_without_database(client, tmp_path):
    unreachable = create_db_engine(f"sqlite:///{tmp_path / 'missing' / 'nested' / 'db.sqlite'}")
    client.app.state.session_factory = create_session_factory(unreachable)

    resp = client.get("/ready")
    assert resp.status_code == 503
    assert resp.json()["detail"]["database"] == "disconnected"
    unreachable.dispose()
