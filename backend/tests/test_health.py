def test_health_degraded_without_reference_data(client, db_session):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.get_json()
    assert data["checks"]["database"]["status"] == "degraded"
    assert data["checks"]["database"]["details"]["users"] == 0


def test_health_reports_counts_after_seed(client, seeded):
    response = client.get("/health")

    data = response.get_json()
    details = data["checks"]["database"]["details"]
    assert details["categories"] == 7
    assert details["products"] == 9
    assert data["checks"]["database"]["status"] == "healthy"
    # create_all() schema has no migration history
    assert data["checks"]["schema"]["status"] == "degraded"
    assert data["status"] == "degraded"
    assert data["timestamp"].endswith("Z")


def test_health_healthy_after_migrations(make_app):
    from khadi_store.services.bootstrap_service import initialize_database

    app = make_app()
    initialize_database(app)

    response = app.test_client().get("/health")

    assert response.status_code == 200
    data = response.get_json()
    assert data["status"] == "healthy"
    assert data["checks"]["schema"]["pending_migrations"] == []


def test_version(client):
    data = client.get("/version").get_json()
    assert data["api_version"] == "1.0.0"
    assert "python_version" in data
