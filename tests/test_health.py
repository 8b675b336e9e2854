"""
Test health check and metrics endpoints
"""


async def test_health_check(client):
    """Test basic health check endpoint."""
    response = await client.get("/health/")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "realty-crm"
    assert "version" in data
    assert "uptime_seconds" in data


async def test_readiness_check(client):
    """Test readiness check against the database."""
    response = await client.get("/health/ready")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "ready"
    assert data["services"]["database"] == "healthy"


async def test_liveness_check(client):
    """Test liveness check endpoint."""
    response = await client.get("/health/live")
    assert response.status_code == 200
    assert response.json()["status"] == "alive"


async def test_root_and_metrics(client):
    """Test the root document and Prometheus exposition."""
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "operational"

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text


async def test_unknown_route(client):
    """Test unknown paths get the standard error body."""
    response = await client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json()["status"] == "error"
