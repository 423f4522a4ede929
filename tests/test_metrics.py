import pytest
from unittest.mock import AsyncMock, patch


@pytest.mark.asyncio
async def test_metrics_endpoint(client):
    with patch("app.main.test_connection", AsyncMock(return_value=None)):
        res = await client.get("/api/metrics")
    assert res.status_code == 200

    data = res.json()

    # Check structure
    assert data["status"] == "Online"
    assert "cpu" in data
    assert "ram" in data
    assert data["database"] == "Connected"

    # Check data types
    assert isinstance(data["uptime"], int)
    assert isinstance(data["version"], str)


@pytest.mark.asyncio
async def test_metrics_reports_database_error(client):
    with patch("app.main.test_connection", AsyncMock(side_effect=OSError("db down"))):
        res = await client.get("/api/metrics")
    assert res.status_code == 200
    assert res.json()["database"] == "Error"


@pytest.mark.asyncio
async def test_root(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"
