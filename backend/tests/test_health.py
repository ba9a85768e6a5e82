from datetime import datetime, timedelta

from httpx import ASGITransport, AsyncClient

from app.main import app


async def test_health_timestamp_carries_configured_zone():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")

    payload = response.json()
    assert response.status_code == 200
    assert payload["timezone"] == "Asia/Seoul"
    stamp = datetime.fromisoformat(payload["timestamp"])
    assert stamp.utcoffset() == timedelta(hours=9)
