from fastapi import FastAPI

from app.config import AppSettings
from app.core import telemetry


def test_disabled_telemetry_leaves_app_uninstrumented(monkeypatch):
    monkeypatch.setattr(telemetry, "_TELEMETRY_INITIALISED", False)
    app = FastAPI()
    telemetry.setup_telemetry(app, AppSettings(telemetry_enabled=False))
    assert telemetry._TELEMETRY_INITIALISED is False


def test_resource_carries_service_name():
    resource = telemetry._build_resource(AppSettings(telemetry_service_name="dashboard-test"))
    assert resource.attributes["service.name"] == "dashboard-test"
    assert resource.attributes["service.namespace"] == "portfolio-dashboard"


def test_settings_defaults():
    settings = AppSettings()
    assert settings.fallback_exchange_rate == 1370
    assert settings.account_order == ["ISA", "연금저축A", "연금저축B", "CMA", "IRP"]
    assert settings.timezone == "Asia/Seoul"
