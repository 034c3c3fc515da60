"""Tests for the shared platform pieces: settings, logging and request middleware."""

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.middleware import RequestLoggingMiddleware
from app.api.v1.health import health_router
from app.shared.config.settings import Settings
from app.shared.utils.logging import ContextFilter, couple_key_var, log_context, request_id_var
from app.modules.shared_garden.presentation.dependencies import GardenServices


class TestSettings:

    def test_garden_rules_from_settings(self):
        settings = Settings(GARDEN_WATERING_COOLDOWN_HOURS=2, GARDEN_REFUND_RATIO=0.5, GARDEN_DAY_TIMEZONE="Asia/Seoul")
        rules = settings.get_garden_rules()
        assert rules.watering_cooldown_hours == 2
        assert rules.refund_ratio == 0.5
        assert rules.day_timezone == "Asia/Seoul"

    def test_unknown_change_feed_rejected(self):
        with pytest.raises(ValueError):
            Settings(GARDEN_CHANGE_FEED="carrier-pigeon")

    def test_environment_flags(self):
        assert Settings(ENVIRONMENT="test").is_testing is True
        assert Settings(ENVIRONMENT="production").is_production is True

    def test_explicit_database_url_wins(self):
        settings = Settings(DATABASE_URL="sqlite+aiosqlite:///garden.db")
        assert settings.database_url == "sqlite+aiosqlite:///garden.db"


class TestLogContext:

    def test_context_is_bound_and_restored(self):
        with log_context(request_id="req-1", couple_key="alice_bob") as context:
            assert context["request_id"] == "req-1"
            assert request_id_var.get() == "req-1"
            assert couple_key_var.get() == "alice_bob"
        assert request_id_var.get() == ""

    def test_request_id_is_generated(self):
        with log_context() as context:
            assert context["request_id"]

    def test_filter_prefers_explicit_extra(self):
        record = logging.LogRecord("garden", logging.INFO, __file__, 1, "watered", None, None)
        record.couple_key = "carol_dave"
        with log_context(request_id="req-2", couple_key="alice_bob"):
            ContextFilter().filter(record)
        assert record.request_id == "req-2"
        assert record.couple_key == "carol_dave"


class TestRequestLoggingMiddleware:

    @pytest.fixture
    def client(self):
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        with TestClient(app) as test_client:
            yield test_client

    def test_request_id_is_echoed(self, client):
        response = client.get("/ping", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_request_id_is_generated(self, client):
        assert client.get("/ping").headers["X-Request-ID"]


class TestHealthEndpoints:

    @pytest.fixture
    def client(self):
        app = FastAPI()
        app.include_router(health_router, prefix="/health")
        with TestClient(app) as test_client:
            yield test_client

    def test_basic_and_liveness(self, client):
        assert client.get("/health").json()["status"] == "healthy"
        assert client.get("/health/live").text == "OK"

    def test_not_ready_before_services_start(self, client):
        response = client.get("/health/ready")
        assert response.status_code == 503
        assert response.json()["reason"] == "garden_services_uninitialized"

    def test_services_container_requires_initialization(self):
        services = GardenServices()
        assert services.is_initialized is False
        with pytest.raises(RuntimeError):
            services.engine
