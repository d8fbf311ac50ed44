"""Unit tests for engine error rendering."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from nexus.domain.error import (
    ContentionError,
    InviteEngineError,
    InviteExpiredError,
    StoreUnavailableError,
)
from nexus.interface.error import RETRY_AFTER_SECONDS, register_error_handlers


def client_raising(error: InviteEngineError) -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    async def boom():
        raise error

    return TestClient(app)


class TestInviteEngineErrorHandler:
    """Tests for invite_engine_error_handler."""

    def test_expired_is_gone(self):
        response = client_raising(InviteExpiredError("NEXUS-AB12CD")).get("/boom")

        assert response.status_code == 410
        assert response.json()["kind"] == "expired"
        assert "Retry-After" not in response.headers

    @pytest.mark.parametrize(
        "error",
        [ContentionError("redeem", 5), StoreUnavailableError("connection refused")],
    )
    def test_retryable_errors_ask_for_retry(self, error):
        response = client_raising(error).get("/boom")

        assert response.status_code == 503
        assert response.json()["retryable"] is True
        assert response.headers["Retry-After"] == str(RETRY_AFTER_SECONDS)
