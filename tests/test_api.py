"""Tests for the reference API endpoints."""

import os
import pytest
from unittest.mock import patch
from fastapi import HTTPException
from fastapi.testclient import TestClient

# Set environment variables before importing app
os.environ.setdefault("API_KEY", "test_api_key_12345")
os.environ.setdefault("PAYHUB_API_RATE_LIMIT", "1000/minute")

from payhub_sdk import api
from payhub_sdk.api import app, get_connector, validate_transaction_id
from payhub_sdk.connectors import PayHubConnector, SimulatorTransport


@pytest.fixture
def client(sim_connector):
    """Create test client backed by the simulator connector."""
    app.dependency_overrides[get_connector] = lambda: sim_connector
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Return authenticated headers."""
    return {"Authorization": "Bearer test_api_key_12345"}


@pytest.fixture
def card_body():
    return {
        "amount": 1000,
        "card": {"number": SimulatorTransport.CARD_SUCCESS, "month": 12, "year": 2030, "verification_value": "123"},
        "options": {"first_name": "Jim", "billing_address": {"zip": "94107"}},
    }


class TestTransactionIdValidation:
    def test_valid_transaction_id(self):
        assert validate_transaction_id("000123456789") == "000123456789"

    @pytest.mark.parametrize("transaction_id", ["", "abc$", "a" * 65, "id with spaces"])
    def test_invalid_transaction_id(self, transaction_id):
        with pytest.raises(HTTPException) as exc_info:
            validate_transaction_id(transaction_id)
        assert exc_info.value.status_code == 400


class TestAuthentication:
    def test_missing_auth(self, client, card_body):
        response = client.post("/payments/purchase", json=card_body)
        assert response.status_code == 401
        assert response.json()["detail"] == "Missing API key"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_non_bearer_scheme(self, client, card_body):
        response = client.post("/payments/purchase", json=card_body, headers={"Authorization": "Basic dXNlcjpwdw=="})
        assert response.status_code == 401

    def test_invalid_api_key(self, client, card_body):
        response = client.post("/payments/purchase", json=card_body, headers={"Authorization": "Bearer wrong"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid API key"

    def test_api_key_not_configured(self, client, card_body, auth_headers):
        with patch.dict(os.environ, {"API_KEY": ""}):
            response = client.post("/payments/purchase", json=card_body, headers=auth_headers)
        assert response.status_code == 500


class TestCardEndpoints:
    def test_authorize(self, client, card_body, auth_headers):
        response = client.post("/payments/authorize", json=card_body, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Approved"
        assert data["avs_code"] == "Z"
        assert data["error_code"] is None
        assert data["test"] is True

    def test_purchase_declined(self, client, card_body, auth_headers):
        card_body["card"]["number"] = SimulatorTransport.CARD_DECLINE
        response = client.post("/payments/purchase", json=card_body, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["error_code"] == "card_declined"

    def test_verify(self, client, card_body, auth_headers):
        card_body.pop("amount")
        response = client.post("/payments/verify", json=card_body, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_invalid_card_month(self, client, card_body, auth_headers):
        card_body["card"]["month"] = 13
        response = client.post("/payments/purchase", json=card_body, headers=auth_headers)
        assert response.status_code == 422

    def test_negative_amount(self, client, card_body, auth_headers):
        card_body["amount"] = -100
        response = client.post("/payments/purchase", json=card_body, headers=auth_headers)
        assert response.status_code == 422


class TestReferenceEndpoints:
    def _authorize(self, client, card_body, auth_headers):
        return client.post("/payments/authorize", json=card_body, headers=auth_headers).json()["transaction_id"]

    def test_capture(self, client, card_body, auth_headers):
        txn_id = self._authorize(client, card_body, auth_headers)
        response = client.post(f"/payments/{txn_id}/capture", json={"amount": 1000}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_void(self, client, card_body, auth_headers):
        txn_id = self._authorize(client, card_body, auth_headers)
        response = client.post(f"/payments/{txn_id}/void", headers=auth_headers)
        assert response.json()["success"] is True

    def test_refund_after_settlement(self, client, card_body, auth_headers, simulator):
        txn_id = client.post("/payments/purchase", json=card_body, headers=auth_headers).json()["transaction_id"]
        simulator.settle()
        response = client.post(f"/payments/{txn_id}/refund", json={"amount": 1000}, headers=auth_headers)
        assert response.json()["success"] is True
        assert simulator.get_transaction(txn_id).status == "refunded"

    def test_invalid_transaction_id(self, client, auth_headers):
        response = client.post("/payments/bad$id/void", headers=auth_headers)
        assert response.status_code == 400


class TestFailures:
    def test_network_error_is_502(self, client, card_body, auth_headers):
        card_body["card"]["number"] = SimulatorTransport.CARD_TIMEOUT
        response = client.post("/payments/purchase", json=card_body, headers=auth_headers)
        assert response.status_code == 502

    def test_unconfigured_connector_is_500(self, card_body, auth_headers):
        app.dependency_overrides.clear()
        with patch.object(api, "_connector", None):
            response = TestClient(app).post("/payments/purchase", json=card_body, headers=auth_headers)
        assert response.status_code == 500
        assert response.json()["detail"] == "Payment connector is not configured"

    def test_connector_built_from_env(self, credentials):
        env = {
            "PAYHUB_ORGID": credentials["orgid"],
            "PAYHUB_USERNAME": credentials["username"],
            "PAYHUB_PASSWORD": credentials["password"],
            "PAYHUB_TID": credentials["tid"],
        }
        with patch.dict(os.environ, env), patch.object(api, "_connector", None):
            connector = get_connector()
            assert isinstance(connector, PayHubConnector)
            assert get_connector() is connector


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["provider"] == "payhub"
