"""
Tests for EmailGatewayClient.

Tests verify the client's contract with calling code.
Focus on observable behavior, not implementation details.
"""

import hashlib
import hmac
import json

import pytest
import responses

from clients.email_client import EmailGatewayClient, EmailGatewayError


class TestEmailGatewayClientInit:
    """Test client initialization - fail-fast on invalid config."""

    def test_init_with_valid_credentials(self):
        """Client initializes with all required credentials."""
        client = EmailGatewayClient(
            gateway_url="https://gateway.example.com/send",
            api_key="test-api-key",
            hmac_secret="test-hmac-secret",
        )
        assert client is not None

    @pytest.mark.parametrize("missing", ["gateway_url", "api_key", "hmac_secret"])
    def test_init_rejects_empty_value(self, missing):
        """Each empty credential raises ValueError naming it."""
        kwargs = {
            "gateway_url": "https://gateway.example.com/send",
            "api_key": "test-api-key",
            "hmac_secret": "test-hmac-secret",
        }
        kwargs[missing] = ""
        with pytest.raises(ValueError, match=missing):
            EmailGatewayClient(**kwargs)


class TestSendVerificationCode:
    """Test send_verification_code - uses responses library for HTTP mocking."""

    GATEWAY_URL = "https://gateway.example.com/send"

    @pytest.fixture
    def client(self):
        """Create client with test credentials."""
        return EmailGatewayClient(
            gateway_url=self.GATEWAY_URL,
            api_key="test-api-key",
            hmac_secret="test-hmac-secret",
        )

    @responses.activate
    def test_successful_send_returns_none(self, client):
        """Successful gateway response completes without exception."""
        responses.add(responses.POST, self.GATEWAY_URL, json={"success": True}, status=200)

        result = client.send_verification_code(email="user@example.com", name="Jo", otp="123456")

        assert result is None

    @responses.activate
    def test_payload_and_signature(self, client):
        """Body carries the activation template fields and is HMAC signed."""
        responses.add(responses.POST, self.GATEWAY_URL, json={"success": True}, status=200)

        client.send_verification_code(email="user@example.com", name="Jo", otp="123456")

        request = responses.calls[0].request
        body = request.body if isinstance(request.body, bytes) else request.body.encode("utf-8")
        payload = json.loads(body)
        assert payload["type"] == "activation"
        assert payload["email"] == "user@example.com"
        assert payload["name"] == "Jo"
        assert payload["otp"] == "123456"

        expected = hmac.new(b"test-hmac-secret", body, hashlib.sha256).hexdigest()
        assert request.headers["X-Signature"] == expected
        assert request.headers["X-API-Key"] == "test-api-key"

    @responses.activate
    def test_gateway_500_raises_error(self, client):
        """Server error from gateway raises EmailGatewayError."""
        responses.add(
            responses.POST,
            self.GATEWAY_URL,
            json={"success": False, "message": "Internal error"},
            status=500,
        )

        with pytest.raises(EmailGatewayError, match="Internal error"):
            client.send_verification_code(email="user@example.com", name="Jo", otp="123456")

    @responses.activate
    def test_gateway_success_false_raises_error(self, client):
        """Gateway returns 200 but success=false raises EmailGatewayError."""
        responses.add(
            responses.POST,
            self.GATEWAY_URL,
            json={"success": False, "message": "Invalid email"},
            status=200,
        )

        with pytest.raises(EmailGatewayError):
            client.send_verification_code(email="invalid", name="Jo", otp="123456")

    @responses.activate
    def test_connection_failure_raises_error(self, client):
        """Network failure raises EmailGatewayError."""
        responses.add(
            responses.POST,
            self.GATEWAY_URL,
            body=ConnectionError("Network unreachable"),
        )

        with pytest.raises(EmailGatewayError, match="Connection failed"):
            client.send_verification_code(email="user@example.com", name="Jo", otp="123456")

    @responses.activate
    def test_invalid_json_response_raises_error(self, client):
        """Non-JSON response raises EmailGatewayError."""
        responses.add(responses.POST, self.GATEWAY_URL, body="not json", status=200)

        with pytest.raises(EmailGatewayError, match="Invalid response"):
            client.send_verification_code(email="user@example.com", name="Jo", otp="123456")
