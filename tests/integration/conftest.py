"""Pytest configuration and fixtures for integration tests.

Provides an AI collaborator wired to the real FastAPI gateway application
with a stubbed Bedrock runtime, so the editor, the HTTP client and the
gateway can be exercised together without network access.
"""

import io
import json
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from xmledit.ai_gateway.ai_client import AIClient
from xmledit.ai_gateway.bedrock_client import BedrockClient
from xmledit.ai_gateway.config import GatewaySettings
from xmledit.ai_gateway.server import create_app


class _RequestsResponse:
    """requests-style view of an httpx response."""

    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.ok = response.is_success
        self.reason = response.reason_phrase

    def json(self):
        return self._response.json()


class GatewaySession:
    """Routes AIClient posts into a FastAPI TestClient."""

    def __init__(self, test_client: TestClient):
        self.test_client = test_client
        self.requests = []

    def post(self, url, json=None, timeout=None):
        path = url.split("://", 1)[-1].split("/", 1)[-1]
        self.requests.append(json)
        return _RequestsResponse(self.test_client.post(f"/{path}", json=json))


@pytest.fixture
def bedrock_runtime():
    """Stub bedrock-runtime client; set .replies to queue model texts."""
    runtime = Mock()
    runtime.replies = []

    def invoke_model(**kwargs):
        text = runtime.replies.pop(0) if runtime.replies else "OK"
        body = {
            "content": [{"type": "text", "text": text}],
            "usage": {"input_tokens": 10, "output_tokens": 5},
        }
        return {"body": io.BytesIO(json.dumps(body).encode("utf-8"))}

    runtime.invoke_model.side_effect = invoke_model
    return runtime


@pytest.fixture
def gateway_settings():
    return GatewaySettings(
        model="anthropic.test-model",
        region="us-east-1",
        access_key_id="AKIATEST",
        secret_access_key="secret",
        port=3001,
    )


@pytest.fixture
def make_gateway_session(bedrock_runtime):
    """Build a GatewaySession for the given gateway settings."""
    def _make(settings: GatewaySettings) -> GatewaySession:
        client = BedrockClient(settings, runtime=bedrock_runtime)
        return GatewaySession(TestClient(create_app(client)))
    return _make


@pytest.fixture
def gateway_session(make_gateway_session, gateway_settings):
    return make_gateway_session(gateway_settings)


@pytest.fixture
def ai_client(gateway_session):
    return AIClient("http://gateway.test", session=gateway_session)
