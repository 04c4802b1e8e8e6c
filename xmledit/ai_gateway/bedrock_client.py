"""Bedrock runtime client for Anthropic models.

This module provides BedrockClient, which builds the Anthropic messages
request body, invokes the model through boto3's bedrock-runtime client and
parses the generated text and token usage out of the response envelope.
"""

import json
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from xmledit.ai_gateway.config import GatewaySettings, load_settings
from xmledit.ai_gateway.errors import GatewayNotConfiguredError, ModelInvocationError

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "bedrock-2023-05-31"
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant specializing in XML processing and editing."
)


def build_user_prompt(prompt: str, context: str = "") -> str:
    """Combine the request and optional context into one user message."""
    if context:
        return (
            f"Context:\n{context}\n\nUser Request: {prompt}\n\n"
            "Please provide a helpful response for this XML-related request."
        )
    return (
        f"User Request: {prompt}\n\n"
        "Please provide a helpful response for this XML-related request."
    )


class BedrockClient:
    """Invokes Anthropic models hosted on AWS Bedrock.

    The boto3 client is created on first use so that constructing a
    BedrockClient never touches AWS, and an unconfigured gateway can still
    start and report itself through is_configured().

    Example:
        >>> client = BedrockClient()
        >>> if client.is_configured():
        ...     result = client.invoke_model("Summarize", "<a/>")
        ...     print(result["response"])
    """

    def __init__(self, settings: Optional[GatewaySettings] = None, runtime=None):
        self.settings = settings or load_settings()
        self._runtime = runtime

    @property
    def model(self) -> str:
        return self.settings.model

    def _get_runtime(self):
        if self._runtime is None:
            self._runtime = boto3.client(
                "bedrock-runtime",
                region_name=self.settings.region,
                aws_access_key_id=self.settings.access_key_id,
                aws_secret_access_key=self.settings.secret_access_key,
                config=Config(retries={"max_attempts": 3, "mode": "standard"}),
            )
        return self._runtime

    def is_configured(self) -> bool:
        return self.settings.is_configured()

    def model_info(self) -> Dict[str, Any]:
        return {
            "model": self.settings.model,
            "region": self.settings.region,
            "configured": self.is_configured(),
        }

    def build_request(
        self,
        prompt: str,
        context: str = "",
        max_tokens: int = 1000,
        temperature: float = 0.7,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> Dict[str, Any]:
        """Build the Anthropic messages request body."""
        return {
            "anthropic_version": ANTHROPIC_VERSION,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": system_prompt,
            "messages": [
                {"role": "user", "content": build_user_prompt(prompt, context)}
            ],
        }

    def invoke_model(
        self,
        prompt: str,
        context: str = "",
        max_tokens: int = 1000,
        temperature: float = 0.7,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> Dict[str, Any]:
        """Invoke the model and return the generated text with token usage.

        Args:
            prompt: User request
            context: Optional context placed before the request
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            system_prompt: System prompt sent with the request

        Returns:
            Dict with success, response, model and usage (prompt_tokens,
            completion_tokens, total_tokens)

        Raises:
            GatewayNotConfiguredError: If AWS credentials are missing
            ModelInvocationError: If the call fails or the response has no text
        """
        if not self.is_configured():
            raise GatewayNotConfiguredError(self.settings.missing)

        body = self.build_request(prompt, context, max_tokens, temperature, system_prompt)

        logger.info(f"Calling Bedrock model: {self.model}")
        try:
            response = self._get_runtime().invoke_model(
                modelId=self.model,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(body),
            )
            payload = json.loads(response["body"].read())
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Bedrock API error: {e}")
            raise ModelInvocationError(self.model, str(e)) from e
        except (KeyError, ValueError) as e:
            raise ModelInvocationError(self.model, f"unreadable response: {e}") from e

        return self.parse_response(payload)

    def parse_response(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Extract text and usage from an Anthropic response envelope.

        Raises:
            ModelInvocationError: If the envelope carries no text content
        """
        try:
            text = payload["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ModelInvocationError(self.model, f"no text in response: {e}") from e

        usage = payload.get("usage") or {}
        input_tokens = usage.get("input_tokens") or 0
        output_tokens = usage.get("output_tokens") or 0

        return {
            "success": True,
            "response": text,
            "model": self.model,
            "usage": {
                "prompt_tokens": input_tokens,
                "completion_tokens": output_tokens,
                "total_tokens": input_tokens + output_tokens,
            },
        }
