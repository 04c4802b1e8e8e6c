"""HTTP client for the AI gateway.

This module provides AIClient, the collaborator the editor and the
revision manager use to reach the gateway. Calls never raise: every
failure comes back as an AICallResult with success=False, an error message
and a suggestion for the user.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from xmledit.ai_gateway.config import default_endpoint

logger = logging.getLogger(__name__)

UNAVAILABLE_SUGGESTION = (
    "You can set up a local AI service or configure an external API key."
)

_FENCED_XML = re.compile(r"```xml\n(.*?)\n```", re.DOTALL)
_DECLARED_XML = re.compile(r"<\?xml.*?</[^>]+>", re.DOTALL)
_ANY_ELEMENT = re.compile(r"<[^>]+>.*?</[^>]+>", re.DOTALL)


@dataclass
class AICallResult:
    """Outcome of one gateway call.

    Attributes:
        success: True when the gateway returned generated text
        response: Generated text
        model: Model that produced the text
        usage: Token usage reported by the gateway
        error: Error message when the call failed
        suggestion: Actionable hint shown with the error
    """

    success: bool
    response: str = ""
    model: str = ""
    usage: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    suggestion: Optional[str] = None


class AIClient:
    """Posts task requests to the gateway's /api/ai endpoint.

    Args:
        endpoint: Gateway base URL (defaults to XMLEDIT_AI_ENDPOINT or
            http://localhost:3001)
        timeout: Request timeout in seconds, None for no timeout
        session: requests.Session to reuse
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = (endpoint or default_endpoint()).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def call(
        self,
        task: str,
        context: str = "",
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> AICallResult:
        """Send a task to the gateway.

        Args:
            task: Task keyword selecting the gateway prompt template
            context: Text passed to the template
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            AICallResult describing the reply or the failure
        """
        payload = {
            "prompt": task,
            "context": context,
            "maxTokens": max_tokens,
            "temperature": temperature,
        }

        try:
            response = self.session.post(
                f"{self.endpoint}/api/ai", json=payload, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"AI call failed: {e}")
            return AICallResult(
                success=False,
                error="AI service is currently unavailable. Please check your configuration.",
                suggestion=UNAVAILABLE_SUGGESTION,
            )

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok or not data.get("success", False):
            error = data.get("error") or f"HTTP {response.status_code}: {response.reason}"
            logger.warning(f"AI gateway returned an error: {error}")
            return AICallResult(
                success=False, error=error, suggestion=UNAVAILABLE_SUGGESTION
            )

        return AICallResult(
            success=True,
            response=data.get("response") or data.get("text") or data.get("content") or "",
            model=data.get("model") or "local",
            usage=data.get("usage") or {},
        )


def extract_xml_from_response(response: str) -> Optional[str]:
    """Pull an XML document out of model prose.

    A fenced ```xml block wins, then text starting with an XML
    declaration, then the first element-looking span.
    """
    fenced = _FENCED_XML.search(response or "")
    if fenced:
        return fenced.group(1)
    for pattern in (_DECLARED_XML, _ANY_ELEMENT):
        match = pattern.search(response or "")
        if match:
            return match.group(0)
    return None


def has_xml_content(response: str) -> bool:
    return extract_xml_from_response(response) is not None
