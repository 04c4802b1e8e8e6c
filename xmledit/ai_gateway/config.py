"""Gateway settings loaded from the environment.

This module loads the model identifier, region and AWS credentials using
python-dotenv. Missing credentials do not fail startup; they are reported
through GatewaySettings.is_configured() and the missing list instead.
"""

import os
from typing import List, NamedTuple, Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "anthropic.claude-3-sonnet-20240229-v1:0"
DEFAULT_REGION = "us-east-1"
DEFAULT_PORT = 3001
DEFAULT_ENDPOINT = "http://localhost:3001"


class GatewaySettings(NamedTuple):
    """AI gateway configuration."""
    model: str
    region: str
    access_key_id: Optional[str]
    secret_access_key: Optional[str]
    port: int

    @property
    def missing(self) -> List[str]:
        missing = []
        if not self.access_key_id:
            missing.append('AWS_ACCESS_KEY_ID')
        if not self.secret_access_key:
            missing.append('AWS_SECRET_ACCESS_KEY')
        return missing

    def is_configured(self) -> bool:
        return not self.missing


def load_settings(dotenv: bool = True) -> GatewaySettings:
    """Read gateway settings from environment variables.

    Environment variables:
        AI_MODEL: Bedrock model identifier
        AWS_REGION: AWS region of the Bedrock runtime
        AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY: AWS credentials
        PORT: Port the gateway listens on

    Args:
        dotenv: Load a .env file into the environment first

    Example:
        >>> settings = load_settings()
        >>> print(f"Using {settings.model} in {settings.region}")
    """
    if dotenv:
        load_dotenv()

    return GatewaySettings(
        model=os.getenv('AI_MODEL') or DEFAULT_MODEL,
        region=os.getenv('AWS_REGION') or DEFAULT_REGION,
        access_key_id=os.getenv('AWS_ACCESS_KEY_ID'),
        secret_access_key=os.getenv('AWS_SECRET_ACCESS_KEY'),
        port=int(os.getenv('PORT') or DEFAULT_PORT),
    )


def default_endpoint() -> str:
    """Return the gateway URL the HTTP client talks to."""
    return os.getenv('XMLEDIT_AI_ENDPOINT') or DEFAULT_ENDPOINT
