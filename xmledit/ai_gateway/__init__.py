"""AI gateway module.

This module provides the prompt templates, the Bedrock model client, the
FastAPI gateway application and the HTTP client the editor uses to reach
it.
"""

from .ai_client import AICallResult, AIClient, extract_xml_from_response, has_xml_content
from .bedrock_client import BedrockClient
from .config import GatewaySettings, load_settings
from .errors import (
    GatewayError,
    GatewayNotConfiguredError,
    ModelInvocationError,
    UnknownPromptError,
    XmlEditError,
)
from .prompts import PROMPT_TEMPLATES, TASK_KEYWORDS, render_prompt, resolve_task

__all__ = [
    'AICallResult',
    'AIClient',
    'BedrockClient',
    'GatewayError',
    'GatewayNotConfiguredError',
    'GatewaySettings',
    'ModelInvocationError',
    'PROMPT_TEMPLATES',
    'TASK_KEYWORDS',
    'UnknownPromptError',
    'XmlEditError',
    'extract_xml_from_response',
    'has_xml_content',
    'load_settings',
    'render_prompt',
    'resolve_task',
]
