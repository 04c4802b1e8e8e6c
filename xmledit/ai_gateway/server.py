"""FastAPI application exposing the AI gateway.

Endpoints:
    POST /api/ai      Render the prompt template for a task keyword and
                      forward it to the model
    GET  /api/model   Model identifier, region and configuration state
    GET  /health      Liveness check
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from xmledit.ai_gateway.bedrock_client import BedrockClient
from xmledit.ai_gateway.errors import GatewayNotConfiguredError, ModelInvocationError
from xmledit.ai_gateway.prompts import render_prompt, resolve_task

logger = logging.getLogger(__name__)


class AIRequest(BaseModel):
    """Body of POST /api/ai."""
    prompt: Optional[str] = Field(None, description="Task keyword selecting the prompt template")
    context: str = Field("", description="Document text or instructions for the template")
    max_tokens: int = Field(1000, alias="maxTokens", gt=0)
    temperature: float = Field(0.7, ge=0.0, le=1.0)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


def create_app(client: Optional[BedrockClient] = None) -> FastAPI:
    """Build the gateway application.

    Args:
        client: Model client; a BedrockClient configured from the
            environment is created when omitted
    """
    client = client or BedrockClient()
    app = FastAPI(title="xmledit AI gateway")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    def validation_error_handler(request: Request, exc: RequestValidationError):
        """Answer malformed request bodies in the endpoint's error shape."""
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
            for error in exc.errors()
        )
        logger.warning(f"Rejected request to {request.url.path}: {problems}")
        return _error(422, f"Invalid request: {problems}")

    @app.post("/api/ai")
    def call_ai(request: AIRequest):
        task = resolve_task(request.prompt)
        if request.prompt and task != request.prompt:
            logger.warning(f"Unknown task '{request.prompt}', using {task}")

        logger.info(
            f"AI request: task={task}, context length={len(request.context)} chars"
        )

        try:
            return client.invoke_model(
                render_prompt(task, request.context),
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            )
        except GatewayNotConfiguredError as e:
            logger.error(str(e))
            return _error(503, str(e))
        except ModelInvocationError as e:
            logger.error(str(e))
            return _error(500, str(e))

    @app.get("/api/model")
    def model_info():
        return client.model_info()

    @app.get("/health")
    def health():
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }

    return app


def run_server(host: str = "127.0.0.1", port: Optional[int] = None) -> None:
    """Serve the gateway with uvicorn until interrupted."""
    client = BedrockClient()
    if not client.is_configured():
        logger.warning(
            "AWS credentials are not set; /api/ai will answer 503 until they are"
        )
    uvicorn.run(create_app(client), host=host, port=port or client.settings.port)
