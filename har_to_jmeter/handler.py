"""
HTTP function: POST a HAR document, get a JMeter test plan back.

Run with: uvicorn har_to_jmeter.handler:app --port 8000
"""

import logging
import os
import traceback
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from .config import Settings, configure_logging
from .generator import JMXGenerator
from .models import ErrorResponse, GenerateRequest
from .parser import parse_har_content

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'authorization, x-client-info, apikey, content-type',
}


def _error_response(error: Exception, settings: Optional[Settings]) -> JSONResponse:
    stack = None
    if settings is not None and settings.expose_stack_traces:
        stack = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
    body = ErrorResponse(error=str(error) or type(error).__name__, stack=stack)
    return JSONResponse(body.model_dump(), status_code=500, headers=CORS_HEADERS)


def create_app(settings_factory: Callable[[], Settings] = Settings.from_env,
               generator_factory: Callable[[Settings], JMXGenerator] = JMXGenerator,
               log_level: Optional[str] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings_factory: Resolves settings once per invocation
        generator_factory: Builds the generator from the resolved settings
        log_level: Root logging level, taken from the settings when omitted

    Raises:
        ConfigurationError: If the settings cannot be resolved at startup
    """
    if log_level is None:
        log_level = settings_factory().log_level
    configure_logging(log_level)

    app = FastAPI(
        title="HAR to JMeter",
        description="Convert HAR captures into Apache JMeter test plans with an LLM",
    )

    @app.options("/{path:path}")
    async def preflight(path: str) -> Response:
        return Response(status_code=200, headers=CORS_HEADERS)

    @app.post("/{path:path}")
    async def convert(path: str, request: Request) -> JSONResponse:
        settings = None
        try:
            settings = settings_factory()
            payload = GenerateRequest.model_validate(await request.json())
            logger.info(f"Processing HAR file with {payload.ai_provider}...")

            har_data = parse_har_content(payload.har_content)
            generator = generator_factory(settings)
            result = await run_in_threadpool(
                generator.generate,
                har_data,
                ai_provider=payload.ai_provider,
                test_plan_name=payload.test_plan_name,
                load_config=payload.load_config,
            )
            return JSONResponse(result.model_dump(by_alias=True), headers=CORS_HEADERS)

        except Exception as e:
            logger.error(f"Error in har-to-jmeter function: {e}", exc_info=True)
            return _error_response(e, settings)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
