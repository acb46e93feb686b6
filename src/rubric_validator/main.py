"""FastAPI application entry point.

The lifespan handler builds the model client, the submission logger and the
evaluation service, and stores the service on app.state for route handlers.
On shutdown, in-flight submissions get a short window to finish.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .engine.credentials import EnvCredentialProvider
from .engine.errors import BadRequestError
from .engine.evaluator import EvaluationService
from .engine.model_client import ModelClient
from .engine.submission_log import SubmissionLogger
from .logging import logger, print_settings
from .routes import analyze_router, health_router

logger.info("Starting Rubric Validator")

# Print settings with sensitive data masked
print_settings(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    submission_logger = SubmissionLogger()
    app.state.evaluation_service = EvaluationService(
        model_client=ModelClient(),
        credentials=EnvCredentialProvider(),
        submission_logger=submission_logger,
    )
    logger.info(f"Model client initialized: {settings.model_base_url} / {settings.model_id}")

    yield

    await submission_logger.aclose()


# Initialize FastAPI app
app = FastAPI(title="Rubric Validator", version="0.1.0", lifespan=lifespan)


# Malformed or mistyped bodies are bad input, same as blank fields
@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request body on {request.method} {request.url.path}: {exc.errors()}")
    error = BadRequestError("Both prompt and criterion are required")
    return JSONResponse(status_code=error.status_code, content={"detail": error.to_detail()})


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(health_router)
app.include_router(analyze_router)
