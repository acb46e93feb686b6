"""
GET /health endpoint for liveness and readiness checks.
"""

from fastapi import APIRouter, Request

from ..schemas.response import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    service = getattr(request.app.state, "evaluation_service", None)
    has_key = bool(service and service.credentials.get_api_key())

    return HealthResponse(
        model_id=service.model_client.model_id if service else "",
        credential="configured" if has_key else "missing",
    )
