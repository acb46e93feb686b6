"""
POST /analyze-rubric endpoint.

Accepts one prompt and one criterion, runs the evaluation service, and
returns the verdict in its wire shape. Service errors become HTTPExceptions
carrying the error's status and a {code, message} detail.
"""

from fastapi import APIRouter, HTTPException, Request

from ..engine.errors import ServiceError
from ..logging import bind_request_id, logger
from ..schemas.request import AnalyzeRequest
from ..schemas.verdict import Verdict

router = APIRouter()


@router.post("/analyze-rubric", response_model=Verdict)
async def analyze_rubric(request: Request, body: AnalyzeRequest) -> Verdict:
    bind_request_id(request.headers.get("x-request-id"))

    service = getattr(request.app.state, "evaluation_service", None)
    if service is None:
        raise HTTPException(
            status_code=503,
            detail={"code": "SERVICE_UNAVAILABLE", "message": "Evaluation service not initialized"},
        )

    try:
        return await service.evaluate(body.prompt, body.criterion)
    except ServiceError as e:
        logger.warning(f"analyze-rubric failed: {e.code} (HTTP {e.status_code})")
        raise HTTPException(status_code=e.status_code, detail=e.to_detail()) from e
