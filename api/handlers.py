from fastapi import APIRouter
from fastapi.responses import JSONResponse
from schemas.schemas import (
    MatchRequest,
    MatchResponse,
    ErrorResponse,
    HealthCheckResponse,
)
from services.matcher_service import run_matching
from config import settings
import structlog

log = structlog.get_logger()

router = APIRouter()


@router.get("/", response_model=HealthCheckResponse)
async def healthcheck():
    return JSONResponse(content=HealthCheckResponse(
        status="ok",
        message="SlotMatch matching engine live",
        version=settings.version
    ).model_dump())


@router.post("/matching/solve", response_model=MatchResponse, responses={500: {"model": ErrorResponse}})
async def solve(request: MatchRequest, algorithm: str = "random"):
    log.info(
        "Matching request received",
        algorithm=algorithm,
        applicants=len(request.applicants),
        slots=len(request.slots),
    )

    try:
        outcome, algorithm_used = await run_matching(request, algorithm)
    except Exception as e:
        log.error("Matching failed", algorithm=algorithm, error=str(e))
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                status="error",
                message="Matching failed.",
                info=str(e)
            ).model_dump()
        )

    return MatchResponse(status="success", algorithm=algorithm_used, **outcome.as_dict())
