import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.router import limiter, router
from config import settings
from services.exceptions import SkillMatchError

logger = logging.getLogger(__name__)

# Error kind -> HTTP status
ERROR_STATUS_CODES = {
    "validation_error": 400,
    "input_error": 400,
    "not_found": 404,
    "duplicate": 409,
    "invalid_state_transition": 409,
    "concurrent_modification": 409,
}

app = FastAPI(
    title="Skill Match API",
    description="Weighted skill-correlation scoring for job descriptions and bids",
    version="1.0.0",
    debug=settings.debug,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SkillMatchError)
async def skill_match_error_handler(request: Request, exc: SkillMatchError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(exc.kind, 500)
    if status_code >= 500:
        logger.error("Unhandled %s on %s: %s", exc.kind, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind, "message": str(exc)},
    )


app.include_router(router)
