from functools import lru_cache

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from cheffy import __version__
from cheffy.api.models import ErrorResponse, ExtractionRequest, ExtractionResponse
from cheffy.config.settings import get_settings
from cheffy.services.pipeline import RecipeStepService
from cheffy.utils.validation import InvalidYouTubeURLError


settings = get_settings()

app = FastAPI(
    title=settings.api_title,
    version=__version__,
    description="Extract timestamped recipe steps from YouTube cooking videos.",
)


@lru_cache(maxsize=1)
def get_service() -> RecipeStepService:
    return RecipeStepService(settings=settings)


def _error(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.get("/health")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@app.post(
    "/api/youtube-parse",
    response_model=ExtractionResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def parse_youtube(
    payload: ExtractionRequest,
    service: RecipeStepService = Depends(get_service),
):
    if not payload.url or not payload.url.strip():
        return _error(400, "YouTube URL is required")

    duration = payload.duration if payload.duration and payload.duration > 0 else None
    try:
        result = service.extract(payload.url, duration=duration)
    except InvalidYouTubeURLError as exc:
        return _error(400, str(exc))
    except Exception as exc:  # noqa: BLE001 - surfaced to the caller as a 500
        return _error(500, "Failed to parse YouTube video", str(exc))

    return ExtractionResponse.from_result(result)
