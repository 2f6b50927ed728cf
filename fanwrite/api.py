from dataclasses import dataclass
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, StrictInt, ValidationError

from fanwrite.coordinator import DEFAULT_OBJECT_SIZE, DEFAULT_TIMEOUT, AggregateResult, format_duration, run
from fanwrite.depends import Injected
from fanwrite.storage import StorageBackend

router = APIRouter()


@dataclass
class WriteSettings:
    bucket: str
    timeout: float = DEFAULT_TIMEOUT
    object_size: int = DEFAULT_OBJECT_SIZE


class Payload(BaseModel):
    number: StrictInt


def render(result: AggregateResult) -> dict[str, object]:
    body: dict[str, object] = {
        "objects_written": result.objects_written,
        "time_taken": format_duration(result.time_taken),
    }
    if result.errors:
        body["errors"] = result.errors
    return body


async def payload_from_body(request: Request) -> Payload:
    """Decode the body as JSON whatever the Content-Type header claims."""
    body = await request.body()
    try:
        return Payload.model_validate_json(body)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid JSON payload: {_summarize(exc)}",
        ) from None


def _summarize(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(messages)


@router.get("/health")
async def health() -> Response:
    return Response(status_code=200)


@router.post("/")
async def write_objects(
    payload: Annotated[Payload, Depends(payload_from_body)],
    fs: Injected[StorageBackend],
    settings: Injected[WriteSettings],
) -> JSONResponse:
    if payload.number <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The 'number' value must be a positive integer",
        )
    logger.info("Received request to create {} objects in bucket '{}'", payload.number, settings.bucket)

    result = await run(
        payload.number,
        fs,
        settings.bucket,
        timeout=settings.timeout,
        content_length=settings.object_size,
    )
    logger.info(
        "Wrote {} of {} objects in {} ({} errors)",
        result.objects_written,
        payload.number,
        format_duration(result.time_taken),
        len(result.errors),
    )
    # any single failure turns the whole response into a 500
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR if result.errors else status.HTTP_200_OK
    return JSONResponse(status_code=status_code, content=render(result))

