"""Global exception handlers mapping domain exceptions to HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from metaprompt.exceptions import (
    AllFilesFailedError,
    ApiError,
    DocumentConversionError,
    ExtractionServiceError,
    FieldShapeError,
    FormIncompleteError,
    GenerationError,
    InputValidationError,
    MetaPromptError,
    OperationInProgressError,
    QuotaExceededError,
)


def _error_body(exc: MetaPromptError, **extra: object) -> dict[str, object]:
    return {"error": exc.message, "type": exc.error_code, **extra}


def register_error_handlers(app: FastAPI) -> None:
    """Register exception-to-HTTP-status mappings."""

    @app.exception_handler(FieldShapeError)
    async def handle_field_error(request: Request, exc: FieldShapeError) -> JSONResponse:
        return JSONResponse(status_code=422, content=_error_body(exc))

    @app.exception_handler(FormIncompleteError)
    async def handle_incomplete(request: Request, exc: FormIncompleteError) -> JSONResponse:
        return JSONResponse(status_code=422, content=_error_body(exc, missing=exc.missing))

    @app.exception_handler(InputValidationError)
    async def handle_validation(request: Request, exc: InputValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content=_error_body(exc))

    @app.exception_handler(OperationInProgressError)
    async def handle_in_progress(request: Request, exc: OperationInProgressError) -> JSONResponse:
        return JSONResponse(status_code=409, content=_error_body(exc))

    @app.exception_handler(DocumentConversionError)
    async def handle_conversion(request: Request, exc: DocumentConversionError) -> JSONResponse:
        return JSONResponse(status_code=422, content=_error_body(exc, filename=exc.filename))

    @app.exception_handler(AllFilesFailedError)
    async def handle_all_failed(request: Request, exc: AllFilesFailedError) -> JSONResponse:
        return JSONResponse(status_code=422, content=_error_body(exc, filenames=exc.filenames))

    @app.exception_handler(ExtractionServiceError)
    async def handle_extraction(request: Request, exc: ExtractionServiceError) -> JSONResponse:
        cause = exc.cause.error_code if exc.cause is not None else None
        return JSONResponse(status_code=502, content=_error_body(exc, cause=cause))

    @app.exception_handler(QuotaExceededError)
    async def handle_quota(request: Request, exc: QuotaExceededError) -> JSONResponse:
        return JSONResponse(status_code=429, content=_error_body(exc))

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=502, content=_error_body(exc))

    @app.exception_handler(GenerationError)
    async def handle_generation(request: Request, exc: GenerationError) -> JSONResponse:
        return JSONResponse(status_code=422, content=_error_body(exc))

    @app.exception_handler(MetaPromptError)
    async def handle_generic_error(request: Request, exc: MetaPromptError) -> JSONResponse:
        return JSONResponse(status_code=500, content=_error_body(exc))

    @app.exception_handler(KeyError)
    async def handle_not_found(request: Request, exc: KeyError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc), "type": "not_found"})
