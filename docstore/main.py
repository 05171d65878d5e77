import logging

from fastapi import FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from docstore.config import Settings, get_settings
from docstore.exceptions import GENERIC_ERROR_MESSAGE, BadRequestError, StorageServiceError
from docstore.log import setup_logging
from docstore.models import ApiErrorResponse, ApiSuccessResponse, FileRecord, SearchResponse
from docstore.service import StorageService, is_blank
from docstore.storage import S3ObjectStore

logger = logging.getLogger(__name__)

NUMERIC_ERROR_TYPES = {"int_parsing", "int_type", "int_from_float"}


def create_app(settings: Settings | None = None, store: S3ObjectStore | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    store = store or S3ObjectStore.from_settings(settings)
    service = StorageService(store, settings)

    app = FastAPI(title=settings.app_name)
    app.state.storage_service = service

    @app.get("/")
    def root() -> dict:
        return {"status": "ok", "service": settings.app_name}

    def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
        body = ApiErrorResponse(status=status_code, message=message, path=request.url.path)
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        missing_fields = [str(error["loc"][-1]) for error in errors if error.get("type") == "missing"]
        if missing_fields:
            message = f"{missing_fields[0]} is required"
        elif errors:
            field = str(errors[0]["loc"][-1])
            if errors[0].get("type") in NUMERIC_ERROR_TYPES:
                message = f"Invalid parameter '{field}': must be a valid number"
            else:
                message = f"Invalid parameter '{field}': {errors[0]['msg']}"
        else:
            message = "invalid request parameters"
        return error_response(request, 400, message)

    @app.exception_handler(StorageServiceError)
    async def storage_service_exception_handler(request: Request, exc: StorageServiceError):
        return error_response(request, exc.status_code, exc.response_message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = str(exc.detail) if exc.detail else "request failed"
        return error_response(request, exc.status_code, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return error_response(request, 500, GENERIC_ERROR_MESSAGE)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "environment": settings.app_env}

    @app.get("/v1/storage/search", response_model=SearchResponse)
    def search_files(
        user_name: str = Query(..., alias="userName"),
        search_term: str | None = Query(None, alias="searchTerm"),
        page: int = Query(0, ge=0),
        size: int = Query(settings.default_page_size, ge=1),
    ):
        if is_blank(user_name):
            raise BadRequestError("Username is required")
        files = service.search_files(user_name, search_term, page, size)
        return SearchResponse.from_files(files, user_name, search_term)

    @app.get("/v1/storage/files", response_model=SearchResponse)
    def list_user_files(
        user_name: str = Query(..., alias="userName"),
        page: int = Query(0, ge=0),
        size: int = Query(settings.default_page_size, ge=1),
    ):
        if is_blank(user_name):
            raise BadRequestError("Username is required")
        files = service.search_files(user_name, None, page, size)
        return SearchResponse.from_files(files, user_name, None)

    @app.post("/v1/storage/upload", response_model=FileRecord)
    def upload_file(user_name: str = Query(..., alias="userName"), file: UploadFile = File(...)):
        if is_blank(user_name):
            raise BadRequestError("Username is required")

        content = file.file.read(settings.max_upload_size_bytes + 1)
        if len(content) > settings.max_upload_size_bytes:
            raise HTTPException(status_code=413, detail="File exceeds max upload size")

        return service.upload_file(user_name, content, file.filename, file.content_type, len(content))

    @app.delete("/v1/storage/delete", response_model=ApiSuccessResponse)
    def delete_file(
        user_name: str = Query(..., alias="userName"),
        file_name: str = Query(..., alias="fileName"),
    ):
        if is_blank(user_name):
            raise BadRequestError("Username is required")
        if is_blank(file_name):
            raise BadRequestError("Filename is required")

        service.delete_file(user_name, file_name)
        return ApiSuccessResponse(message=f"File deleted successfully: {file_name}")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("docstore.main:app", host="0.0.0.0", port=8000)
