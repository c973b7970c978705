import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from services.report_errors import ReportError

logger = logging.getLogger(__name__)


def _error_json(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def add_error_handlers(app: FastAPI):
    @app.exception_handler(ReportError)
    async def report_error_handler(request: Request, exc: ReportError):
        logger.error(f"보고서 처리 실패 [{request.url.path}]: {exc}")
        return _error_json(500, exc.code, f"PDF 생성 실패: {exc}")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 예외 [{request.url.path}]")
        return _error_json(500, "INTERNAL_ERROR", str(exc))
