"""Check routes: JSON diagnostics and Markdown report."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from beam_checker.errors import ConfigurationError

from ..report_formatter import format_markdown_report
from ..schemas import CheckRequest, CheckResponse, ErrorDetail
from ..services import CheckerService

router = APIRouter()

_ERRORS = {400: {"model": ErrorDetail, "description": "Invalid checker options"}}

_service = CheckerService()


def get_checker_service() -> CheckerService:
    return _service


@router.post("/check", response_model=CheckResponse, responses=_ERRORS)
def check(req: CheckRequest, service: CheckerService = Depends(get_checker_service)) -> CheckResponse:
    """Run every BEAM rule over the submitted files."""
    try:
        return service.check(req.files, req.options)
    except ConfigurationError as e:
        raise HTTPException(400, str(e))


@router.post("/report", response_class=PlainTextResponse, responses=_ERRORS)
def report(req: CheckRequest, service: CheckerService = Depends(get_checker_service)) -> PlainTextResponse:
    """Same as /check, rendered as Markdown."""
    try:
        result, _ = service.run(req.files, req.options)
    except ConfigurationError as e:
        raise HTTPException(400, str(e))
    return PlainTextResponse(format_markdown_report(result), media_type="text/markdown")
