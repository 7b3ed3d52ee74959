# backend-fastapi/routers/prefill.py
# Certificate upload endpoint returning form prefill fields

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from certimport import ErrorKind, GatingError, ParseOutcome, ParsePipeline, SelectedFile
from config import settings

logger = logging.getLogger(__name__)
router = APIRouter()

_pipeline = ParsePipeline(config=settings.pipeline_config())

FAILURE_STATUS_CODES = {
    ErrorKind.UNSUPPORTED_FORMAT: 415,
    ErrorKind.FILE_TOO_LARGE: 413,
}


class PrefillResponse(BaseModel):
    success: bool = True
    suggestedName: str
    expiryDate: str
    notes: str
    sourceFilename: str


def get_pipeline() -> ParsePipeline:
    return _pipeline


def _failure_response(outcome: ParseOutcome, filename: str) -> JSONResponse:
    status_code = FAILURE_STATUS_CODES.get(outcome.error_kind, 422)
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "requiresPassword": False,
            "message": outcome.message,
            "errorKind": outcome.error_kind.value,
            "filename": filename
        }
    )


def _password_required_response(filename: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "requiresPassword": True,
            "message": settings.PASSWORD_PROMPT,
            "filename": filename
        }
    )


@router.post("/certificates/prefill", response_model=PrefillResponse, tags=["certificates"])
async def prefill_certificate(
    request: Request,
    file: UploadFile = File(...),
    password: Optional[str] = Form(None),
    pipeline: ParsePipeline = Depends(get_pipeline)
):
    """
    Read an uploaded certificate container and return the fields used to
    prefill the tracked-secret form.

    A password-protected PKCS12 bundle answers with requiresPassword; the
    client then resubmits the same file with the password field, which is
    tried exactly once. An empty password field counts as that attempt.
    """
    filename = file.filename or ""

    # Reject before reading when the upload size is already known
    try:
        pipeline.gate(filename, file.size or 0)
    except GatingError as gate_error:
        outcome = ParseOutcome.failure(gate_error.kind, pipeline.config.message_for(gate_error.kind),
                                       gate_error.detail)
        logger.info(f"Rejected {filename} before reading: {gate_error.kind.value}")
        return _failure_response(outcome, filename)

    file_content = await file.read()
    logger.info(f"Prefilling from certificate: {filename} ({len(file_content)} bytes)")
    # FastAPI reports an empty optional form field as None; presence decides the retry
    password_submitted = "password" in await request.form()
    logger.debug(f"Password provided: {'YES' if password_submitted else 'NO'}")

    outcome = pipeline.process(SelectedFile(filename=filename, size=len(file_content),
                                            read=lambda: file_content))

    if outcome.requires_password and password_submitted:
        outcome = pipeline.resume(outcome.pending, password or "")

    if outcome.requires_password:
        return _password_required_response(filename)

    if not outcome.ok:
        return _failure_response(outcome, filename)

    return PrefillResponse(**outcome.result.to_dict())
