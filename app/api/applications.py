import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from app.schemas.applications import (
    ApplicationListResponse,
    ErrorResponse,
    MessageResponse,
    SubmitApplicationResponse,
)
from app.services.application_workflow import ApplicationWorkflow
from app.services.container import ServiceContainer
from app.services.file_validator import RESUME_FIELD, UploadedFile
from app.utils.auth_dependencies import get_container, get_current_user
from app.utils.limiter import limiter, submit_rate_limit
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Job application endpoints
router = APIRouter(
    prefix="/api/applications",
    tags=["Applications"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def get_application_workflow(container: ServiceContainer = Depends(get_container)) -> ApplicationWorkflow:
    return container.application_workflow


async def _spool_upload(upload: UploadFile) -> UploadedFile:
    """Write a multipart upload to a temp file so storage can read it from disk."""
    suffix = Path(upload.filename or "").suffix
    content = await upload.read()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        tmp.write(content)
    return UploadedFile(
        path=tmp.name,
        filename=upload.filename or "",
        content_type=upload.content_type,
        size=len(content),
    )


@router.post("", response_model=SubmitApplicationResponse, responses={429: {"model": ErrorResponse}})
@limiter.limit(submit_rate_limit)
async def post_application(
    request: Request,
    resume: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    coverLetter: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    jobId: Optional[str] = Form(None),
    current_user: dict = Depends(get_current_user),
    workflow: ApplicationWorkflow = Depends(get_application_workflow),
):
    """
    Submit a job application with a resume (PDF or image).

    Job seekers only. The resume is uploaded to storage once every
    other check has passed.
    """
    logger.info("[API] Received job application request")
    files: Dict[str, UploadedFile] = {}
    if resume is not None and resume.filename:
        files[RESUME_FIELD] = await _spool_upload(resume)

    form = {
        "name": name,
        "email": email,
        "coverLetter": coverLetter,
        "phone": phone,
        "address": address,
        "jobId": jobId,
    }
    try:
        application = await workflow.submit_application(current_user, form, files)
    finally:
        for spooled in files.values():
            try:
                os.unlink(spooled.path)
            except OSError as e:
                logger.warning(f"[API] Could not remove temp file {spooled.path}: {e}")

    return SubmitApplicationResponse(application=application)


@router.get("/employer", response_model=ApplicationListResponse)
async def employer_get_all_applications(
    current_user: dict = Depends(get_current_user),
    workflow: ApplicationWorkflow = Depends(get_application_workflow),
):
    """Applications received for the current employer's job postings."""
    applications = workflow.employer_get_all_applications(current_user)
    return ApplicationListResponse(applications=applications)


@router.get("/jobseeker", response_model=ApplicationListResponse)
async def jobseeker_get_all_applications(
    current_user: dict = Depends(get_current_user),
    workflow: ApplicationWorkflow = Depends(get_application_workflow),
):
    """Applications submitted by the current job seeker."""
    applications = workflow.jobseeker_get_all_applications(current_user)
    return ApplicationListResponse(applications=applications)


@router.delete("/{application_id}", response_model=MessageResponse)
async def jobseeker_delete_application(
    application_id: str,
    current_user: dict = Depends(get_current_user),
    workflow: ApplicationWorkflow = Depends(get_application_workflow),
):
    workflow.jobseeker_delete_application(current_user, application_id)
    logger.info(f"[API] Application {application_id} deleted")
    return MessageResponse(message="Application Deleted!")
