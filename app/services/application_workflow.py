"""
Application Workflow

Orchestrates job application submission and the companion list/delete
operations. Every local check (role, file, form fields, job) runs before
the resume is uploaded, and a failed insert removes the uploaded resume
again, so storage never keeps files without an application.
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, EmailStr
from pydantic import ValidationError as PydanticValidationError

from app.services.application_service import (
    EMPLOYER_ROLE,
    JOB_SEEKER_ROLE,
    ApplicationService,
    actor_reference,
)
from app.services.file_validator import ResumeFileValidator, UploadedFile
from app.services.job_service import JobService
from app.services.resume_storage_service import ResumeStorageService
from app.utils.exceptions import (
    Forbidden,
    InternalError,
    NotFound,
    Unauthorized,
    ValidationError,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "email", "coverLetter", "phone", "address")


class _ApplicationForm(BaseModel):
    name: str
    email: EmailStr
    coverLetter: str
    phone: str
    address: str


def _require_identity(user: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if not user or not user.get("id"):
        logger.warning("[ApplicationWorkflow] User not authenticated")
        raise Unauthorized("User not authenticated", "ApplicationWorkflow")
    return user


class ApplicationWorkflow:
    """Submission pipeline: authorize, validate, resolve job, upload, persist."""

    def __init__(
        self,
        applications: ApplicationService,
        jobs: JobService,
        storage: ResumeStorageService,
        validator: ResumeFileValidator,
        resume_folder: Optional[str] = None,
    ):
        self.applications = applications
        self.jobs = jobs
        self.storage = storage
        self.validator = validator
        self.resume_folder = resume_folder

    def _validate_form(self, form: Mapping[str, Any]) -> Dict[str, str]:
        values = {}
        for name in REQUIRED_FIELDS:
            value = form.get(name)
            if value is None or not str(value).strip():
                logger.warning(f"[ApplicationWorkflow] Missing application field: {name}")
                raise ValidationError("Please fill all fields.", "ApplicationWorkflow")
            values[name] = str(value).strip()

        try:
            parsed = _ApplicationForm(**values)
        except PydanticValidationError:
            raise ValidationError("Please provide a valid email.", "ApplicationWorkflow")
        return parsed.model_dump()

    async def submit_application(
        self,
        user: Optional[Mapping[str, Any]],
        form: Mapping[str, Any],
        files: Optional[Mapping[str, UploadedFile]],
    ) -> Dict[str, Any]:
        """
        Run the full submission pipeline and return the created application.

        Args:
            user: Request identity ({"id", "role"}) or None
            form: Submitted form fields, including jobId
            files: Uploaded files keyed by field name

        Raises:
            Unauthorized, Forbidden, ValidationError, NotFound, UploadFailed, InternalError
        """
        user = _require_identity(user)
        logger.info(f"[ApplicationWorkflow] Application request from {user['id']} ({user.get('role')})")

        if user.get("role") == EMPLOYER_ROLE:
            raise Forbidden("Employers cannot apply for jobs!", "ApplicationWorkflow")
        if user.get("role") != JOB_SEEKER_ROLE:
            logger.warning(f"[ApplicationWorkflow] Role {user.get('role')!r} cannot apply for jobs")
            raise Forbidden("Only Job Seekers can apply for jobs!", "ApplicationWorkflow")

        resume = self.validator.validate(files)
        fields = self._validate_form(form)
        job = self.jobs.find_by_id(form.get("jobId"))
        # employerID must point at the posting employer
        if not job.get("postedBy"):
            logger.error(f"[ApplicationWorkflow] Job {job.get('id')} has no postedBy")
            raise NotFound("Job not found!", "ApplicationWorkflow")
        logger.info(f"[ApplicationWorkflow] Job found: {job.get('title')}")

        stored = await self.storage.upload(resume.path, self.resume_folder, resume.content_type)

        record = {
            **fields,
            "applicantID": actor_reference(user["id"], JOB_SEEKER_ROLE),
            "employerID": actor_reference(job.get("postedBy"), EMPLOYER_ROLE),
            "resume": {"public_id": stored.public_id, "url": stored.url},
        }
        try:
            application = self.applications.create(record)
        except Exception as e:
            logger.error(f"[ApplicationWorkflow] Failed to save application: {e}", exc_info=True)
            if not await self.storage.remove(stored.public_id):
                logger.error(f"[ApplicationWorkflow] Resume {stored.public_id} left in storage")
            raise InternalError("Internal Server Error", "ApplicationWorkflow") from e

        logger.info(f"[ApplicationWorkflow] ✅ Application {application['id']} submitted")
        return application

    def employer_get_all_applications(self, user: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        user = _require_identity(user)
        if user.get("role") == JOB_SEEKER_ROLE:
            raise Forbidden("Job Seekers cannot access this resource!", "ApplicationWorkflow")
        applications = self.applications.find_by_employer(user["id"])
        logger.info(f"[ApplicationWorkflow] Applications retrieved for employer {user['id']}: {len(applications)}")
        return applications

    def jobseeker_get_all_applications(self, user: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        user = _require_identity(user)
        if user.get("role") == EMPLOYER_ROLE:
            raise Forbidden("Employers cannot access this resource!", "ApplicationWorkflow")
        applications = self.applications.find_by_applicant(user["id"])
        logger.info(f"[ApplicationWorkflow] Applications retrieved for job seeker {user['id']}: {len(applications)}")
        return applications

    def jobseeker_delete_application(self, user: Optional[Mapping[str, Any]], application_id: str) -> None:
        """
        Delete one of the requester's own applications.

        Raises:
            Forbidden: Employer role, or the application belongs to someone else
            NotFound: No application with this id
        """
        user = _require_identity(user)
        if user.get("role") == EMPLOYER_ROLE:
            raise Forbidden("Employers cannot delete applications!", "ApplicationWorkflow")

        application = self.applications.find_by_id(application_id)
        if not application:
            raise NotFound("Application not found!", "ApplicationWorkflow")

        owner = (application.get("applicantID") or {}).get("user")
        if owner != str(user["id"]):
            logger.warning(
                f"[ApplicationWorkflow] User {user['id']} tried to delete application {application_id} owned by {owner}"
            )
            raise Forbidden("You can only delete your own applications!", "ApplicationWorkflow")

        self.applications.delete_by_id(application_id)
