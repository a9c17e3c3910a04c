import pytest

from app.services.file_validator import UploadedFile
from app.utils.exceptions import (
    Forbidden,
    InternalError,
    NotFound,
    Unauthorized,
    UploadFailed,
    ValidationError,
)


@pytest.mark.asyncio
async def test_successful_submission_links_seeker_and_job_owner(workflow, storage, applications, seeker, valid_form, pdf_resume):
    application = await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})

    assert application["applicantID"] == {"user": "seeker-1", "role": "Job Seeker"}
    assert application["employerID"] == {"user": "E1", "role": "Employer"}
    assert application["resume"]["url"].startswith("https://storage.test/")
    assert application["resume"]["public_id"].startswith("job_applications/")
    assert {k: application[k] for k in ("name", "email", "coverLetter", "phone", "address")} == {
        "name": "A", "email": "a@x.com", "coverLetter": "hi", "phone": "123", "address": "addr",
    }
    assert "jobId" not in application
    assert len(storage.uploads) == 1
    assert storage.uploads[0]["content_type"] == "application/pdf"
    assert application["id"] in applications.records


@pytest.mark.asyncio
async def test_unauthenticated(workflow, storage, valid_form, pdf_resume):
    with pytest.raises(Unauthorized) as exc:
        await workflow.submit_application(None, valid_form, {"resume": pdf_resume})
    assert exc.value.status_code == 401
    assert storage.uploads == []


@pytest.mark.asyncio
async def test_employers_cannot_apply_even_with_valid_payload(workflow, storage, jobs, employer, valid_form, pdf_resume):
    with pytest.raises(Forbidden, match="Employers cannot apply"):
        await workflow.submit_application(employer, valid_form, {"resume": pdf_resume})
    assert storage.uploads == []
    assert jobs.lookups == []


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["Admin", "", None, "job seeker"])
async def test_only_job_seekers_can_apply(workflow, storage, jobs, valid_form, pdf_resume, role):
    with pytest.raises(Forbidden, match="Only Job Seekers can apply"):
        await workflow.submit_application({"id": "u9", "role": role}, valid_form, {"resume": pdf_resume})
    assert storage.uploads == []
    assert jobs.lookups == []


@pytest.mark.asyncio
async def test_missing_resume_never_uploads(workflow, storage, seeker, valid_form):
    with pytest.raises(ValidationError, match="Resume File Required"):
        await workflow.submit_application(seeker, valid_form, {})
    assert storage.uploads == []


@pytest.mark.asyncio
async def test_unsupported_resume_type_never_uploads(workflow, storage, seeker, valid_form, pdf_resume):
    docx = UploadedFile(
        path=pdf_resume.path,
        filename="cv.docx",
        content_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        size=pdf_resume.size,
    )
    with pytest.raises(ValidationError, match="Invalid file type"):
        await workflow.submit_application(seeker, valid_form, {"resume": docx})
    assert storage.uploads == []


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["name", "email", "coverLetter", "phone", "address"])
async def test_missing_fields_rejected_before_upload(workflow, storage, jobs, seeker, valid_form, pdf_resume, missing):
    valid_form[missing] = "  "
    with pytest.raises(ValidationError, match="Please fill all fields"):
        await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    assert storage.uploads == []
    assert jobs.lookups == []


@pytest.mark.asyncio
async def test_invalid_email_rejected(workflow, storage, seeker, valid_form, pdf_resume):
    valid_form["email"] = "not-an-email"
    with pytest.raises(ValidationError, match="valid email"):
        await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    assert storage.uploads == []


@pytest.mark.asyncio
@pytest.mark.parametrize("job_id", [None, "", "J404"])
async def test_unknown_job_is_not_found_and_nothing_is_stored(workflow, storage, applications, seeker, valid_form, pdf_resume, job_id):
    valid_form["jobId"] = job_id
    with pytest.raises(NotFound, match="Job not found"):
        await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    assert storage.uploads == []
    assert applications.records == {}


@pytest.mark.asyncio
async def test_job_without_owner_is_not_found_and_nothing_is_stored(workflow, storage, applications, jobs, seeker, valid_form, pdf_resume):
    jobs.jobs["J2"] = {"title": "Orphaned posting"}
    jobs.jobs["J3"] = {"title": "Blank owner", "postedBy": ""}
    for job_id in ("J2", "J3"):
        valid_form["jobId"] = job_id
        with pytest.raises(NotFound, match="Job not found"):
            await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    assert storage.uploads == []
    assert applications.records == {}


@pytest.mark.asyncio
async def test_upload_failure_creates_no_application(workflow, storage, applications, seeker, valid_form, pdf_resume):
    storage.fail = True
    with pytest.raises(UploadFailed) as exc:
        await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    assert exc.value.status_code == 500
    assert len(storage.uploads) == 1
    assert applications.records == {}


@pytest.mark.asyncio
async def test_persist_failure_removes_uploaded_resume(workflow, storage, applications, seeker, valid_form, pdf_resume):
    applications.fail_on_create = True
    with pytest.raises(InternalError):
        await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    assert storage.removed == ["job_applications/resume1"]


@pytest.mark.asyncio
async def test_persist_failure_with_failed_cleanup_is_still_internal_error(workflow, storage, applications, seeker, valid_form, pdf_resume):
    applications.fail_on_create = True
    storage.remove_ok = False
    with pytest.raises(InternalError) as exc:
        await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    assert exc.value.status_code == 500
    assert storage.removed == ["job_applications/resume1"]
    assert applications.records == {}


@pytest.mark.asyncio
async def test_duplicate_submissions_are_both_kept(workflow, seeker, valid_form, pdf_resume):
    first = await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    second = await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    assert first["id"] != second["id"]
    assert len(workflow.jobseeker_get_all_applications(seeker)) == 2


@pytest.mark.asyncio
async def test_listing_by_role(workflow, seeker, employer, valid_form, pdf_resume):
    await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})

    assert len(workflow.employer_get_all_applications(employer)) == 1
    assert workflow.employer_get_all_applications({"id": "E2", "role": "Employer"}) == []
    assert len(workflow.jobseeker_get_all_applications(seeker)) == 1

    with pytest.raises(Forbidden, match="Job Seekers cannot access"):
        workflow.employer_get_all_applications(seeker)
    with pytest.raises(Forbidden, match="Employers cannot access"):
        workflow.jobseeker_get_all_applications(employer)
    with pytest.raises(Unauthorized):
        workflow.jobseeker_get_all_applications(None)


@pytest.mark.asyncio
async def test_jobseeker_listing_is_idempotent(workflow, seeker, valid_form, pdf_resume):
    await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    assert workflow.jobseeker_get_all_applications(seeker) == workflow.jobseeker_get_all_applications(seeker)


def test_delete_missing_application(workflow, applications, seeker):
    with pytest.raises(NotFound, match="Application not found"):
        workflow.jobseeker_delete_application(seeker, "does-not-exist")
    assert applications.records == {}


@pytest.mark.asyncio
async def test_delete_own_application(workflow, applications, seeker, valid_form, pdf_resume):
    application = await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    workflow.jobseeker_delete_application(seeker, application["id"])
    assert applications.records == {}


@pytest.mark.asyncio
async def test_delete_requires_ownership(workflow, applications, seeker, valid_form, pdf_resume):
    application = await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    other = {"id": "seeker-2", "role": "Job Seeker"}

    with pytest.raises(Forbidden, match="your own applications"):
        workflow.jobseeker_delete_application(other, application["id"])
    assert application["id"] in applications.records


@pytest.mark.asyncio
async def test_employer_cannot_delete(workflow, applications, seeker, employer, valid_form, pdf_resume):
    application = await workflow.submit_application(seeker, valid_form, {"resume": pdf_resume})
    with pytest.raises(Forbidden, match="Employers cannot delete"):
        workflow.jobseeker_delete_application(employer, application["id"])
    assert application["id"] in applications.records
