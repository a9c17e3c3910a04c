"""Shared fixtures: test config, in-memory stand-ins for MongoDB/Supabase-backed services, API client."""

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.api.main import create_app
from app.config import AuthConfig, Config, MongoConfig, ServerConfig, StorageConfig
from app.services.application_workflow import ApplicationWorkflow
from app.services.auth_service import AuthService
from app.services.container import ServiceContainer
from app.services.file_validator import ResumeFileValidator, UploadedFile
from app.services.resume_storage_service import StoredResume
from app.utils.exceptions import NotFound, UploadFailed
from app.utils.limiter import limiter


class InMemoryApplications:
    """Mirrors ApplicationService over a dict."""

    def __init__(self):
        self.records: Dict[str, Dict[str, Any]] = {}
        self.fail_on_create = False

    def ensure_indexes(self):
        pass

    def create(self, fields):
        if self.fail_on_create:
            raise RuntimeError("connection reset")
        doc = copy.deepcopy(dict(fields))
        doc["id"] = uuid.uuid4().hex[:24]
        doc["createdAt"] = datetime.now(timezone.utc)
        self.records[doc["id"]] = doc
        return copy.deepcopy(doc)

    def find_by_id(self, application_id):
        doc = self.records.get(application_id)
        return copy.deepcopy(doc) if doc else None

    def find_by_applicant(self, user_id) -> List[Dict[str, Any]]:
        return [copy.deepcopy(d) for d in self.records.values() if d["applicantID"]["user"] == str(user_id)]

    def find_by_employer(self, user_id) -> List[Dict[str, Any]]:
        return [copy.deepcopy(d) for d in self.records.values() if d["employerID"]["user"] == str(user_id)]

    def delete_by_id(self, application_id):
        if application_id not in self.records:
            raise NotFound("Application not found!", "ApplicationService")
        del self.records[application_id]


class InMemoryJobs:
    def __init__(self, jobs: Optional[Dict[str, Dict[str, Any]]] = None):
        self.jobs = jobs or {}
        self.lookups: List[Any] = []

    def find_by_id(self, job_id):
        self.lookups.append(job_id)
        if not job_id or job_id not in self.jobs:
            raise NotFound("Job not found!", "JobService")
        return dict(self.jobs[job_id], id=job_id)


class RecordingStorage:
    """Records uploads/removals; set `fail` to make uploads raise UploadFailed, `remove_ok` to fail removals."""

    def __init__(self):
        self.uploads: List[Dict[str, Any]] = []
        self.removed: List[str] = []
        self.fail = False
        self.remove_ok = True

    async def upload(self, local_path, target_folder=None, content_type=None):
        self.uploads.append({"path": local_path, "folder": target_folder, "content_type": content_type})
        if self.fail:
            raise UploadFailed("Failed to upload Resume", "ResumeStorage")
        public_id = f"{target_folder or 'job_applications'}/resume{len(self.uploads)}"
        return StoredResume(public_id=public_id, url=f"https://storage.test/{public_id}")

    async def remove(self, public_id):
        self.removed.append(public_id)
        return self.remove_ok


@pytest.fixture(autouse=True)
def _no_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def config():
    return Config(
        mongo=MongoConfig(uri="mongodb://localhost:27017", db_name="job_portal_test"),
        storage=StorageConfig(url="https://supabase.test", service_key="service-key"),
        auth=AuthConfig(jwt_secret="test-secret"),
        server=ServerConfig(host="127.0.0.1", port=8000),
    )


@pytest.fixture
def applications():
    return InMemoryApplications()


@pytest.fixture
def jobs():
    return InMemoryJobs({"J1": {"title": "Backend Engineer", "postedBy": "E1"}})


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def workflow(config, applications, jobs, storage):
    return ApplicationWorkflow(
        applications=applications,
        jobs=jobs,
        storage=storage,
        validator=ResumeFileValidator(max_size_bytes=config.storage.max_resume_size_bytes),
        resume_folder=config.storage.resume_folder,
    )


@pytest.fixture
def auth_service(config):
    return AuthService(config)


@pytest.fixture
def client(config, auth_service, applications, workflow):
    container = ServiceContainer(
        config=config,
        auth_service=auth_service,
        application_service=applications,
        application_workflow=workflow,
    )
    return TestClient(create_app(container=container))


@pytest.fixture
def seeker():
    return {"id": "seeker-1", "role": "Job Seeker"}


@pytest.fixture
def employer():
    return {"id": "E1", "role": "Employer"}


@pytest.fixture
def valid_form():
    return {
        "name": "A",
        "email": "a@x.com",
        "coverLetter": "hi",
        "phone": "123",
        "address": "addr",
        "jobId": "J1",
    }


@pytest.fixture
def pdf_resume(tmp_path):
    path = tmp_path / "cv.pdf"
    path.write_bytes(b"%PDF-1.4 resume")
    return UploadedFile(path=str(path), filename="cv.pdf", content_type="application/pdf", size=15)


def bearer(auth_service: AuthService, user: Dict[str, str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {auth_service.generate_token(user['id'], user['role'])}"}
