"""
Service container.

Built once at process startup from a single Config and stored on
`app.state.container`; closed at shutdown. Request handlers reach
services through the dependencies in `app.utils.auth_dependencies`
and `app.api.applications`.
"""

from dataclasses import dataclass
from typing import Any, Optional

from app.config import Config
from app.db.mongo import create_mongo_client, get_database
from app.db.supabase import create_supabase_client
from app.services.application_service import ApplicationService
from app.services.application_workflow import ApplicationWorkflow
from app.services.auth_service import AuthService
from app.services.file_validator import ResumeFileValidator
from app.services.job_service import JobService
from app.services.resume_storage_service import ResumeStorageService
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    config: Config
    auth_service: AuthService
    application_service: ApplicationService
    application_workflow: ApplicationWorkflow
    database: Optional[Any] = None
    mongo_client: Optional[Any] = None

    def close(self) -> None:
        if self.mongo_client is not None:
            self.mongo_client.close()
            logger.info("[Container] MongoDB client closed")


def build_container(config: Config) -> ServiceContainer:
    """Create every collaborator from one configuration."""
    mongo_client = create_mongo_client(config)
    db = get_database(mongo_client, config)
    supabase = create_supabase_client(config)

    application_service = ApplicationService(db)
    workflow = ApplicationWorkflow(
        applications=application_service,
        jobs=JobService(db),
        storage=ResumeStorageService(config, supabase),
        validator=ResumeFileValidator(
            allowed_types=config.storage.allowed_resume_types,
            max_size_bytes=config.storage.max_resume_size_bytes,
        ),
        resume_folder=config.storage.resume_folder,
    )
    logger.info(f"[Container] Services ready (database: {db.name}, bucket: {config.storage.resume_bucket})")
    return ServiceContainer(
        config=config,
        auth_service=AuthService(config),
        application_service=application_service,
        application_workflow=workflow,
        database=db,
        mongo_client=mongo_client,
    )
