"""
Job Lookup Service

Read-only access to the `jobs` collection. Jobs are owned by the job
posting feature; this service never mutates them.
"""

from typing import Any, Dict, Optional

from pymongo.database import Database

from app.db.mongo import doc_with_id, to_object_id
from app.utils.exceptions import NotFound
from app.utils.logger import get_logger

logger = get_logger(__name__)


class JobService:
    """Resolves job ids to job documents. No caching."""

    COLLECTION = "jobs"

    def __init__(self, db: Database):
        self.collection = db[self.COLLECTION]

    def find_by_id(self, job_id: Optional[str]) -> Dict[str, Any]:
        """
        Fetch a job by id.

        Raises:
            NotFound: If job_id is empty or no job matches
        """
        if not job_id or not str(job_id).strip():
            raise NotFound("Job not found!", "JobService")

        job = doc_with_id(self.collection.find_one({"_id": to_object_id(str(job_id).strip())}))
        if not job:
            logger.warning(f"[JobService] Job not found: {job_id}")
            raise NotFound("Job not found!", "JobService")
        return job
