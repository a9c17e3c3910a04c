"""
Application Repository

Persists job applications in the `applications` collection. Each record
embeds two actor references (applicant and employer) and the stored
resume by value.
"""

from typing import Any, Dict, List, Optional

from pymongo import ASCENDING
from pymongo.database import Database

from app.db.mongo import doc_with_id, to_object_id
from app.utils.datetime_utils import get_now_utc
from app.utils.exceptions import NotFound
from app.utils.logger import get_logger

logger = get_logger(__name__)

JOB_SEEKER_ROLE = "Job Seeker"
EMPLOYER_ROLE = "Employer"


def actor_reference(user_id: Any, role: str) -> Dict[str, str]:
    return {"user": str(user_id), "role": role}


class ApplicationService:
    """CRUD-minus-update for application records. Duplicates are not rejected."""

    COLLECTION = "applications"

    def __init__(self, db: Database):
        self.collection = db[self.COLLECTION]

    def ensure_indexes(self) -> None:
        self.collection.create_index([("applicantID.user", ASCENDING)])
        self.collection.create_index([("employerID.user", ASCENDING)])

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new application and return it with `id` and `createdAt` set."""
        doc = dict(fields)
        doc["createdAt"] = get_now_utc()
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"[ApplicationService] Application {result.inserted_id} created")
        return doc_with_id(doc)

    def find_by_id(self, application_id: str) -> Optional[Dict[str, Any]]:
        return doc_with_id(self.collection.find_one({"_id": to_object_id(application_id)}))

    def find_by_applicant(self, user_id: Any) -> List[Dict[str, Any]]:
        cursor = self.collection.find({"applicantID.user": str(user_id)})
        return [doc_with_id(doc) for doc in cursor]

    def find_by_employer(self, user_id: Any) -> List[Dict[str, Any]]:
        cursor = self.collection.find({"employerID.user": str(user_id)})
        return [doc_with_id(doc) for doc in cursor]

    def delete_by_id(self, application_id: str) -> None:
        """
        Permanently remove an application.

        Raises:
            NotFound: If no application matches
        """
        result = self.collection.delete_one({"_id": to_object_id(application_id)})
        if result.deleted_count == 0:
            raise NotFound("Application not found!", "ApplicationService")
        logger.info(f"[ApplicationService] Application {application_id} deleted")
