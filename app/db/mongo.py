"""
MongoDB database connection and helpers.
"""

from typing import Any, Dict, Optional
from pymongo import MongoClient
from pymongo.database import Database
from bson import ObjectId

from app.config import Config


def create_mongo_client(config: Config) -> MongoClient:
    """Create the process-wide MongoDB client. Every operation is bounded by timeoutMS."""
    return MongoClient(
        config.mongo.uri,
        serverSelectionTimeoutMS=5000,
        timeoutMS=config.mongo.timeout_ms,
    )


def get_database(client: MongoClient, config: Config) -> Database:
    """Get the portal database. Uses MONGODB_DB_NAME if set, else 'job_portal'."""
    db_name = getattr(config.mongo, "db_name", None) or "job_portal"
    return client.get_database(db_name)


def doc_with_id(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Convert MongoDB document for API: add 'id' from '_id' and remove '_id'.
    Returns None if doc is None.
    """
    if doc is None:
        return None
    d = dict(doc)
    if "_id" in d:
        d["id"] = str(d["_id"])
        del d["_id"]
    return d


def to_object_id(id_val: Any):
    """Convert string id to ObjectId if it's a valid 24-char hex; else return as-is."""
    if id_val is None:
        return None
    if isinstance(id_val, ObjectId):
        return id_val
    s = str(id_val)
    if ObjectId.is_valid(s) and len(s) == 24:
        return ObjectId(s)
    return id_val
