"""
Job application Pydantic schemas.
Field names follow the portal's JSON contract (camelCase).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ActorReference(BaseModel):
    user: str
    role: str = Field(..., json_schema_extra={"example": "Job Seeker"})


class ResumeInfo(BaseModel):
    public_id: str
    url: str


class ApplicationResponse(BaseModel):
    id: str
    name: str
    email: str
    coverLetter: str
    phone: str
    address: str
    applicantID: ActorReference
    employerID: ActorReference
    resume: ResumeInfo
    createdAt: Optional[datetime] = None


class SubmitApplicationResponse(BaseModel):
    success: bool = True
    message: str = "Application Submitted!"
    application: ApplicationResponse


class ApplicationListResponse(BaseModel):
    success: bool = True
    applications: List[ApplicationResponse] = []


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


__all__ = [
    "ActorReference",
    "ResumeInfo",
    "ApplicationResponse",
    "SubmitApplicationResponse",
    "ApplicationListResponse",
    "MessageResponse",
    "ErrorResponse",
]
