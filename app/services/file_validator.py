"""
Resume File Validator

Checks presence, declared MIME type and size of an uploaded resume
before anything is sent to storage.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from app.config import DEFAULT_ALLOWED_RESUME_TYPES
from app.utils.exceptions import ValidationError
from app.utils.logger import get_logger

logger = get_logger(__name__)

RESUME_FIELD = "resume"


@dataclass(frozen=True)
class UploadedFile:
    """A multipart file spooled to a local temp path."""
    path: str
    filename: str
    content_type: Optional[str]
    size: int


class ResumeFileValidator:
    """Validates the `resume` field of a submission. No content sniffing: the declared type is trusted."""

    def __init__(
        self,
        allowed_types: Iterable[str] = DEFAULT_ALLOWED_RESUME_TYPES,
        max_size_bytes: Optional[int] = None,
    ):
        self.allowed_types = frozenset(allowed_types)
        self.max_size_bytes = max_size_bytes

    def validate(self, files: Optional[Mapping[str, UploadedFile]]) -> UploadedFile:
        """
        Return the resume file handle unchanged, or raise ValidationError.

        Args:
            files: Uploaded file fields keyed by form field name

        Raises:
            ValidationError: No resume submitted, empty, too large or unsupported type
        """
        if not files or files.get(RESUME_FIELD) is None:
            logger.warning("[FileValidator] No resume file uploaded")
            raise ValidationError("Resume File Required!", "FileValidator")

        resume = files[RESUME_FIELD]
        if resume.size <= 0:
            logger.warning(f"[FileValidator] Empty resume file: {resume.filename}")
            raise ValidationError("Resume File Required!", "FileValidator")

        if resume.content_type not in self.allowed_types:
            logger.warning(f"[FileValidator] Invalid file type: {resume.content_type}")
            raise ValidationError(
                "Invalid file type. Please upload a PDF or image file.", "FileValidator"
            )

        if self.max_size_bytes is not None and resume.size > self.max_size_bytes:
            raise ValidationError(
                f"File size exceeds maximum of {self.max_size_bytes / 1024 / 1024:g}MB",
                "FileValidator",
            )

        return resume
