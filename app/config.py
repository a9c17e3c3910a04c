"""
Configuration Management

Centralized configuration management using environment variables
with proper validation and type safety.
"""

import os
from typing import Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env in backend directory (resolve to absolute path)
_backend_root = Path(__file__).resolve().parent.parent
_env_path = _backend_root / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=str(_env_path))
else:
    # Also load from current working directory so "python backend_server.py" picks up .env
    load_dotenv()


DEFAULT_ALLOWED_RESUME_TYPES = (
    "image/png",
    "image/jpeg",
    "image/webp",
    "application/pdf",
)


@dataclass
class MongoConfig:
    """MongoDB configuration"""
    uri: str
    db_name: Optional[str] = None  # Database name; if unset, uses 'job_portal'
    timeout_ms: int = 10000


@dataclass
class StorageConfig:
    """Supabase Storage configuration for uploaded resumes"""
    url: str
    service_key: str
    resume_bucket: str = "resumes"
    resume_folder: str = "job_applications"
    upload_timeout_seconds: float = 30.0
    max_resume_size_bytes: int = 5 * 1024 * 1024  # 5MB
    allowed_resume_types: Tuple[str, ...] = field(default=DEFAULT_ALLOWED_RESUME_TYPES)


@dataclass
class AuthConfig:
    """JWT verification configuration (tokens are issued by the auth service)"""
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    cookie_name: str = "token"


@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str
    port: int
    frontend_url: str = ""
    submit_rate_limit: str = "20/minute"  # slowapi limit string for POST /api/applications


@dataclass
class Config:
    """Main application configuration"""

    # MongoDB configuration
    mongo: MongoConfig

    # Resume object storage
    storage: StorageConfig

    # Token verification
    auth: AuthConfig

    # Server configuration
    server: ServerConfig

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Configured Config instance

        Raises:
            ValueError: If required environment variables are missing
        """
        # Validate MongoDB URI
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")

        # Validate Supabase storage credentials
        supabase_url = os.getenv("SUPABASE_URL")
        supabase_key = os.getenv("SUPABASE_SERVICE_KEY")
        if not supabase_url:
            raise ValueError("SUPABASE_URL environment variable is required")
        if not supabase_key:
            raise ValueError("SUPABASE_SERVICE_KEY environment variable is required")

        jwt_secret = os.getenv("JWT_SECRET_KEY")
        if not jwt_secret or not jwt_secret.strip():
            raise ValueError(
                "JWT_SECRET_KEY must be set in environment. "
                "Use the same secret as the service issuing login tokens."
            )

        return cls(
            mongo=MongoConfig(
                uri=mongodb_uri,
                db_name=os.getenv("MONGODB_DB_NAME") or None,
                timeout_ms=int(os.getenv("MONGODB_TIMEOUT_MS", "10000")),
            ),
            storage=StorageConfig(
                url=supabase_url,
                service_key=supabase_key,
                resume_bucket=os.getenv("SUPABASE_RESUME_BUCKET", "resumes"),
                resume_folder=os.getenv("RESUME_FOLDER", "job_applications"),
                upload_timeout_seconds=float(os.getenv("UPLOAD_TIMEOUT_SECONDS", "30")),
                max_resume_size_bytes=int(os.getenv("MAX_RESUME_SIZE_BYTES", str(5 * 1024 * 1024))),
            ),
            auth=AuthConfig(
                jwt_secret=jwt_secret,
                jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
                cookie_name=os.getenv("AUTH_COOKIE_NAME", "token"),
            ),
            server=ServerConfig(
                host=os.getenv("SERVER_HOST", "0.0.0.0"),
                port=int(os.getenv("SERVER_PORT", "8000")),
                frontend_url=os.getenv("FRONTEND_URL", ""),
                submit_rate_limit=os.getenv("SUBMIT_RATE_LIMIT", "20/minute"),
            ),
        )


def get_config() -> Config:
    """
    Get configuration from environment variables.

    Returns:
        Configuration instance
    """
    return Config.from_env()
