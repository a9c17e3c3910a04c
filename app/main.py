"""
Application entrypoint.

Loads configuration once, sets up logging and exposes the ASGI `app`
served by `backend_server.py`.
"""

from app.api.main import create_app
from app.config import get_config
from app.utils.logger import get_logger, setup_logging

config = get_config()
setup_logging(config)
logger = get_logger(__name__)

app = create_app(config=config)
