"""
Memories auth core library: configuration, logging, persistence and
credential handling shared by the API.

Usage:
    from core.config import get_settings
    from core.db import db, get_db
    from core.models import User
    from core.repositories import UserRepository
    from core.logging import get_logger, configure_logging
"""

__version__ = "0.1.0"
