"""
Configuration package for the complaint lifecycle engine.

This package contains the environment settings, database session
management and logging configuration used by every layer.
"""

from complaint_engine.config.settings import Settings, get_settings, settings
from complaint_engine.config.database import get_db_session, get_engine, init_db

__all__ = ['Settings', 'get_settings', 'settings', 'get_db_session', 'get_engine', 'init_db']
