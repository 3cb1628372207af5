"""
Utility modules for the AgriRisk engine
"""

from .database import DatabaseConnection, get_db_connection
from .logger import get_logger, setup_logging

__all__ = [
    'DatabaseConnection',
    'get_db_connection',
    'get_logger',
    'setup_logging'
]
