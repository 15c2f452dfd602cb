"""
Persistence module for saved translations.
"""

from .database import SQLiteGateway
from .exceptions import PersistenceError
from .gateway import InMemoryGateway, PersistenceGateway

__all__ = ['SQLiteGateway', 'PersistenceError', 'InMemoryGateway', 'PersistenceGateway']
