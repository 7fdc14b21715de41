"""
Database layer for files-manager.

Async services over the document store for user and file records. Store
calls are blocking and run on a worker thread.
"""

from .user_service import UserService, hash_password
from .file_service import FileService, to_public_file

__all__ = [
    'UserService', 'hash_password',
    'FileService', 'to_public_file',
]
