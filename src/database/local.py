import logging
from typing import Optional, Union
from .nosql_adapter import NoSQLAdapter
from .mongo_adapter import MongoAdapter

logger = logging.getLogger(__name__)

DocumentStore = Union[NoSQLAdapter, MongoAdapter]


def get_document_store(
    deployment_mode: str = "local-dev",
    sqlite_path: str = "files_manager.db",
    host: Optional[str] = None,
    port: Optional[int] = None,
    database: str = "files_manager",
) -> DocumentStore:
    """Build the document store for the deployment mode"""
    if deployment_mode == "local-dev":
        logger.info("Using SQLite document store at %s", sqlite_path)
        return NoSQLAdapter(sqlite_path)

    logger.info("Using MongoDB document store at %s:%s/%s", host, port, database)
    return MongoAdapter(host=host or "localhost", port=port or 27017, database=database)


def init_db(store: DocumentStore) -> None:
    """Create collections and indexes; safe to call repeatedly."""
    store.init_collections()
