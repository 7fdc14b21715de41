"""
SQLite adapter for document-based operations.
Stores JSON documents in per-collection tables and exposes the same
find/insert/update contract as the MongoDB adapter.
"""

import sqlite3
import json
import logging
from typing import Dict, Any, List, Optional, Tuple
from bson import ObjectId
from .exceptions import DuplicateDocumentError
from .schemas import DOCUMENT_VALIDATORS, COLLECTIONS

logger = logging.getLogger(__name__)


class NoSQLAdapter:
    """Document store backed by SQLite JSON documents"""

    def __init__(self, db_path: str = "files_manager.db"):
        self.db_path = db_path

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with JSON support"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _table(self, collection: str) -> str:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        return f"{collection}_docs"

    def _validate_document(self, collection: str, document: Dict[str, Any]) -> None:
        """Validate document against schema"""
        if collection in DOCUMENT_VALIDATORS:
            try:
                DOCUMENT_VALIDATORS[collection](document)
            except Exception as e:
                logger.error(f"Document validation failed for {collection}: {e}")
                raise ValueError(f"Document validation failed: {e}")

    def _build_where(self, query: Optional[Dict[str, Any]]) -> Tuple[str, List[Any]]:
        """Translate an equality filter into a WHERE clause"""
        where_clauses = []
        params: List[Any] = []
        for key, value in (query or {}).items():
            if key == '_id':
                where_clauses.append("doc_id = ?")
                params.append(str(value))
            else:
                where_clauses.append("json_extract(document, ?) = ?")
                params.extend([f"$.{key}", value])
        if not where_clauses:
            return "", params
        return " WHERE " + " AND ".join(where_clauses), params

    def init_collections(self) -> None:
        """Initialize document collections (tables) and indexes"""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            for collection in COLLECTIONS:
                cursor.execute(f'''
                    CREATE TABLE IF NOT EXISTS {collection}_docs (
                        doc_id TEXT PRIMARY KEY,
                        document TEXT NOT NULL,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                ''')

            cursor.execute('''
                CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email
                ON users_docs(json_extract(document, '$.email'))
            ''')
            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_files_owner_parent
                ON files_docs(json_extract(document, '$.userId'), json_extract(document, '$.parentId'))
            ''')

            conn.commit()
            logger.info("Document collections initialized at %s", self.db_path)
        except Exception as e:
            logger.error(f"Error initializing collections: {e}")
            raise
        finally:
            conn.close()

    def is_alive(self) -> bool:
        try:
            conn = self._get_connection()
            try:
                conn.execute("SELECT 1")
            finally:
                conn.close()
            return True
        except sqlite3.Error as e:
            logger.warning(f"SQLite document store not reachable: {e}")
            return False

    def insert_one(self, collection: str, document: Dict[str, Any]) -> str:
        """Insert a document and return its identifier"""
        table = self._table(collection)
        document = dict(document)
        document.setdefault('_id', str(ObjectId()))
        self._validate_document(collection, document)

        conn = self._get_connection()
        try:
            conn.execute(
                f"INSERT INTO {table} (doc_id, document) VALUES (?, ?)",
                (document['_id'], json.dumps(document)),
            )
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise DuplicateDocumentError(collection, str(e)) from e
        finally:
            conn.close()

        logger.info(f"Created document in {collection} with ID: {document['_id']}")
        return document['_id']

    def find_one(self, collection: str, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Get the first document matching the filter"""
        documents = self.find_many(collection, query, skip=0, limit=1)
        return documents[0] if documents else None

    def find_many(
        self,
        collection: str,
        query: Dict[str, Any],
        skip: int = 0,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """Query documents with filters, in insertion order"""
        table = self._table(collection)
        where, params = self._build_where(query)

        conn = self._get_connection()
        try:
            cursor = conn.execute(
                f"SELECT document FROM {table}{where} ORDER BY created_at, rowid LIMIT ? OFFSET ?",
                params + [limit, skip],
            )
            return [json.loads(row['document']) for row in cursor.fetchall()]
        except Exception as e:
            logger.error(f"Error querying documents from {collection}: {e}")
            raise
        finally:
            conn.close()

    def update_one(self, collection: str, query: Dict[str, Any], patch: Dict[str, Any]) -> bool:
        """Merge `patch` into the first document matching the filter"""
        table = self._table(collection)
        document = self.find_one(collection, query)
        if document is None:
            logger.warning(f"No document found to update in {collection} for {query}")
            return False

        document.update(patch)
        self._validate_document(collection, document)

        conn = self._get_connection()
        try:
            cursor = conn.execute(
                f"UPDATE {table} SET document = ?, updated_at = CURRENT_TIMESTAMP WHERE doc_id = ?",
                (json.dumps(document), document['_id']),
            )
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.IntegrityError as e:
            raise DuplicateDocumentError(collection, str(e)) from e
        finally:
            conn.close()

    def count_documents(self, collection: str, query: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching query"""
        table = self._table(collection)
        where, params = self._build_where(query)

        conn = self._get_connection()
        try:
            row = conn.execute(f"SELECT COUNT(*) AS count FROM {table}{where}", params).fetchone()
            return row['count']
        finally:
            conn.close()

    def close(self) -> None:
        """Connections are per-operation; nothing to release"""
