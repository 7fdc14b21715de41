"""
MongoDB adapter for document-based operations.
Provides the same interface as NoSQLAdapter but uses native MongoDB collections.
"""

import logging
from typing import Dict, Any, List, Optional
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, ASCENDING
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError
from .exceptions import DuplicateDocumentError
from .schemas import DOCUMENT_VALIDATORS, COLLECTIONS

logger = logging.getLogger(__name__)


class MongoAdapter:
    """MongoDB adapter for document-based database operations"""

    def __init__(self, host: str = "localhost", port: int = 27017, database: str = "files_manager",
                 client: Optional[MongoClient] = None):
        self.client = client or MongoClient(host=host, port=port, serverSelectionTimeoutMS=2000)
        self.db = self.client[database]
        logger.info(f"MongoDB adapter configured for {host}:{port}/{database}")

    def _collection(self, collection: str):
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        return self.db[collection]

    def _validate_document(self, collection: str, document: Dict[str, Any]) -> None:
        """Validate document against schema"""
        if collection in DOCUMENT_VALIDATORS:
            try:
                DOCUMENT_VALIDATORS[collection](document)
            except Exception as e:
                logger.error(f"Document validation failed for {collection}: {e}")
                raise ValueError(f"Document validation failed: {e}")

    @staticmethod
    def _to_mongo_query(query: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Convert string `_id` values to ObjectId"""
        mongo_query = dict(query or {})
        if '_id' in mongo_query:
            try:
                mongo_query['_id'] = ObjectId(str(mongo_query['_id']))
            except InvalidId:
                # Malformed ids can never match a stored document
                mongo_query['_id'] = None
        return mongo_query

    @staticmethod
    def _from_mongo(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if document is not None and '_id' in document:
            document['_id'] = str(document['_id'])
        return document

    def init_collections(self) -> None:
        """Initialize MongoDB indexes"""
        try:
            self.db['users'].create_index([("email", ASCENDING)], unique=True)
            self.db['files'].create_index([("userId", ASCENDING), ("parentId", ASCENDING)])
            logger.info("MongoDB collections and indexes initialized successfully")
        except Exception as e:
            logger.error(f"Error initializing MongoDB collections: {e}")
            raise

    def is_alive(self) -> bool:
        try:
            self.client.admin.command('ping')
            return True
        except (ConnectionFailure, PyMongoError) as e:
            logger.warning(f"MongoDB not reachable: {e}")
            return False

    def insert_one(self, collection: str, document: Dict[str, Any]) -> str:
        """Insert a document and return its identifier"""
        document = dict(document)
        document.setdefault('_id', str(ObjectId()))
        self._validate_document(collection, document)

        stored = dict(document, _id=ObjectId(document['_id']))
        try:
            result = self._collection(collection).insert_one(stored)
        except DuplicateKeyError as e:
            raise DuplicateDocumentError(collection, str(e)) from e

        doc_id = str(result.inserted_id)
        logger.info(f"Created document in {collection} with ID: {doc_id}")
        return doc_id

    def find_one(self, collection: str, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Get the first document matching the filter"""
        document = self._collection(collection).find_one(self._to_mongo_query(query))
        return self._from_mongo(document)

    def find_many(
        self,
        collection: str,
        query: Dict[str, Any],
        skip: int = 0,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """Query documents with filters and pagination"""
        cursor = (
            self._collection(collection)
            .find(self._to_mongo_query(query))
            .sort('_id', ASCENDING)
            .skip(skip)
            .limit(limit)
        )
        return [self._from_mongo(doc) for doc in cursor]

    def update_one(self, collection: str, query: Dict[str, Any], patch: Dict[str, Any]) -> bool:
        """Apply `patch` to the first document matching the filter"""
        result = self._collection(collection).update_one(self._to_mongo_query(query), {'$set': patch})
        if result.matched_count == 0:
            logger.warning(f"No document found to update in {collection} for {query}")
        return result.matched_count > 0

    def count_documents(self, collection: str, query: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching query"""
        return self._collection(collection).count_documents(self._to_mongo_query(query))

    def close(self) -> None:
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")
