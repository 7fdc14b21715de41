"""
Wiring of the service's collaborators.

Clients for the cache and the document store are built once here and
passed down explicitly; tests hand in their own doubles instead.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from database.local import DocumentStore, get_document_store, init_db
from files_manager.adapters.cache import BaseCache, CacheFactory
from files_manager.adapters.queue import Lane, TaskQueue
from files_manager.adapters.storage import BlobStorage
from files_manager.db_layer import FileService, UserService
from files_manager.sessions import SessionStore
from files_manager.settings import Settings, get_settings
from files_manager.tasks import FileTaskProcessor, UserTaskProcessor, build_registry
from files_manager.utils.readiness import wait_for_dependency

logger = logging.getLogger(__name__)


@dataclass
class Core:
    settings: Settings
    store: DocumentStore
    cache: BaseCache
    sessions: SessionStore
    users: UserService
    files: FileService
    storage: BlobStorage
    queue: TaskQueue

    async def start(self) -> None:
        await asyncio.to_thread(init_db, self.store)
        await self.queue.start()

    async def stop(self) -> None:
        await self.queue.stop()
        await self.cache.close()
        await asyncio.to_thread(self.store.close)

    async def wait_until_ready(self) -> None:
        """Block until both the cache and the store answer.

        Raises:
            DependencyUnavailable: One of them stayed down for the whole retry budget
        """
        attempts = self.settings.readiness_attempts
        interval = self.settings.readiness_interval_seconds
        await wait_for_dependency("redis", self.cache.is_alive, attempts, interval)
        await wait_for_dependency("db", self.store_is_alive, attempts, interval)

    async def store_is_alive(self) -> bool:
        return await asyncio.to_thread(self.store.is_alive)


def build_core(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    cache: Optional[BaseCache] = None,
) -> Core:
    """Construct every collaborator for `settings`, reusing any passed in."""
    settings = settings or get_settings()
    store = store or get_document_store(
        deployment_mode=settings.deployment_mode,
        sqlite_path=settings.sqlite_path,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_database,
    )
    cache = cache or CacheFactory.get_cache(settings)

    sessions = SessionStore(cache, settings.session_ttl_seconds)
    users = UserService(store)
    files = FileService(store)
    storage = BlobStorage(settings.folder_path)

    registry = build_registry(
        UserTaskProcessor(users, sessions),
        FileTaskProcessor(files, storage),
    )
    queue = TaskQueue(
        registry,
        workers={Lane.USER: settings.user_lane_workers, Lane.FILE: settings.file_lane_workers},
    )
    logger.info(f"Core built for deployment mode {settings.deployment_mode}")

    return Core(
        settings=settings,
        store=store,
        cache=cache,
        sessions=sessions,
        users=users,
        files=files,
        storage=storage,
        queue=queue,
    )
