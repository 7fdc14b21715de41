"""Task processors for the user and file lanes."""

from files_manager.adapters.queue import Lane, Registry
from files_manager.tasks.file_tasks import FileTaskProcessor
from files_manager.tasks.user_tasks import UserTaskProcessor


def build_registry(user_processor: UserTaskProcessor, file_processor: FileTaskProcessor) -> Registry:
    """Map each lane to its kind -> definition table."""
    return {
        Lane.USER: user_processor.definitions(),
        Lane.FILE: file_processor.definitions(),
    }


__all__ = ["FileTaskProcessor", "UserTaskProcessor", "build_registry"]
