"""
In-process task queue with two independent lanes.

Each lane is a FIFO ``asyncio.Queue`` drained by a small pool of worker
coroutines. Submitting returns a :class:`TaskHandle` immediately; the
worker that picks the task up writes exactly one terminal outcome to the
handle, which callers may await any number of times.

Within a lane tasks are dispatched in submission order, but with more than
one worker a later task can finish first. There is no ordering between
lanes and no cancellation: once submitted, a task runs to completion.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Type, Union

import pydantic

from files_manager.errors import (
    FilesManagerError,
    InternalError,
    UnknownTaskKind,
    ValidationError,
)

logger = logging.getLogger(__name__)


class Lane(str, Enum):
    USER = "user"
    FILE = "file"


class TaskState(str, Enum):
    QUEUED = "queued"
    ACTIVE = "active"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATES = (TaskState.SUCCEEDED, TaskState.FAILED)


@dataclass
class TaskDefinition:
    """How one task kind is parsed and processed."""
    payload_model: Type[pydantic.BaseModel]
    handler: Callable[[Any], Awaitable[Any]]


Registry = Mapping[Lane, Mapping[str, TaskDefinition]]


@dataclass
class Task:
    lane: Lane
    kind: str
    payload: Dict[str, Any]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: TaskState = TaskState.QUEUED


class TaskHandle:
    """Single-resolution view of a submitted task's outcome."""

    def __init__(self, task: Task, future: asyncio.Future):
        self.task = task
        self._future = future
        # Outcomes nobody awaits are already logged by the worker
        self._future.add_done_callback(_consume_outcome)

    @property
    def id(self) -> str:
        return self.task.id

    @property
    def state(self) -> TaskState:
        return self.task.state

    def done(self) -> bool:
        return self.task.state in TERMINAL_STATES

    async def wait(self) -> Any:
        """Return the task's value or raise its error.

        Abandoning the wait (e.g. via ``asyncio.wait_for``) does not affect
        the task itself.
        """
        return await asyncio.shield(self._future)

    def __await__(self):
        return self.wait().__await__()

    def _start(self) -> None:
        if self.task.state is not TaskState.QUEUED:
            raise RuntimeError(f"Task {self.id} cannot start from state {self.task.state.value}")
        self.task.state = TaskState.ACTIVE

    def _succeed(self, value: Any) -> None:
        self._finish(TaskState.SUCCEEDED)
        self._future.set_result(value)

    def _fail(self, error: FilesManagerError) -> None:
        self._finish(TaskState.FAILED)
        self._future.set_exception(error)

    def _finish(self, state: TaskState) -> None:
        if self.done():
            raise RuntimeError(f"Task {self.id} already reached {self.task.state.value}")
        self.task.state = state


def _consume_outcome(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()


class TaskQueue:
    """Handles the user and file lanes and their workers"""

    def __init__(self, registry: Registry, workers: Optional[Mapping[Lane, int]] = None):
        self.registry = registry
        workers = workers or {}
        self.workers = {lane: max(1, workers.get(lane, 1)) for lane in Lane}
        self._lanes: Dict[Lane, asyncio.Queue] = {}
        self._worker_tasks: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._worker_tasks)

    async def start(self) -> None:
        """Create the lanes and spawn their workers on the running loop."""
        if self.running:
            return
        for lane in Lane:
            self._lanes[lane] = asyncio.Queue()
            for index in range(self.workers[lane]):
                self._worker_tasks.append(
                    asyncio.create_task(self._work(lane), name=f"{lane.value}-worker-{index}")
                )
        logger.info("TaskQueue started with workers %s", {lane.value: n for lane, n in self.workers.items()})

    async def stop(self) -> None:
        """Let already-submitted tasks finish, then stop the workers."""
        if not self.running:
            return
        for queue in self._lanes.values():
            await queue.join()
        for worker in self._worker_tasks:
            worker.cancel()
        await asyncio.gather(*self._worker_tasks, return_exceptions=True)
        self._worker_tasks.clear()
        self._lanes.clear()
        logger.info("TaskQueue stopped")

    async def __aenter__(self) -> "TaskQueue":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def submit(
        self,
        lane: Union[Lane, str],
        kind: str,
        payload: Union[Mapping[str, Any], pydantic.BaseModel, None] = None,
    ) -> TaskHandle:
        """Enqueue a task and return its handle without waiting for it."""
        if not self.running:
            raise RuntimeError("TaskQueue is not running")
        lane = Lane(lane)
        if isinstance(payload, pydantic.BaseModel):
            payload = payload.model_dump()

        task = Task(lane=lane, kind=kind, payload=dict(payload or {}))
        handle = TaskHandle(task, asyncio.get_running_loop().create_future())
        self._lanes[lane].put_nowait(handle)
        logger.info("Submitted task %s (%s/%s)", task.id, lane.value, kind)
        return handle

    def pending(self, lane: Union[Lane, str]) -> int:
        """Tasks waiting in `lane` that no worker has picked up yet."""
        queue = self._lanes.get(Lane(lane))
        return queue.qsize() if queue else 0

    async def _work(self, lane: Lane) -> None:
        queue = self._lanes[lane]
        while True:
            handle = await queue.get()
            try:
                await self._execute(handle)
            finally:
                queue.task_done()

    async def _execute(self, handle: TaskHandle) -> None:
        task = handle.task
        handle._start()
        logger.info("Task %s (%s/%s) started", task.id, task.lane.value, task.kind)
        try:
            definition = self.registry.get(task.lane, {}).get(task.kind)
            if definition is None:
                raise UnknownTaskKind(f"Unknown task kind '{task.kind}' for lane '{task.lane.value}'")
            try:
                payload = definition.payload_model.model_validate({**task.payload, "kind": task.kind})
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid payload for {task.kind}: {e.error_count()} error(s)") from e
            value = await definition.handler(payload)
        except FilesManagerError as e:
            logger.info("Task %s (%s/%s) failed: %s", task.id, task.lane.value, task.kind, e.message)
            handle._fail(e)
        except Exception:
            logger.exception("Task %s (%s/%s) crashed", task.id, task.lane.value, task.kind)
            handle._fail(InternalError())
        else:
            logger.info("Task %s (%s/%s) succeeded", task.id, task.lane.value, task.kind)
            handle._succeed(value)
        finally:
            if not handle.done():
                # Worker cancelled mid-task; the outcome still has to be written once
                handle._fail(InternalError("Task interrupted"))
