import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from pydantic import ValidationError

from .errors import StoreWriteError
from .schemas.task import Task, TaskDraft
from .store import DocumentSnapshot, TaskStore, Watch

logger = logging.getLogger(__name__)

ORDER_FIELD = "date"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TaskRepository:
    """Task-shaped view of the store.

    Every write is a single-document operation. Failures are logged here and
    re-raised as ``StoreWriteError``; callers decide what the user sees.
    """

    def __init__(self, store: TaskStore, clock: Callable[[], datetime] = utc_now):
        self._store = store
        self._clock = clock

    async def subscribe(
        self,
        on_snapshot: Callable[[List[Task]], None],
        on_error: Callable[[Exception], None],
    ) -> Watch:
        """Live query over all tasks ordered by date ascending.

        ``on_snapshot`` gets the whole result set on the initial load and on
        every change afterwards.
        """

        def handle(snapshot: List[DocumentSnapshot]) -> None:
            on_snapshot(self._to_tasks(snapshot))

        def handle_error(err: Exception) -> None:
            logger.error("Error getting tasks: %s", err)
            on_error(err)

        return await self._store.watch(ORDER_FIELD, handle, handle_error)

    @staticmethod
    def _to_tasks(snapshot: List[DocumentSnapshot]) -> List[Task]:
        tasks = []
        for doc in snapshot:
            try:
                tasks.append(Task.from_document(doc.id, doc.data))
            except ValidationError as e:
                logger.warning("Skipping malformed task document id=%s: %s", doc.id, e)
        return tasks

    async def create(self, draft: TaskDraft) -> str:
        data = draft.to_fields()
        data["completed"] = False
        data["createdAt"] = self._clock().isoformat()
        try:
            task_id = await self._store.add_document(data)
        except StoreWriteError as e:
            logger.error("Error creating task: %s", e)
            raise
        logger.info("Created task id=%s", task_id)
        return task_id

    async def update(self, task_id: str, fields: Dict[str, Any]) -> None:
        try:
            await self._store.update_document(task_id, fields)
        except StoreWriteError as e:
            logger.error("Error updating task id=%s: %s", task_id, e)
            raise

    async def delete(self, task_id: str) -> None:
        try:
            await self._store.delete_document(task_id)
        except StoreWriteError as e:
            logger.error("Error deleting task id=%s: %s", task_id, e)
            raise
        logger.info("Deleted task id=%s", task_id)
