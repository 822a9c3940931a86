import enum
import logging
from datetime import date
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from .config import ASSIGNEES
from .editor import EditorController
from .errors import StoreConfigurationError, StoreWriteError, TaskNotFound, UnknownAction
from .live import LiveChannel
from .presentation import format_header_date, order
from .repository import TaskRepository
from .schemas.task import Task
from .store import TaskStore, Watch
from .views import (
    NOTICE_LOAD_ERROR,
    NOTICE_NOT_CONFIGURED,
    build_cards,
    render_editor,
    render_notice,
    render_page,
    render_task_list,
)

logger = logging.getLogger(__name__)


class BoardStatus(str, enum.Enum):
    NOT_CONFIGURED = "not_configured"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class Board:
    """One client session of the task board.

    Holds the live subscription, the last ordered snapshot and the editor.
    All state changes happen on the event loop, either in the snapshot
    callbacks or in user-initiated actions.
    """

    def __init__(
        self,
        repository: Optional[TaskRepository],
        *,
        store: Optional[TaskStore] = None,
        channel: Optional[LiveChannel] = None,
        today: Callable[[], date] = date.today,
        assignees: Sequence[str] = ASSIGNEES,
    ):
        self.repository = repository
        self.store = store
        self.channel = channel or LiveChannel()
        self.assignees = list(assignees)
        self.today = today
        self._watch: Optional[Watch] = None
        self.tasks: List[Task] = []
        self.status = BoardStatus.NOT_CONFIGURED if repository is None else BoardStatus.LOADING
        self.editor = EditorController(repository, today) if repository is not None else None
        self._actions: Dict[str, Callable[[Task, bool], Awaitable[None]]] = {
            "open": self._open,
            "toggle": self._toggle,
            "delete": self._delete,
        }

    @property
    def configured(self) -> bool:
        return self.repository is not None

    # ---- subscription ----

    async def start(self) -> None:
        if self.repository is None:
            logger.warning("Task store not configured; no subscription opened")
            return
        self._watch = await self.repository.subscribe(self._on_snapshot, self._on_error)

    def stop(self) -> None:
        if self._watch is not None:
            self._watch.close()
            self._watch = None
        if self.store is not None:
            self.store.close()

    def _on_snapshot(self, tasks: List[Task]) -> None:
        self.tasks = order(tasks)
        self.status = BoardStatus.READY
        logger.debug("Snapshot received tasks=%d", len(self.tasks))
        self.channel.publish(self.render_list())

    def _on_error(self, err: Exception) -> None:
        self.status = BoardStatus.ERROR
        self.channel.publish(self.render_list())

    # ---- actions ----

    def find(self, task_id: str) -> Task:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise TaskNotFound(task_id)

    def require_editor(self) -> EditorController:
        if self.editor is None:
            raise StoreConfigurationError("Task store not configured")
        return self.editor

    async def dispatch(self, action: str, task_id: str, confirmed: bool = False) -> None:
        """Run a card action against the task with ``task_id``.

        ``delete`` only writes when the user confirmed it.
        """
        handler = self._actions.get(action)
        if handler is None:
            raise UnknownAction(action)
        if self.repository is None:
            raise StoreConfigurationError("Task store not configured")
        await handler(self.find(task_id), confirmed)

    async def _open(self, task: Task, confirmed: bool) -> None:
        self.require_editor().open(task)

    async def _toggle(self, task: Task, confirmed: bool) -> None:
        try:
            await self.repository.update(task.id, {"completed": not task.completed})
        except StoreWriteError:
            # logged by the repository; not shown to the user
            return

    async def _delete(self, task: Task, confirmed: bool) -> None:
        if not confirmed:
            logger.info("Delete of task id=%s not confirmed", task.id)
            return
        try:
            await self.repository.delete(task.id)
        except StoreWriteError:
            # logged by the repository; not shown to the user
            return

    # ---- rendering ----

    def render_list(self) -> str:
        if self.status == BoardStatus.NOT_CONFIGURED:
            return render_notice(NOTICE_NOT_CONFIGURED)
        if self.status == BoardStatus.ERROR:
            return render_notice(NOTICE_LOAD_ERROR)
        return render_task_list(build_cards(self.tasks, self.today()))

    def render_editor(self) -> str:
        if self.editor is None:
            return ""
        return render_editor(self.editor, self.assignees)

    def render_page(self) -> str:
        return render_page(format_header_date(self.today()), self.render_list(), self.render_editor())


def open_board(database_url: str, **kwargs) -> Board:
    """Connect to the store; a store that cannot be initialized gives an unconfigured board."""
    try:
        store = TaskStore.from_url(database_url)
    except StoreConfigurationError as e:
        logger.error("Task store initialization failed. Check DATABASE_URL: %s", e)
        return Board(None, **kwargs)
    return Board(TaskRepository(store), store=store, **kwargs)
