import enum
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Union

from pydantic import ValidationError

from .config import DEFAULT_ASSIGNEE
from .errors import StoreWriteError
from .presentation import today_iso
from .repository import TaskRepository
from .schemas.task import Task, TaskDraft, TaskUpdate

logger = logging.getLogger(__name__)

HEADING_NEW = "寺崎ひなの新しいタスク"
HEADING_EDIT = "寺崎ひなのタスク編集"
SAVE_FAILED_NOTICE = "Failed to save task. Check console."


@dataclass(frozen=True)
class Closed:
    pass


@dataclass(frozen=True)
class Creating:
    pass


@dataclass(frozen=True)
class Editing:
    task_id: str


EditorState = Union[Closed, Creating, Editing]


@dataclass
class FormState:
    title: str = ""
    description: str = ""
    link: str = ""
    date: str = ""
    date_disabled: bool = False
    is_asap: bool = False
    assignee: str = DEFAULT_ASSIGNEE


class SubmitOutcome(str, enum.Enum):
    SAVED = "saved"
    REFUSED = "refused"
    FAILED = "failed"


class EditorController:
    """State of the create/edit modal.

    ``state`` is one of ``Closed()``, ``Creating()`` or ``Editing(task_id)``.
    ``error`` holds the notice shown after a failed save and is cleared by
    ``open`` and ``close``.
    """

    def __init__(self, repository: TaskRepository, today: Callable[[], date] = date.today):
        self._repository = repository
        self._today = today
        self.state: EditorState = Closed()
        self.form = FormState()
        self.error: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return not isinstance(self.state, Closed)

    @property
    def heading(self) -> str:
        return HEADING_EDIT if isinstance(self.state, Editing) else HEADING_NEW

    def open(self, task: Optional[Task] = None) -> None:
        self.error = None
        if task is None:
            self.state = Creating()
            self.form = FormState(date=today_iso(self._today()))
            return

        self.state = Editing(task.id)
        self.form = FormState(
            title=task.title,
            description=task.description or "",
            link=task.link or "",
            assignee=task.assignee or DEFAULT_ASSIGNEE,
            is_asap=task.is_asap,
        )
        if task.is_asap:
            self.form.date_disabled = True
            self.form.date = ""
        else:
            self.form.date = task.date or ""

    def toggle_asap(self, checked: bool) -> None:
        self.form.is_asap = checked
        if checked:
            self.form.date_disabled = True
            self.form.date = ""
        else:
            self.form.date_disabled = False
            if not self.form.date:
                self.form.date = today_iso(self._today())

    def update_form(
        self,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        link: Optional[str] = None,
        date: Optional[str] = None,
        assignee: Optional[str] = None,
    ) -> None:
        """Copy values typed into the modal; a disabled date field is ignored."""
        if title is not None:
            self.form.title = title
        if description is not None:
            self.form.description = description
        if link is not None:
            self.form.link = link
        if date is not None and not self.form.date_disabled:
            self.form.date = date
        if assignee:
            self.form.assignee = assignee

    async def submit(self) -> SubmitOutcome:
        state = self.state
        title = self.form.title.strip()
        if isinstance(state, Closed) or not title:
            return SubmitOutcome.REFUSED

        today = today_iso(self._today())
        is_asap = self.form.is_asap
        fields = {
            "title": title,
            "description": self.form.description.strip(),
            "link": self.form.link.strip(),
            "date": today if is_asap else (self.form.date.strip() or today),
            "is_asap": is_asap,
            "assignee": self.form.assignee,
        }

        try:
            if isinstance(state, Editing):
                await self._repository.update(state.task_id, TaskUpdate(**fields).to_fields())
            else:
                await self._repository.create(TaskDraft(**fields))
        except ValidationError as e:
            logger.error("Error saving task: %s", e)
            self.error = SAVE_FAILED_NOTICE
            return SubmitOutcome.FAILED
        except StoreWriteError:
            self.error = SAVE_FAILED_NOTICE
            return SubmitOutcome.FAILED

        self.close()
        return SubmitOutcome.SAVED

    def close(self) -> None:
        self.state = Closed()
        self.form = FormState()
        self.error = None
