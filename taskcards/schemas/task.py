from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, Optional

from ..config import DEFAULT_ASSIGNEE

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


def _require_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("title must not be empty")
    return value


class Task(BaseModel):
    """A task as delivered by the live query.

    Field aliases are the collection schema names; snake_case names work too.
    """
    id: str
    title: str
    description: Optional[str] = None
    link: Optional[str] = None
    date: Optional[str] = None
    is_asap: bool = Field(default=False, alias="isASAP")
    assignee: Optional[str] = None
    completed: bool = False
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Task":
        return cls(id=doc_id, **data)


class TaskDraft(BaseModel):
    """Fields of a task about to be created."""
    title: str
    description: str = ""
    link: str = ""
    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)
    is_asap: bool = Field(default=False, alias="isASAP")
    assignee: str = DEFAULT_ASSIGNEE

    class Config:
        populate_by_name = True

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        return _require_title(value)

    @field_validator("date", mode="before")
    @classmethod
    def blank_date(cls, value: Any) -> Any:
        return value or None

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class TaskUpdate(BaseModel):
    """Partial update; only fields that were set are written."""
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)
    is_asap: Optional[bool] = Field(default=None, alias="isASAP")
    assignee: Optional[str] = None
    completed: Optional[bool] = None

    class Config:
        populate_by_name = True

    @field_validator("title")
    @classmethod
    def check_title(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _require_title(value)

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class TaskResponse(Task):
    """Task response schema for API responses."""
    urgent: bool = False
    display_date: str = Field(default="", alias="displayDate")


class EditorForm(BaseModel):
    """Editor modal fields as posted by the page script."""
    title: str = ""
    description: str = ""
    link: str = ""
    date: str = ""
    is_asap: bool = Field(default=False, alias="isASAP")
    assignee: str = ""

    class Config:
        populate_by_name = True


class CardAction(BaseModel):
    confirmed: bool = False
