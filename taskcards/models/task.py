from sqlmodel import SQLModel, Field
from typing import Optional
from uuid import uuid4

# Document field name -> column attribute. Documents use the collection schema
# names (isASAP, createdAt); rows use snake_case.
DOCUMENT_FIELDS = {
    "title": "title",
    "description": "description",
    "link": "link",
    "date": "date",
    "isASAP": "is_asap",
    "assignee": "assignee",
    "completed": "completed",
    "createdAt": "created_at",
}


class TaskDocument(SQLModel, table=True):
    """One document of the ``tasks`` collection.

    ``id`` is generated by the store on insert and never supplied by callers.
    ``date`` is a bare calendar date string (YYYY-MM-DD) and ``created_at`` an
    ISO-8601 timestamp string, both stored as written.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    title: str
    description: str = Field(default="")
    link: str = Field(default="")
    date: Optional[str] = Field(default=None, index=True)
    is_asap: bool = Field(default=False)
    assignee: Optional[str] = None
    completed: bool = Field(default=False)
    created_at: Optional[str] = None

    def to_document(self) -> dict:
        return {name: getattr(self, attr) for name, attr in DOCUMENT_FIELDS.items()}
