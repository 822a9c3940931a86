from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..board import Board, BoardStatus
from ..errors import DocumentNotFound, StoreWriteError, TaskNotFound
from ..presentation import display_date, is_urgent, today_iso
from ..repository import TaskRepository
from ..schemas.task import Task, TaskDraft, TaskResponse, TaskUpdate
from .board import get_board

router = APIRouter()


def get_repository(board: Board = Depends(get_board)) -> TaskRepository:
    if board.repository is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Task store not configured",
        )
    return board.repository


def _to_response(board: Board, task: Task) -> TaskResponse:
    return TaskResponse(
        **task.model_dump(),
        urgent=is_urgent(task, board.today()),
        display_date=display_date(task),
    )


def _find(board: Board, task_id: str) -> Task:
    try:
        return board.find(task_id)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail="Task not found")


def _write_failed(e: StoreWriteError) -> HTTPException:
    if isinstance(e, DocumentNotFound):
        return HTTPException(status_code=404, detail="Task not found")
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to save task")


@router.get("/tasks", response_model=List[TaskResponse])
def get_tasks(
    repository: TaskRepository = Depends(get_repository),
    board: Board = Depends(get_board),
):
    """All tasks in display order with their urgency flag."""
    if board.status == BoardStatus.ERROR:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Error loading tasks")
    return [_to_response(board, t) for t in board.tasks]


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task: TaskDraft,
    repository: TaskRepository = Depends(get_repository),
    board: Board = Depends(get_board),
):
    """Create a task; ASAP and undated tasks are dated today."""
    if task.is_asap or not task.date:
        task = task.model_copy(update={"date": today_iso(board.today())})
    try:
        task_id = await repository.create(task)
    except StoreWriteError as e:
        raise _write_failed(e)
    return _to_response(board, _find(board, task_id))


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    repository: TaskRepository = Depends(get_repository),
    board: Board = Depends(get_board),
):
    return _to_response(board, _find(board, task_id))


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    task_update: TaskUpdate,
    repository: TaskRepository = Depends(get_repository),
    board: Board = Depends(get_board),
):
    """Write only the fields present in the body.

    While the task stays ASAP its date is today, whatever the body says.
    """
    current = _find(board, task_id)
    fields = task_update.to_fields()
    if fields.get("isASAP", current.is_asap):
        fields["date"] = today_iso(board.today())
    try:
        await repository.update(task_id, fields)
    except StoreWriteError as e:
        raise _write_failed(e)
    return _to_response(board, _find(board, task_id))


@router.patch("/tasks/{task_id}/complete", response_model=TaskResponse)
async def toggle_task_complete(
    task_id: str,
    repository: TaskRepository = Depends(get_repository),
    board: Board = Depends(get_board),
):
    """Flip the completed flag."""
    task = _find(board, task_id)
    try:
        await repository.update(task_id, {"completed": not task.completed})
    except StoreWriteError as e:
        raise _write_failed(e)
    return _to_response(board, _find(board, task_id))


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    repository: TaskRepository = Depends(get_repository),
):
    try:
        await repository.delete(task_id)
    except StoreWriteError as e:
        raise _write_failed(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
