import asyncio
import contextlib
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, WebSocket, WebSocketDisconnect, status
from fastapi.responses import HTMLResponse

from ..board import Board
from ..editor import EditorController
from ..errors import StoreConfigurationError, TaskNotFound, UnknownAction
from ..schemas.task import CardAction, EditorForm

router = APIRouter()


def get_board(request: Request) -> Board:
    return request.app.state.board


def _not_configured() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Task store not configured",
    )


def _get_editor(board: Board) -> EditorController:
    try:
        return board.require_editor()
    except StoreConfigurationError:
        raise _not_configured()


def _editor_response(board: Board, notice: Optional[str] = None) -> dict:
    return {"editor": board.render_editor(), "notice": notice}


def _apply_form(editor: EditorController, form: EditorForm) -> None:
    editor.update_form(
        title=form.title,
        description=form.description,
        link=form.link,
        date=form.date,
        assignee=form.assignee,
    )


@router.get("/", response_class=HTMLResponse)
def read_page(board: Board = Depends(get_board)):
    return board.render_page()


@router.get("/tasks/list", response_class=HTMLResponse)
def read_task_list(board: Board = Depends(get_board)):
    """Current card list, or the notice that replaces it."""
    return board.render_list()


@router.post("/actions/{action}/{task_id}")
async def run_card_action(
    action: str,
    task_id: str,
    payload: Optional[CardAction] = None,
    board: Board = Depends(get_board),
):
    """Dispatch a click on a card control (open, toggle, delete)."""
    confirmed = payload.confirmed if payload is not None else False
    try:
        await board.dispatch(action, task_id, confirmed=confirmed)
    except (UnknownAction, TaskNotFound) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreConfigurationError:
        raise _not_configured()
    return _editor_response(board)


@router.post("/editor/open")
def open_editor(board: Board = Depends(get_board)):
    _get_editor(board).open()
    return _editor_response(board)


@router.post("/editor/asap")
def toggle_asap(form: EditorForm, board: Board = Depends(get_board)):
    editor = _get_editor(board)
    if editor.is_open:
        _apply_form(editor, form)
        editor.toggle_asap(form.is_asap)
    return _editor_response(board)


@router.post("/editor/save")
async def save_editor(form: EditorForm, board: Board = Depends(get_board)):
    editor = _get_editor(board)
    if editor.is_open:
        _apply_form(editor, form)
        if form.is_asap != editor.form.is_asap:
            editor.toggle_asap(form.is_asap)
    outcome = await editor.submit()
    response = _editor_response(board, notice=editor.error)
    response["outcome"] = outcome.value
    return response


@router.post("/editor/close")
def close_editor(board: Board = Depends(get_board)):
    _get_editor(board).close()
    return _editor_response(board)


@router.websocket("/ws")
async def live_task_list(websocket: WebSocket):
    """Push the rendered list on connect and after every snapshot."""
    board: Board = websocket.app.state.board
    await websocket.accept()
    queue = board.channel.connect()

    async def pump() -> None:
        while True:
            await websocket.send_text(await queue.get())

    await websocket.send_text(board.render_list())
    sender = asyncio.create_task(pump())
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        sender.cancel()
        with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect):
            await sender
        board.channel.disconnect(queue)
