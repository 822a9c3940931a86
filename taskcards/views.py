"""HTML rendering of the task board.

Every value that came from a user passes through ``_e`` before it is placed
in markup. Actionable elements carry ``data-action`` and ``data-task-id``;
the page script dispatches the innermost one only, so a click on a card's
toggle, link or delete control never also opens the card.
"""
from dataclasses import dataclass
from datetime import date
from html import escape
from typing import Iterable, List, Optional, Sequence

from .editor import EditorController
from .presentation import display_date, is_urgent
from .schemas.task import Task

URGENT_MARK = "⚠️"
LINK_LABEL = "リンクを開く"
DELETE_CONFIRM = "ひなさん本当に消しちゃうよ？"
DEFAULT_BADGE = "Hina"

NOTICE_NOT_CONFIGURED = "not_configured"
NOTICE_LOAD_ERROR = "load_error"

_NOTICES = {
    NOTICE_NOT_CONFIGURED: (
        "notice",
        "Task store not configured.<br>Please check DATABASE_URL",
    ),
    NOTICE_LOAD_ERROR: ("notice notice-error", "Error loading tasks."),
}


def _e(value: Optional[str]) -> str:
    """Escape &, <, >, " and ' for text and attribute positions."""
    return escape(value or "", quote=True)


@dataclass(frozen=True)
class CardView:
    task_id: str
    title: str
    description: str
    link: str
    date_label: str
    urgent: bool
    completed: bool
    assignee: str

    @property
    def assignee_class(self) -> str:
        return "hina" if self.assignee.lower() == "hina" else "togawa"

    @property
    def css_class(self) -> str:
        classes = ["task-card"]
        if self.completed:
            classes.append("completed")
        if self.urgent:
            classes.append("urgent")
        return " ".join(classes)


def build_card(task: Task, today: date) -> CardView:
    return CardView(
        task_id=task.id,
        title=task.title,
        description=task.description or "",
        link=task.link or "",
        date_label=display_date(task),
        urgent=is_urgent(task, today),
        completed=task.completed,
        assignee=task.assignee or DEFAULT_BADGE,
    )


def build_cards(tasks: Iterable[Task], today: date) -> List[CardView]:
    """View models for tasks that are already in display order."""
    return [build_card(t, today) for t in tasks]


def render_card(card: CardView) -> str:
    tid = _e(card.task_id)
    parts = [
        f'<div class="{card.css_class}" data-action="open" data-task-id="{tid}">',
        f'<div class="checkbox-wrapper" data-action="toggle" data-task-id="{tid}"'
        f' role="checkbox" aria-checked="{"true" if card.completed else "false"}">'
        '<div class="custom-checkbox"><span class="material-symbols-rounded">check</span></div>'
        '</div>',
        '<div class="task-content">',
        f'<div class="task-title">{_e(card.title)}</div>',
    ]
    if card.description:
        parts.append(f'<div class="task-description">{_e(card.description)}</div>')
    if card.link:
        parts.append(
            f'<a href="{_e(card.link)}" target="_blank" rel="noopener noreferrer" class="task-link"'
            f' data-action="link" data-task-id="{tid}">'
            f'<span class="material-symbols-rounded">link</span>{LINK_LABEL}</a>'
        )
    mark = f" {URGENT_MARK}" if card.urgent else ""
    parts.extend([
        '<div class="task-meta">',
        f'<span class="task-date">{_e(card.date_label)}{mark}</span>',
        f'<span class="assignee-badge {card.assignee_class}">{_e(card.assignee)}</span>',
        '</div>',
        '</div>',
        f'<button type="button" class="delete-btn" data-action="delete" data-task-id="{tid}">'
        '<span class="material-symbols-rounded">delete</span></button>',
        '</div>',
    ])
    return "".join(parts)


def render_empty() -> str:
    return '<div class="notice">No tasks yet.</div>'


def render_task_list(cards: Sequence[CardView]) -> str:
    if not cards:
        return render_empty()
    return "\n".join(render_card(c) for c in cards)


def render_notice(kind: str) -> str:
    css, text = _NOTICES[kind]
    return f'<div class="{css}">{text}</div>'


def render_editor(editor: EditorController, assignees: Sequence[str]) -> str:
    """Modal markup for the current editor state; empty when closed."""
    if not editor.is_open:
        return ""
    form = editor.form
    names = list(assignees)
    if form.assignee and form.assignee not in names:
        names.append(form.assignee)
    options = "".join(
        f'<option value="{_e(n)}"{" selected" if n == form.assignee else ""}>{_e(n)}</option>'
        for n in names
    )
    error = f'<p class="modal-error" role="alert">{_e(editor.error)}</p>' if editor.error else ""
    return (
        '<div id="modalOverlay" class="modal-overlay active">'
        '<div class="modal">'
        f'<h2>{_e(editor.heading)}</h2>'
        f'<input id="taskTitle" type="text" placeholder="タスク名" value="{_e(form.title)}">'
        f'<textarea id="taskDescription" placeholder="メモ">{_e(form.description)}</textarea>'
        f'<input id="taskLink" type="url" placeholder="https://" value="{_e(form.link)}">'
        f'<input id="taskDate" type="date" value="{_e(form.date)}"{" disabled" if form.date_disabled else ""}>'
        f'<label class="asap-toggle"><input id="taskASAP" type="checkbox"{" checked" if form.is_asap else ""}>'
        ' なるはや</label>'
        f'<select id="taskAssignee">{options}</select>'
        f'{error}'
        '<div class="modal-actions">'
        '<button type="button" id="cancelBtn" data-editor="close">キャンセル</button>'
        '<button type="button" id="saveBtn" data-editor="save">保存</button>'
        '</div>'
        '</div>'
        '</div>'
    )


_STYLE = """
body { font-family: sans-serif; margin: 0 auto; max-width: 640px; padding: 16px; }
header { display: flex; justify-content: space-between; align-items: center; }
.task-card { display: flex; gap: 12px; padding: 12px; margin: 8px 0; border-radius: 12px; background: #fff; box-shadow: 0 1px 3px rgba(0,0,0,.12); cursor: pointer; }
.task-card.urgent { border-left: 4px solid #ff6b9d; }
.task-card.completed { opacity: .5; }
.task-card.completed .task-title { text-decoration: line-through; }
.custom-checkbox .material-symbols-rounded { visibility: hidden; }
.task-card.completed .custom-checkbox .material-symbols-rounded { visibility: visible; }
.task-content { flex: 1; }
.assignee-badge { border-radius: 8px; padding: 0 6px; font-size: 12px; }
.assignee-badge.hina { background: #ffe0ec; }
.assignee-badge.togawa { background: #e0ecff; }
.delete-btn { background: none; border: none; cursor: pointer; }
.notice { text-align: center; padding: 20px; color: #888; }
.notice-error { color: #ff6b9d; }
.modal-overlay { position: fixed; inset: 0; background: rgba(0,0,0,.4); display: flex; align-items: center; justify-content: center; }
.modal { background: #fff; border-radius: 16px; padding: 20px; display: flex; flex-direction: column; gap: 8px; min-width: 300px; }
.modal-error { color: #d33; }
"""

_SCRIPT = """
const taskList = document.getElementById('taskList');
const modalRoot = document.getElementById('modalRoot');
const confirmDelete = document.body.dataset.confirmDelete;

async function post(url, body) {
    const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(body || {}),
    });
    return res.json();
}

function collectForm() {
    const value = (id) => { const el = document.getElementById(id); return el ? el.value : ''; };
    const asap = document.getElementById('taskASAP');
    return {
        title: value('taskTitle'),
        description: value('taskDescription'),
        link: value('taskLink'),
        date: value('taskDate'),
        isASAP: asap ? asap.checked : false,
        assignee: value('taskAssignee'),
    };
}

function show(data) {
    if (data.editor !== undefined) {
        modalRoot.innerHTML = data.editor;
        const title = document.getElementById('taskTitle');
        if (title && !data.notice) title.focus();
    }
    if (data.notice) alert(data.notice);
}

document.addEventListener('click', async (e) => {
    if (e.target.id === 'modalOverlay') {
        show(await post('/editor/close'));
        return;
    }
    const editorControl = e.target.closest('[data-editor]');
    if (editorControl) {
        const op = editorControl.dataset.editor;
        show(await post('/editor/' + op, op === 'open' ? {} : collectForm()));
        return;
    }
    const target = e.target.closest('[data-action]');
    if (!target) return;
    const action = target.dataset.action;
    if (action === 'link') return;
    if (action === 'delete' && !confirm(confirmDelete)) return;
    const url = '/actions/' + action + '/' + encodeURIComponent(target.dataset.taskId);
    show(await post(url, {confirmed: action === 'delete'}));
});

document.addEventListener('change', async (e) => {
    if (e.target.id === 'taskASAP') show(await post('/editor/asap', collectForm()));
});

document.addEventListener('keydown', async (e) => {
    if (e.key === 'Escape' && document.getElementById('modalOverlay')) {
        show(await post('/editor/close'));
    }
});

const ws = new WebSocket((location.protocol === 'https:' ? 'wss://' : 'ws://') + location.host + '/ws');
ws.onmessage = (msg) => { taskList.innerHTML = msg.data; };
"""


def render_page(header_date: str, list_html: str, editor_html: str) -> str:
    return (
        '<!DOCTYPE html>\n'
        '<html lang="ja"><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        '<title>Tasks</title>'
        '<link rel="stylesheet" href="https://fonts.googleapis.com/css2?family=Material+Symbols+Rounded">'
        f'<style>{_STYLE}</style></head>'
        f'<body data-confirm-delete="{_e(DELETE_CONFIRM)}">'
        '<header>'
        f'<div id="currentDate">{_e(header_date)}</div>'
        '<button type="button" id="addTaskBtn" data-editor="open">'
        '<span class="material-symbols-rounded">add</span></button>'
        '</header>'
        f'<main id="taskList">{list_html}</main>'
        f'<div id="modalRoot">{editor_html}</div>'
        f'<script>{_SCRIPT}</script>'
        '</body></html>'
    )
