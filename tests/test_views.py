# tests/test_views.py

from __future__ import annotations

import pytest

from taskcards.editor import EditorController
from taskcards.views import (
    NOTICE_LOAD_ERROR,
    NOTICE_NOT_CONFIGURED,
    URGENT_MARK,
    build_card,
    build_cards,
    render_card,
    render_editor,
    render_notice,
    render_page,
    render_task_list,
)

from .conftest import TODAY
from .fakes import FakeRepository, make_task


def _card_html(**kwargs) -> str:
    return render_card(build_card(make_task(**kwargs), TODAY))


def test_script_title_renders_as_text():
    html = _card_html(title="<script>alert('x')</script>")
    assert "<script>" not in html
    assert "&lt;script&gt;alert(&#x27;x&#x27;)&lt;/script&gt;" in html


@pytest.mark.parametrize(
    "raw, escaped",
    [("&", "&amp;"), ("<", "&lt;"), (">", "&gt;"), ('"', "&quot;"), ("'", "&#x27;")],
)
def test_each_special_character_is_escaped(raw, escaped):
    html = _card_html(title=f"a{raw}b", description=f"c{raw}d", assignee=f"e{raw}f")
    assert f"a{escaped}b" in html
    assert f"c{escaped}d" in html
    assert f"e{escaped}f" in html
    assert f"a{raw}b" not in html


def test_link_opens_isolated_in_new_context():
    html = _card_html(link='https://example.test/?q="x"')
    assert 'href="https://example.test/?q=&quot;x&quot;"' in html
    assert 'target="_blank"' in html
    assert 'rel="noopener noreferrer"' in html
    assert 'data-action="link"' in html


def test_optional_fields_are_omitted():
    html = _card_html()
    assert "task-description" not in html
    assert "task-link" not in html


def test_card_controls_carry_their_own_action():
    html = _card_html(task_id="abc")
    for action in ("open", "toggle", "delete"):
        assert f'data-action="{action}" data-task-id="abc"' in html


def test_urgent_card_has_class_and_marker():
    html = _card_html(date="2024-06-02")
    assert 'class="task-card urgent"' in html
    assert f"6/2 {URGENT_MARK}" in html


def test_completed_card_is_not_urgent():
    html = _card_html(date="2024-06-02", completed=True)
    assert 'class="task-card completed"' in html
    assert URGENT_MARK not in html
    assert 'aria-checked="true"' in html


def test_asap_card_shows_label():
    card = build_card(make_task(is_asap=True), TODAY)
    assert card.date_label == "なるはや"
    assert card.urgent


def test_assignee_badge():
    assert build_card(make_task(assignee="Togawa"), TODAY).assignee_class == "togawa"
    default = build_card(make_task(), TODAY)
    assert default.assignee == "Hina"
    assert default.assignee_class == "hina"


def test_task_list_keeps_given_order():
    cards = build_cards([make_task("b"), make_task("a")], TODAY)
    html = render_task_list(cards)
    assert html.index('data-task-id="b"') < html.index('data-task-id="a"')


def test_empty_list_and_notices():
    assert "No tasks yet." in render_task_list([])
    assert "not configured" in render_notice(NOTICE_NOT_CONFIGURED)
    assert "Error loading tasks." in render_notice(NOTICE_LOAD_ERROR)


def test_closed_editor_renders_nothing():
    editor = EditorController(FakeRepository(), today=lambda: TODAY)
    assert render_editor(editor, ["Hina", "Togawa"]) == ""


def test_editor_for_asap_task():
    editor = EditorController(FakeRepository(), today=lambda: TODAY)
    editor.open(make_task(title='Say "hi"', is_asap=True, assignee="Togawa"))
    html = render_editor(editor, ["Hina", "Togawa"])
    assert 'value="Say &quot;hi&quot;"' in html
    assert 'id="taskDate" type="date" value="" disabled' in html
    assert 'id="taskASAP" type="checkbox" checked' in html
    assert '<option value="Togawa" selected>' in html


def test_editor_shows_escaped_error():
    editor = EditorController(FakeRepository(), today=lambda: TODAY)
    editor.open()
    editor.error = "<b>bad</b>"
    assert "&lt;b&gt;bad&lt;/b&gt;" in render_editor(editor, ["Hina"])


def test_page_wraps_list_and_editor():
    html = render_page("2024.06.01(土)", "<p>list</p>", "")
    assert '<main id="taskList"><p>list</p></main>' in html
    assert "2024.06.01(土)" in html
    assert "data-confirm-delete=" in html
    assert "new WebSocket" in html
