import threading

from rich.text import Text
from textual.events import Paste

from fuzzy_browse.config import BrowseSettings
from fuzzy_browse.models import ResultRow, Workflow, Workflows
from fuzzy_browse.tui import FuzzyBrowseTui


def _workflows() -> Workflows:
    return Workflows(
        [
            Workflow(name="alfred-bookmarks", owner="deanishe", stars=120),
            Workflow(name="awgo", owner="deanishe", stars=800),
            Workflow(name="alfred-gitlab", owner="lukewaite"),
        ]
    )


def test_compute_rows_ranks_and_highlights() -> None:
    app = FuzzyBrowseTui(workflows=_workflows())

    rows = app._compute_rows("awgo", None)

    assert rows is not None
    assert [row.workflow.repo for row in rows] == ["deanishe/awgo"]
    assert rows[0].positions == (9, 10, 11, 12)
    label = app._option_label(rows[0])
    assert label.plain == "deanishe/awgo"
    assert [label.plain[span.start : span.end] for span in label.spans] == list("awgo")


def test_compute_rows_empty_query_keeps_order_and_limit() -> None:
    app = FuzzyBrowseTui(
        workflows=_workflows(), settings=BrowseSettings(max_results=2)
    )

    rows = app._compute_rows("", None)

    assert rows is not None
    assert [row.workflow.name for row in rows] == ["alfred-bookmarks", "awgo"]
    assert {row.score for row in rows} == {0.0}


def test_compute_rows_returns_none_when_cancelled() -> None:
    app = FuzzyBrowseTui(workflows=_workflows())
    cancel = threading.Event()
    cancel.set()

    assert app._compute_rows("a", cancel) is None


def test_filter_workflows_runs_exclusive_thread_worker(monkeypatch) -> None:
    app = FuzzyBrowseTui(workflows=_workflows())
    worker_calls: list[dict[str, object]] = []

    def _fake_run_worker(work: object, **kwargs: object) -> None:
        assert callable(work)
        worker_calls.append(kwargs)

    monkeypatch.setattr(app, "run_worker", _fake_run_worker)

    app._filter_workflows()
    first_cancel = app._filter_cancel
    app._filter_workflows()

    assert worker_calls == [
        {
            "thread": True,
            "group": "filter",
            "exclusive": True,
            "exit_on_error": False,
        }
    ] * 2
    assert first_cancel is not None
    assert first_cancel.is_set()
    assert app._filter_cancel is not None
    assert not app._filter_cancel.is_set()


def test_filter_in_thread_posts_results(monkeypatch) -> None:
    app = FuzzyBrowseTui(workflows=_workflows())
    posted: list[tuple[str, list[ResultRow]]] = []

    def _fake_call_from_thread(callback: object, query: str, rows: list) -> None:
        del callback
        posted.append((query, rows))

    monkeypatch.setattr(app, "call_from_thread", _fake_call_from_thread)

    app._filter_in_thread("gitlab", threading.Event())

    assert len(posted) == 1
    assert posted[0][0] == "gitlab"
    assert [row.workflow.name for row in posted[0][1]] == ["alfred-gitlab"]


def test_apply_filter_results_ignores_stale_queries(monkeypatch) -> None:
    app = FuzzyBrowseTui(workflows=_workflows())
    app._filter_mode = True
    app._search_query = "aw"
    shown: list[int] = []
    monkeypatch.setattr(app, "_show_rows", lambda: shown.append(1))

    app._apply_filter_results("a", [ResultRow(workflow=_workflows()[0])])
    assert app._visible_rows == []
    assert shown == []

    rows = [ResultRow(workflow=_workflows()[1], score=17.0)]
    app._apply_filter_results("aw", rows)
    assert app._visible_rows == rows
    assert shown == [1]


def test_update_selection_status(monkeypatch) -> None:
    app = FuzzyBrowseTui(workflows=_workflows())
    app._visible_rows = [ResultRow(workflow=_workflows()[1])]
    updates: list[str] = []

    class _FakeStatus:
        def update(self, value: str) -> None:
            updates.append(value)

    def _fake_query_one(selector: str, _widget_type: object = None) -> _FakeStatus:
        assert selector == "#status"
        return _FakeStatus()

    monkeypatch.setattr(app, "query_one", _fake_query_one)
    app._update_selection_status()

    assert updates == ["1 of 3 workflows shown."]


def test_filter_indicator_text_shows_query() -> None:
    app = FuzzyBrowseTui()
    app._filter_mode = True
    app._search_query = "awg"

    indicator = app._filter_indicator_text()

    assert indicator.plain == "f awg_"


def test_filter_indicator_text_outside_filter_mode() -> None:
    app = FuzzyBrowseTui()

    indicator = app._filter_indicator_text()

    assert isinstance(indicator, Text)
    assert indicator.plain == "filter"
    assert any(
        str(span.style) == "bold red" and indicator.plain[span.start : span.end] == "f"
        for span in indicator.spans
    )


def test_initial_query_enables_filter_mode() -> None:
    app = FuzzyBrowseTui(initial_query="aw")

    assert app._filter_mode is True
    assert app._active_query() == "aw"


def test_action_quit_or_type_q_appends_in_filter_mode(monkeypatch) -> None:
    app = FuzzyBrowseTui()
    app._filter_mode = True
    appended: list[str] = []

    monkeypatch.setattr(app, "_append_filter_char", appended.append)

    app.action_quit_or_type_q()

    assert appended == ["q"]


def test_action_filter_key_f_starts_filter_mode(monkeypatch) -> None:
    app = FuzzyBrowseTui()
    app._search_query = "stale"
    filtered: list[str] = []
    monkeypatch.setattr(
        app, "_filter_workflows", lambda: filtered.append(app._active_query())
    )
    app._update_filter_indicator = lambda: None  # type: ignore[method-assign]

    app.action_filter_key_f()
    app.action_filter_key_f()

    assert app._filter_mode is True
    assert app._search_query == "f"
    assert filtered == ["", "f"]


def test_delete_filter_char_on_empty_query_is_ignored(monkeypatch) -> None:
    app = FuzzyBrowseTui()
    app._filter_mode = True
    filtered: list[str] = []
    monkeypatch.setattr(app, "_filter_workflows", lambda: filtered.append("x"))

    app._delete_filter_char()

    assert filtered == []


def test_on_paste_appends_sanitized_text_in_filter_mode(monkeypatch) -> None:
    app = FuzzyBrowseTui()
    app._filter_mode = True
    app._search_query = "al"
    monkeypatch.setattr(app, "_filter_workflows", lambda: None)
    app._update_filter_indicator = lambda: None  # type: ignore[method-assign]

    app.on_paste(Paste("fred\r\n"))

    assert app._search_query == "alfred"


def test_on_paste_is_ignored_outside_filter_mode() -> None:
    app = FuzzyBrowseTui()

    app.on_paste(Paste("alfred"))

    assert app._search_query == ""
