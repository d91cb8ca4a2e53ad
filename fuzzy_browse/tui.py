from __future__ import annotations

import logging
import threading
from functools import partial

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import Key, Paste, Resize
from textual.widgets import OptionList, Static

from fuzzy_browse.config import BrowseSettings
from fuzzy_browse.exceptions import RankingCancelled
from fuzzy_browse.models import ResultRow, ViewMode, Workflows
from fuzzy_browse.ranking import fuzzy_filter
from fuzzy_browse.rendering import (
    highlight_matches,
    render_workflow_details,
    render_workflow_preview,
)
from fuzzy_browse.search import Matcher

logger = logging.getLogger(__name__)


class FuzzyBrowseTui(App[None]):
    CSS_PATH = "browse.tcss"
    ENABLE_COMMAND_PALETTE = False
    BINDINGS = [
        Binding("f", "filter_key_f", "Filter"),
        Binding("slash", "filter_key_slash", show=False),
        Binding("escape", "escape", "Back", show=False),
        Binding("q", "quit_or_type_q", "Quit"),
        Binding("ctrl+c", "quit", show=False),
    ]

    def __init__(
        self,
        *,
        workflows: Workflows | None = None,
        settings: BrowseSettings | None = None,
        initial_query: str = "",
    ) -> None:
        super().__init__()
        self.theme = "rose-pine"
        self._settings = settings if settings is not None else BrowseSettings()
        self._matcher = Matcher(self._settings.score_model)
        self._workflows = workflows if workflows is not None else Workflows()
        self._mode: ViewMode = "workflows"
        self._filter_mode = bool(initial_query)
        self._search_query = initial_query
        self._visible_rows: list[ResultRow] = []
        self._previewed_row: ResultRow | None = None
        self._filter_cancel: threading.Event | None = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="body"):
            with Vertical(id="sidebar"):
                yield Static("Workflows", id="sidebar-title")
                yield OptionList(id="sidebar-list")
                yield Static("Loading workflows...", id="status")
            with Vertical(id="main-panel"):
                yield Static(
                    "Select a workflow in the sidebar.",
                    id="main-placeholder",
                )

    def on_mount(self) -> None:
        self._visible_rows = self._compute_rows(self._active_query(), None) or []
        self._show_rows()
        self.query_one("#sidebar-list", OptionList).focus()
        self._update_filter_indicator()

    def _active_query(self) -> str:
        return self._search_query if self._filter_mode else ""

    def _compute_rows(
        self, query: str, cancel: threading.Event | None
    ) -> list[ResultRow] | None:
        try:
            hits = fuzzy_filter(
                query,
                self._workflows,
                max_results=self._settings.max_results,
                matcher=self._matcher,
                workers=self._settings.workers,
                cancel=cancel,
            )
        except RankingCancelled:
            logger.debug("filtering for %r superseded by a newer query", query)
            return None
        return [
            ResultRow(workflow=workflow, score=result.score, positions=result.positions)
            for workflow, result in hits
        ]

    def _filter_in_thread(self, query: str, cancel: threading.Event) -> None:
        rows = self._compute_rows(query, cancel)
        if rows is None or cancel.is_set():
            return
        self.call_from_thread(self._apply_filter_results, query, rows)

    def _filter_workflows(self) -> None:
        if self._filter_cancel is not None:
            self._filter_cancel.set()
        cancel = threading.Event()
        self._filter_cancel = cancel
        self.run_worker(
            partial(self._filter_in_thread, self._active_query(), cancel),
            thread=True,
            group="filter",
            exclusive=True,
            exit_on_error=False,
        )

    def _apply_filter_results(self, query: str, rows: list[ResultRow]) -> None:
        if query != self._active_query():
            return
        self._visible_rows = rows
        self._show_rows()

    def _show_rows(self) -> None:
        self._mode = "workflows"
        self._render_workflow_options()
        self._update_selection_status()
        self._previewed_row = None
        if self._visible_rows:
            self._request_preview(self._visible_rows[0])
        else:
            self.query_one("#main-placeholder", Static).update(
                "No matching workflows.\n\nTry a different query?"
            )

    def _option_label(self, row: ResultRow) -> Text:
        return highlight_matches(row.workflow.repo, row.positions)

    def _render_workflow_options(self, *, preserve_position: bool = False) -> None:
        workflow_list = self.query_one("#sidebar-list", OptionList)
        previous_highlight = workflow_list.highlighted
        previous_scroll_y = workflow_list.scroll_y
        workflow_list.clear_options()
        if self._visible_rows:
            workflow_list.add_options(
                [self._option_label(row) for row in self._visible_rows]
            )
            if preserve_position and previous_highlight is not None:
                workflow_list.highlighted = min(
                    previous_highlight, len(self._visible_rows) - 1
                )
                workflow_list.scroll_to(y=previous_scroll_y, animate=False)
            else:
                workflow_list.action_first()
            return
        workflow_list.add_option("No workflows found")

    def _update_selection_status(self) -> None:
        self.query_one("#status", Static).update(
            f"{len(self._visible_rows):,} of {len(self._workflows):,} workflows shown."
        )

    def _main_panel_content_width(self) -> int:
        main_panel = self.query_one("#main-panel", Vertical)
        if main_panel.size.width <= 0:
            return 90
        return max(50, main_panel.size.width - 6)

    def _request_preview(self, row: ResultRow) -> None:
        if self._previewed_row == row and self._mode == "workflows":
            return
        self.query_one("#main-placeholder", Static).update(
            render_workflow_preview(row, query=self._active_query())
        )
        self._previewed_row = row

    def _open_details(self, row: ResultRow) -> None:
        self._mode = "details"
        self._previewed_row = None
        self.query_one("#main-placeholder", Static).update(
            render_workflow_details(
                row.workflow, content_width=self._main_panel_content_width()
            )
        )

    def _highlighted_row(self) -> ResultRow | None:
        highlighted = self.query_one("#sidebar-list", OptionList).highlighted
        if highlighted is None or not 0 <= highlighted < len(self._visible_rows):
            return None
        return self._visible_rows[highlighted]

    def _filter_indicator_text(self) -> Text:
        indicator = Text()
        if self._filter_mode:
            indicator.append("f", style="bold red")
            indicator.append(f" {self._search_query}_", style="bold white")
        else:
            indicator.append("filter", style="dim")
            indicator.stylize("bold red", 0, 1)
        return indicator

    def _update_filter_indicator(self) -> None:
        sidebar = self.query_one("#sidebar", Vertical)
        sidebar.border_title = self._filter_indicator_text()
        sidebar.border_subtitle = ""
        main_panel = self.query_one("#main-panel", Vertical)
        main_panel.styles.border_title_align = "left"
        main_panel.border_title = Text(
            "details" if self._mode == "details" else "preview", style="dim"
        )

    def _set_filter_mode(self, enabled: bool, *, reset_query: bool) -> None:
        self._filter_mode = enabled
        if reset_query:
            self._search_query = ""
        self._filter_workflows()
        self._update_filter_indicator()

    def _append_filter_char(self, char: str) -> None:
        self._search_query += char
        self._filter_workflows()
        self._update_filter_indicator()

    def _delete_filter_char(self) -> None:
        if not self._search_query:
            return
        self._search_query = self._search_query[:-1]
        self._filter_workflows()
        self._update_filter_indicator()

    def action_filter_key_f(self) -> None:
        if not self._filter_mode:
            self._set_filter_mode(True, reset_query=True)
            return
        self._append_filter_char("f")

    def action_filter_key_slash(self) -> None:
        if not self._filter_mode:
            self._set_filter_mode(True, reset_query=True)
            return
        self._append_filter_char("/")

    def action_quit_or_type_q(self) -> None:
        if self._filter_mode:
            self._append_filter_char("q")
            return
        self.exit()

    def action_escape(self) -> None:
        if self._mode == "details":
            self._mode = "workflows"
            row = self._highlighted_row()
            if row is not None:
                self._request_preview(row)
            self._update_filter_indicator()
            return

        if self._filter_mode:
            self._set_filter_mode(False, reset_query=True)

    def on_key(self, event: Key) -> None:
        if not self._filter_mode:
            return

        # These keys are handled by explicit bindings to avoid duplicate input.
        if event.key in {"f", "slash", "q"}:
            return

        if event.key == "backspace":
            self._delete_filter_char()
            event.stop()
            return

        if event.key == "space":
            self._append_filter_char(" ")
            event.stop()
            return

        if event.character and event.character.isprintable():
            self._append_filter_char(event.character)
            event.stop()

    def on_paste(self, event: Paste) -> None:
        if not self._filter_mode:
            return
        sanitized = event.text.replace("\r", "").replace("\n", "")
        if not sanitized:
            return
        self._append_filter_char(sanitized)
        event.stop()

    def on_resize(self, event: Resize) -> None:
        del event
        self.call_after_refresh(self._refresh_after_resize)

    def _refresh_after_resize(self) -> None:
        self._update_filter_indicator()
        self._render_workflow_options(preserve_position=True)
        if self._mode == "details":
            row = self._highlighted_row()
            if row is not None:
                self._open_details(row)

    def on_option_list_option_highlighted(
        self, event: OptionList.OptionHighlighted
    ) -> None:
        if event.option_list.id != "sidebar-list":
            return
        if not 0 <= event.option_index < len(self._visible_rows):
            return
        self._mode = "workflows"
        self._request_preview(self._visible_rows[event.option_index])
        self._update_filter_indicator()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list.id != "sidebar-list":
            return
        if not 0 <= event.option_index < len(self._visible_rows):
            return
        self._open_details(self._visible_rows[event.option_index])
        self._update_filter_indicator()
