from __future__ import annotations

import textwrap
from collections.abc import Iterable

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from fuzzy_browse.models import ResultRow, Workflow

MATCH_STYLE = "bold red"


def format_detail_row(label: str, value: str) -> str:
    return f"{label:<20}{value}"


def format_score(score: float) -> str:
    return f"{score:6.2f}"


def format_star_count(stars: int) -> str:
    if stars < 1000:
        return f"★ {stars}"
    return f"★ {stars / 1000:.1f}k"


def format_topics(topics: Iterable[str]) -> str:
    return ", ".join(topics) or "none"


def highlight_matches(
    text: str, positions: Iterable[int], *, style: str = MATCH_STYLE
) -> Text:
    highlighted = Text(text)
    for position in positions:
        if 0 <= position < len(text):
            highlighted.stylize(style, position, position + 1)
    return highlighted


def render_kv_box(rows: list[tuple[str, str]], width: int) -> list[str]:
    if not rows:
        return []
    label_width = max(len(label) for label, _ in rows)
    inner_width = max(30, width - 2)
    value_width = max(10, inner_width - label_width - 3)

    lines = ["╭" + ("─" * inner_width) + "╮"]
    for label, value in rows:
        wrapped = textwrap.wrap(value, width=value_width) or [""]
        lines.append(f"│ {label:<{label_width}} {wrapped[0]:<{value_width}} │")
        for continuation in wrapped[1:]:
            lines.append(f"│ {'':<{label_width}} {continuation:<{value_width}} │")
    lines.append("╰" + ("─" * inner_width) + "╯")
    return lines


def render_workflow_preview(row: ResultRow, *, query: str = "") -> str:
    workflow = row.workflow
    divider = "-" * max(44, len(workflow.repo))
    lines = [
        f"# {escape(workflow.repo)}",
        "",
        escape(workflow.description) if workflow.description else "No description.",
        divider,
        "",
        format_detail_row("Owner", escape(workflow.owner)),
        format_detail_row("Name", escape(workflow.name)),
        format_detail_row("Stars", format_star_count(workflow.stars)),
        format_detail_row("Topics", escape(format_topics(workflow.topics))),
        format_detail_row("URL", escape(workflow.url) or "not available"),
    ]
    if query:
        lines.extend(
            [
                "",
                format_detail_row("Query", escape(query)),
                format_detail_row("Score", format_score(row.score).strip()),
            ]
        )
    lines.extend(["", "Press Enter for details."])
    return "\n".join(lines)


def render_workflow_details(workflow: Workflow, *, content_width: int) -> str:
    table_rows: list[tuple[str, str]] = [
        ("Repository", workflow.repo),
        ("Owner", workflow.owner),
        ("Name", workflow.name),
        ("Stars", f"{workflow.stars:,}"),
        ("Topics", format_topics(workflow.topics)),
        ("Description", workflow.description or "none"),
    ]
    url = escape(workflow.url)
    link_target = url.replace('"', '\\"')

    lines = [f"# {escape(workflow.repo)}", "", "Workflow metadata:"]
    lines.extend(escape(line) for line in render_kv_box(table_rows, content_width))
    lines.extend(["", "URL:"])
    lines.append(f'[link="{link_target}"]{url}[/link]' if url else "not available")
    return "\n".join(lines)


def render_results_table(rows: list[ResultRow], *, show_scores: bool = True) -> Table:
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("#", justify="right", style="dim")
    if show_scores:
        table.add_column("Score", justify="right")
    table.add_column("Workflow")
    table.add_column("Stars", justify="right")
    table.add_column("Description", overflow="fold")

    for number, row in enumerate(rows, start=1):
        workflow = row.workflow
        cells: list[str | Text] = [str(number)]
        if show_scores:
            cells.append(format_score(row.score).strip())
        cells.extend(
            [
                highlight_matches(workflow.repo, row.positions),
                format_star_count(workflow.stars),
                Text(workflow.description),
            ]
        )
        table.add_row(*cells)
    return table
