"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from milaan.domain.types import CATEGORY_LABELS
from milaan.output.console import create_console, get_output, style_for_role, style_for_status
from milaan.output.formatters import format_date, format_number, format_time_ago

if TYPE_CHECKING:
    from rich.console import Console

    from milaan.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if not result.ok:
        _render_error(result, console, verbose=verbose)
    else:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        if verbose and result.meta:
            console.print(Text("  meta:", style="dim"))
            for key, value in result.meta.items():
                console.print(f"    {key}: {value}")

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: one ID per line for listings."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        ids = (item.get("id") for item in items if isinstance(item, dict))
        return "\n".join(str(i) for i in ids if i is not None)
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="milaan.ok"), Text(f"  {result.op}", style="milaan.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="milaan.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="milaan.id")
    elif key in ("name", "title"):
        v = Text(str(value), style="milaan.title")
    else:
        v = Text(str(value))
    console.print(k, v)


def _status_text(status: str) -> Text:
    return Text(status, style=style_for_status(status))


def _category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, category)


def _problem_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="milaan.id", no_wrap=True)
    table.add_column("Title", style="milaan.title")
    table.add_column("Category")
    table.add_column("Status")
    table.add_column("Upvotes", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("Posted", style="dim")

    for item in items:
        title = Text(str(item.get("title", "")))
        if item.get("is_urgent"):
            title.append(" [urgent]", style="milaan.urgent")
        table.add_row(
            str(item.get("id", "")),
            title,
            _category_label(str(item.get("category", ""))),
            _status_text(str(item.get("status", ""))),
            format_number(item.get("upvotes", 0)),
            format_number(item.get("comment_count", 0)),
            format_time_ago(item["created_at"]) if item.get("created_at") else "",
        )
    return table


def _user_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="milaan.id", no_wrap=True)
    table.add_column("Name", style="milaan.title")
    table.add_column("Role")
    table.add_column("Rating", justify="right")
    table.add_column("Helped", justify="right")
    table.add_column("Location", style="dim")

    for item in items:
        role = str(item.get("role", ""))
        rating = item.get("rating")
        helped = item.get("help_count")
        table.add_row(
            str(item.get("id", "")),
            str(item.get("name", "")),
            Text(role, style=style_for_role(role)),
            f"{rating:.1f}" if rating is not None else "-",
            format_number(helped) if helped is not None else "-",
            str(item.get("location", {}).get("address", "")),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="milaan.error")
    op = Text(f"  {result.op}", style="milaan.op")
    console.print(label, op, Text(" — "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Problem renderers ─────────────────────────────────────────────────


def _render_problem_table(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    console.print(_problem_table(items))
    count = result.data.get("count", len(items))
    console.print(f"\n{count} problem{'' if count == 1 else 's'}")


def _render_problem(result: ServiceResult, console: Console) -> None:
    """Problem detail as a panel: metadata, description, author and helpers."""
    d = result.data
    status = str(d.get("status", ""))

    lines: list[str] = [
        f"category: {_category_label(str(d.get('category', '')))}",
        f"status: [{style_for_status(status) or 'default'}]{status}[/]",
        f"posted: {format_date(d['created_at'])} ({format_time_ago(d['created_at'])})",
        f"upvotes: {format_number(d.get('upvotes', 0))}"
        f"  comments: {format_number(d.get('comment_count', 0))}",
    ]
    address = d.get("location", {}).get("address")
    if address:
        lines.append(f"location: {escape(address)}")
    user = d.get("user")
    if user:
        lines.append(f"posted by: {escape(user['name'])} ({user['id']})")
    helpers = d.get("helpers", [])
    if helpers:
        lines.append("helpers: " + ", ".join(f"{escape(h['name'])} ({h['id']})" for h in helpers))

    content = "\n".join(lines) + f"\n\n{escape(str(d.get('description', '')).strip())}"
    title = escape(f"{d.get('id', '?')} — {d.get('title', 'Untitled')}")
    if d.get("is_urgent"):
        title += " (urgent)"
    border = "milaan.urgent" if d.get("is_urgent") else style_for_status(status) or "dim"
    console.print(Panel(content, title=title, border_style=border, expand=False))


def _render_comments(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(f"No comments on {result.data.get('problem_id', '')}")
        return
    for comment in items:
        author = comment.get("user", {})
        header = Text(f"{author.get('name', comment.get('user_id', '?'))}", style="milaan.title")
        header.append(f"  {format_time_ago(comment['created_at'])}", style="dim")
        if comment.get("is_solution"):
            header.append("  ✓ solution", style="milaan.ok")
        console.print(header)
        console.print(f"  {escape(str(comment.get('content', '')))}")
        console.print()
    console.print(f"{result.data.get('count', len(items))} comments")


# ── User renderers ────────────────────────────────────────────────────


def _render_user(result: ServiceResult, console: Console) -> None:
    """User profile as a panel."""
    d = result.data
    role = str(d.get("role", ""))
    lines: list[str] = [
        f"role: [{style_for_role(role) or 'default'}]{role}[/]",
        f"email: {d.get('email', '')}",
        f"member since: {format_date(d['created_at'])}",
    ]
    address = d.get("location", {}).get("address")
    if address:
        lines.append(f"location: {escape(address)}")
    if d.get("help_count") is not None:
        lines.append(f"problems helped: {format_number(d['help_count'])}")
    if d.get("problem_count") is not None:
        lines.append(f"problems posted: {format_number(d['problem_count'])}")
    if d.get("rating") is not None:
        lines.append(f"rating: {d['rating']:.1f} / 5")

    content = "\n".join(lines)
    if d.get("bio"):
        content += f"\n\n{escape(d['bio'])}"
    title = escape(f"{d.get('id', '?')} — {d.get('name', '')}")
    console.print(Panel(content, title=title, expand=False))


def _render_user_table(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    console.print(_user_table(items))
    console.print(f"\n{result.data.get('count', len(items))} users")


def _render_logout(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    user_id = result.data.get("user_id")
    console.print("  Logged out" if user_id else "  Nobody was logged in")


def _render_categories(result: ServiceResult, console: Console) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Value", style="milaan.id", no_wrap=True)
    table.add_column("Label")
    for item in result.data.get("items", []):
        table.add_row(item["value"], item["label"])
    console.print(table)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    # Problems
    "get_problem": _render_problem,
    "get_comments": _render_comments,
    "list_problems": _render_problem_table,
    "search_problems": _render_problem_table,
    "get_problems_by_user": _render_problem_table,
    "get_problems_by_helper": _render_problem_table,
    "list_problem_records": _render_problem_table,
    "categories": _render_categories,
    # Users
    "get_user": _render_user,
    "whoami": _render_user,
    "login": _render_user,
    "register": _render_user,
    "logout": _render_logout,
    "get_users_by_role": _render_user_table,
    "search_users": _render_user_table,
    "top_helpers": _render_user_table,
}
