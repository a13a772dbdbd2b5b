"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`;
unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from roperty.domain.vector import WILDCARD_TOKEN
from roperty.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from roperty.services.result import ServiceResult

    Renderer = Callable[..., None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: bare values, one per line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    if result.op == "get":
        return display_value(result.data.get("value"))
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("key", "")) for item in items)
    return f"OK: {result.op}"


def display_value(value: Any) -> str:
    """Text form of a property value (JSON for containers)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="rp.ok"), Text(f"  {result.op}", style="rp.op"))


def _labeled(console: Console, label: str, body: Text | str) -> None:
    console.print(Text(f"  {label}: ", style="rp.key"), body, sep="")


def _field(console: Console, key: str, value: Any) -> None:
    style = "rp.name" if key == "key" else ("rp.value" if key == "value" else "")
    _labeled(console, key, Text(display_value(value), style=style))


def _domains_text(values: list[str | None] | None) -> Text:
    """Domain values joined by ``|``; wildcards and gaps highlighted."""
    text = Text()
    if not values:
        return Text("(default)", style="rp.unaddressed")
    for index, value in enumerate(values):
        if index:
            text.append("|")
        if value is None:
            text.append("-", style="rp.unaddressed")
        elif value == WILDCARD_TOKEN:
            text.append(value, style="rp.wildcard")
        else:
            text.append(value)
    return text


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="rp.error"),
        Text(f"  {result.op}{code}", style="rp.op"),
        f": {msg}",
        sep="",
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(f"    {key}: {value}")
    for warning in result.warnings:
        console.print(Text("  warning: ", style="rp.warning"), warning, sep="")


# ── Property renderers ────────────────────────────────────────────────


def _render_get(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "key", d.get("key"))
    _field(console, "value", d.get("value"))
    if verbose:
        _field(console, "source", d.get("source"))
        _labeled(console, "matched", _domains_text(d.get("matched")))


def _render_set(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "key", d.get("key"))
    _field(console, "value", d.get("value"))
    _labeled(console, "domains", _domains_text(d.get("domains")))
    if verbose:
        _field(console, "created", d.get("created"))
        _field(console, "overrides", d.get("overrides"))


def _render_show(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Record panel: header fields plus one row per override."""
    d = result.data
    header = [f"default: {display_value(d.get('default'))}", f"type: {d.get('type')}"]
    if d.get("description"):
        header.append(f"description: {d['description']}")

    table = Table(show_header=True, pad_edge=False, expand=False)
    for axis in d.get("domains", []):
        table.add_column(axis)
    table.add_column("Value", style="rp.value")
    width = len(d.get("domains", []))
    for override in d.get("overrides", []):
        values = list(override["domains"])
        cells = [
            _domains_text([values[i]]) if i < len(values) else Text("-", style="rp.unaddressed")
            for i in range(width)
        ]
        table.add_row(*cells, display_value(override["value"]))

    console.print(Panel("\n".join(header), title=str(d.get("key")), expand=False))
    if d.get("overrides"):
        console.print(table)
    else:
        console.print(Text("  no overrides", style="dim"))


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Key", style="rp.name", no_wrap=True)
    table.add_column("Default")
    table.add_column("Type")
    table.add_column("Overrides", justify="right")
    if verbose:
        table.add_column("Description", style="dim")
    for item in items:
        row = [
            str(item["key"]),
            display_value(item.get("default")),
            str(item.get("type", "")),
            str(item.get("overrides", 0)),
        ]
        if verbose:
            row.append(item.get("description") or "")
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} properties")


def _render_decode(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "descriptor", d.get("descriptor"))
    for axis, value in d.get("axes", {}).items():
        _labeled(console, axis, _domains_text([value]))
    _field(console, "specificity", d.get("specificity"))


# ── Database renderers ────────────────────────────────────────────────


def _render_upgrade(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in (
        "applied_count",
        "pending_count",
        "current",
        "head",
        "backup_path",
        "message",
        "stamped",
    ):
        if key in d:
            _field(console, key, d[key])
    if verbose and result.meta and "database" in result.meta:
        _field(console, "database", result.meta["database"])
    if verbose and d.get("pending"):
        console.print()
        for rev in d["pending"]:
            console.print(f"  {rev['revision']}: {rev['description']}")


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("config_path", "db_url", "container", "revision"):
        if key in d:
            _field(console, key, d[key])
    if "domains" in d:
        _field(console, "domains", ", ".join(d["domains"]))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose and result.meta:
        console.print(Text("  meta:", style="dim"))
        for key, value in result.meta.items():
            console.print(f"    {key}: {value}")


_OP_RENDERERS: dict[str, Renderer] = {
    "get": _render_get,
    "set": _render_set,
    "show": _render_show,
    "list": _render_list,
    "decode": _render_decode,
    "upgrade": _render_upgrade,
    "init": _render_init,
}
