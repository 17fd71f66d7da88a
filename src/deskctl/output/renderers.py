"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from deskctl.output.console import create_console, get_output, style_for_type

if TYPE_CHECKING:
    from rich.console import Console

    from deskctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal, which is
    the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: ids for list results."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    for key in ("items", "rules", "entries", "tags", "saved"):
        rows = result.data.get(key)
        if isinstance(rows, list):
            return "\n".join(str(row["id"]) for row in rows if isinstance(row, dict) and "id" in row)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="desk.ok"), Text(f"  {result.op}", style="desk.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="desk.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="desk.id")
    elif key in ("name", "label", "title"):
        v = Text(str(value), style="desk.label")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":"), ensure_ascii=False))
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"
    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {span_data.get('name', '?')}"
    if span_data.get("annotations"):
        line += "  (" + ", ".join(f"{k}={v}" for k, v in span_data["annotations"].items()) + ")"
    console.print(line)
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _item_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table for desktop items."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="desk.id", no_wrap=True)
    table.add_column("Label", style="desk.label")
    table.add_column("Type")
    table.add_column("X", style="desk.pos", justify="right")
    table.add_column("Y", style="desk.pos", justify="right")
    if verbose:
        table.add_column("Path", style="dim")
        table.add_column("Size", justify="right")

    for item in items:
        item_type = str(item.get("type", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            Text(str(item.get("label", ""))),
            Text(item_type, style=style_for_type(item_type)),
            str(item.get("x", "")),
            str(item.get("y", "")),
        ]
        if verbose:
            row.append(Text(str(item.get("path", ""))))
            size = item.get("fileSize")
            row.append("" if size is None else str(size))
        table.add_row(*row)
    return table


def _rule_table(rules: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="desk.id", no_wrap=True)
    table.add_column("Rule")
    table.add_column("Region", style="dim")
    for index, rule in enumerate(rules, start=1):
        region = rule.get("selectedRegion")
        region_text = (
            f"{region['x']:g},{region['y']:g} {region['width']:g}x{region['height']:g}"
            if region
            else ""
        )
        text = escape(str(rule.get("name") or rule.get("text", "")))
        if rule.get("rules"):
            text = f"{text} ({len(rule['rules'])} rules)"
        decoded = rule.get("decoded")
        if decoded and (decoded["action"] is None or decoded["subject"]["kind"] == "unknown"):
            text = f"{text}  [desk.warning](unrecognized)[/desk.warning]"
        table.add_row(str(index), str(rule.get("id", "")), text, region_text)
    return table


def _descriptions(console: Console, descriptions: list[str], skipped: list[str]) -> None:
    for description in descriptions:
        console.print(f"  [desk.ok]✓[/desk.ok] {escape(description)}")
    for text in skipped:
        console.print(f"  [desk.warning]skipped[/desk.warning] {escape(text)}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="desk.error")
    console.print(label, Text(f"  {result.op}", style="desk.op"), " — ", Text(msg), sep="")
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Desktop renderers ─────────────────────────────────────────────────


def _render_items(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """List, organize, shuffle and import results: summary then item table."""
    d = result.data
    _status_line(console, result)
    for key in ("source", "seed", "moved"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    items = d.get("items", [])
    if result.op == "list_items" or verbose:
        console.print(_item_table(items, verbose=verbose))
    console.print(f"\n{d.get('count', len(items))} items")


def _render_move(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "id", d["id"])
    _field(console, "label", d["label"])
    console.print(
        Text("  moved: ", style="desk.key"),
        Text(f"({d['from'][0]}, {d['from'][1]}) -> ({d['to'][0]}, {d['to'][1]})", style="desk.pos"),
        sep="",
    )


def _render_run(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """preview_rules / apply_rules."""
    d = result.data
    _status_line(console, result)
    _descriptions(console, d.get("descriptions", []), d.get("skipped", []))
    _field(console, "moved", d.get("moved", 0))
    if d.get("history"):
        _field(console, "history", ", ".join(d["history"]))
    if verbose or result.op == "preview_rules":
        console.print(_item_table(d.get("items", []), verbose=verbose))


def _render_rollback(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "restored_from", d["id"])
    _field(console, "title", d["title"])
    _field(console, "count", d["count"])
    if verbose:
        console.print(_item_table(d.get("items", []), verbose=True))


# ── Rule renderers ────────────────────────────────────────────────────


def _render_rule_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    rules = result.data.get("rules") or result.data.get("saved") or []
    if not rules:
        console.print("No rules." if result.op == "list_rules" else "No saved rule sets.")
        return
    console.print(_rule_table(rules))


def _render_rule_change(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    rule = d.get("rule") or d.get("saved")
    if rule:
        _field(console, "id", rule["id"])
        _field(console, "rule", rule.get("name") or rule.get("text", ""))
    else:
        for key in ("id", "name", "remaining", "cleared"):
            if key in d:
                _field(console, key, d[key])
    if d.get("added"):
        console.print(_rule_table(d["added"]))


def _render_parse(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    subject = {k: v for k, v in d["subject"].items() if k != "kind" and v is not None}
    kind = d["subject"]["kind"]
    _field(console, "subject", f"{kind} {subject}" if subject else kind)
    action = d.get("action")
    if action is None:
        _field(console, "action", "unrecognized")
    else:
        params = {k: v for k, v in action.items() if k != "kind" and v is not None}
        _field(console, "action", f"{action['kind']} {params}" if params else action["kind"])


# ── History renderers ─────────────────────────────────────────────────


def _render_history(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    entries = result.data.get("entries", [])
    if not entries:
        console.print("History is empty.")
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("", style="desk.star", no_wrap=True)
    table.add_column("ID", style="desk.id", no_wrap=True)
    table.add_column("Time", style="dim")
    table.add_column("Title")
    table.add_column("Items", justify="right")
    for entry in entries:
        table.add_row(
            "★" if entry.get("starred") else "",
            str(entry["id"]),
            str(entry["time"])[:19].replace("T", " "),
            Text(str(entry["title"])),
            str(entry["items"]),
        )
    console.print(table)


# ── Tag renderers ─────────────────────────────────────────────────────


def _tag_table(tags: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="desk.id", no_wrap=True)
    table.add_column("Name", style="desk.label")
    table.add_column("Color")
    table.add_column("Items")
    for tag in tags:
        color = str(tag.get("color", ""))
        table.add_row(
            str(tag["id"]),
            Text(str(tag["name"])),
            Text(color, style=color) if color.startswith("#") else color,
            Text(", ".join(tag.get("items", []))),
        )
    return table


def _render_tags(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    tags = result.data.get("tags", [])
    if not tags:
        console.print("No tags.")
        return
    console.print(_tag_table(tags))


def _render_tag_change(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    tag = d.get("tag")
    if tag is not None:
        _field(console, "id", tag["id"])
        _field(console, "name", tag["name"])
        _field(console, "color", tag["color"])
        _field(console, "items", tag.get("items", []))
    else:
        for key, value in d.items():
            _field(console, key, value)


def _render_suggest(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "proposed", d.get("proposed", 0))
    created = d.get("created", [])
    _field(console, "created", len(created))
    if created:
        console.print(_tag_table(created))


def _render_assign(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "assigned", d.get("assigned", 0))
    _field(console, "files", d.get("files", 0))
    if verbose:
        console.print(_tag_table(d.get("tags", [])))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Desktop
    "import_file": _render_items,
    "import_json": _render_items,
    "list_items": _render_items,
    "organize": _render_items,
    "sort_by_name": _render_items,
    "shuffle": _render_items,
    "move_item": _render_move,
    # Rules
    "parse_rule": _render_parse,
    "add_rule": _render_rule_change,
    "remove_rule": _render_rule_change,
    "clear_rules": _render_rule_change,
    "list_rules": _render_rule_list,
    "preview_rules": _render_run,
    "apply_rules": _render_run,
    "save_rule_set": _render_rule_change,
    "load_rule_set": _render_rule_change,
    "list_rule_sets": _render_rule_list,
    "delete_rule_set": _render_rule_change,
    # History
    "list_history": _render_history,
    "rollback": _render_rollback,
    # Tags
    "list_tags": _render_tags,
    "create_tag": _render_tag_change,
    "rename_tag": _render_tag_change,
    "recolor_tag": _render_tag_change,
    "toggle_tag": _render_tag_change,
    "tag_add_item": _render_tag_change,
    "tag_remove_item": _render_tag_change,
    "delete_tag": _render_tag_change,
    "delete_all_tags": _render_tag_change,
    "suggest_tags": _render_suggest,
    "assign_tags": _render_assign,
}
