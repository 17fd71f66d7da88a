"""Tests for operation-specific Rich renderers."""

from deskctl.output.renderers import render_quiet, render_result
from deskctl.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str, code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=dict(detail)),
    )


ITEMS = [
    {"id": "1", "label": "Report.docx", "type": "file", "x": 20, "y": 20, "fileSize": 2048},
    {"id": "2", "label": "Projects", "type": "folder", "x": 20, "y": 130},
]


# ── Errors and quiet mode ────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        output = render_result(_err("rollback", "EMPTY_HISTORY", "History is empty"))
        assert "ERROR" in output
        assert "rollback" in output
        assert "History is empty" in output

    def test_verbose_shows_detail(self) -> None:
        output = render_result(_err("import_file", "IMPORT_FAILED", "Bad", path="x.txt"), verbose=True)
        assert "detail" in output
        assert "path: x.txt" in output

    def test_no_error_object(self) -> None:
        assert "Unknown error" in render_result(ServiceResult(ok=False, op="test"))


class TestQuiet:
    def test_list_prints_ids(self) -> None:
        assert render_quiet(_ok("list_items", items=ITEMS, count=2)) == "1\n2"

    def test_mutation_prints_status(self) -> None:
        assert render_quiet(_ok("remove_rule", id="rule-1", remaining=0)) == "OK: remove_rule"

    def test_error(self) -> None:
        output = render_quiet(_err("move_item", "NOT_FOUND", "No item with id 9"))
        assert output.startswith("ERROR: move_item")
        assert "No item with id 9" in output


# ── Desktop ──────────────────────────────────────────────────────────


class TestItemRenderers:
    def test_list_items_table(self) -> None:
        output = render_result(_ok("list_items", source="desktop_info.txt", count=2, items=ITEMS))
        assert "desktop_info.txt" in output
        assert "Report.docx" in output
        assert "Projects" in output
        assert "2 items" in output

    def test_organize_hides_table_unless_verbose(self) -> None:
        result = _ok("organize", moved=1, count=2, items=ITEMS)
        assert "Report.docx" not in render_result(result)
        verbose = render_result(result, verbose=True)
        assert "Report.docx" in verbose
        assert "2048" in verbose

    def test_move(self) -> None:
        result = _ok("move_item", id="3", label="c.txt", to=[120, 20], requested=[25, 25],
                     **{"from": [700, 700]})
        output = render_result(result)
        assert "(700, 700) -> (120, 20)" in output


# ── Rules ────────────────────────────────────────────────────────────


class TestRuleRenderers:
    def test_parse(self) -> None:
        result = _ok(
            "parse_rule",
            text="Tags > Work + Delete",
            subject={"kind": "tag", "name": "Work"},
            action={"kind": "delete"},
        )
        output = render_result(result)
        assert "subject: tag" in output
        assert "Work" in output
        assert "action: delete" in output

    def test_parse_unrecognized_action(self) -> None:
        result = _ok("parse_rule", text="All files + Fly", subject={"kind": "all"}, action=None)
        assert "action: unrecognized" in render_result(result)

    def test_rule_list_flags_unrecognized(self) -> None:
        rules = [
            {
                "id": "rule-aaaaaaaaaaaa",
                "text": "All files + Sort by name",
                "decoded": {"subject": {"kind": "all"}, "action": {"kind": "sort"}},
            },
            {
                "id": "rule-bbbbbbbbbbbb",
                "text": "All files + Fly",
                "decoded": {"subject": {"kind": "all"}, "action": None},
                "selectedRegion": {"x": 0, "y": 0, "width": 500, "height": 400},
            },
        ]
        output = render_result(_ok("list_rules", count=2, rules=rules))
        assert "rule-aaaaaaaaaaaa" in output
        assert "(unrecognized)" in output
        assert "0,0 500x400" in output

    def test_empty_lists(self) -> None:
        assert render_result(_ok("list_rules", count=0, rules=[])) == "No rules."
        assert render_result(_ok("list_rule_sets", count=0, saved=[])) == "No saved rule sets."

    def test_apply(self) -> None:
        result = _ok(
            "apply_rules",
            descriptions=["Sort all files by name"],
            skipped=["Nothing + Delete"],
            moved=3,
            history=["Before apply", "After apply"],
            items=ITEMS,
        )
        output = render_result(result)
        assert "Sort all files by name" in output
        assert "skipped" in output
        assert "moved: 3" in output
        assert "Before apply, After apply" in output


# ── History and tags ─────────────────────────────────────────────────


class TestHistoryAndTags:
    def test_history_table(self) -> None:
        entries = [
            {"id": "h-0a1b2c3d4e5f", "time": "2024-05-01T10:00:00+00:00", "title": "After apply",
             "starred": True, "items": 2},
        ]
        output = render_result(_ok("list_history", count=1, entries=entries))
        assert "h-0a1b2c3d4e5f" in output
        assert "2024-05-01 10:00:00" in output
        assert "★" in output

    def test_empty_history(self) -> None:
        assert render_result(_ok("list_history", count=0, entries=[])) == "History is empty."

    def test_rollback(self) -> None:
        result = _ok("rollback", id="h-0a1b2c3d4e5f", title="Before apply", count=2, items=ITEMS)
        output = render_result(result)
        assert "restored_from: h-0a1b2c3d4e5f" in output
        assert "Before apply" in output

    def test_tag_change(self) -> None:
        tag = {"id": "tag-0a1b2c3d4e5f", "name": "Work", "color": "#fb923c",
               "items": ["a.pdf"], "expanded": True}
        output = render_result(_ok("create_tag", tag=tag))
        assert "name: Work" in output
        assert '["a.pdf"]' in output

    def test_suggest(self) -> None:
        created = [{"id": "tag-0a1b2c3d4e5f", "name": "Images", "color": "#60a5fa", "items": []}]
        output = render_result(_ok("suggest_tags", proposed=2, created=created))
        assert "proposed: 2" in output
        assert "created: 1" in output
        assert "Images" in output

    def test_generic_fallback(self) -> None:
        output = render_result(_ok("star_history", id="h-0a1b2c3d4e5f", starred=True))
        assert "star_history" in output
        assert "starred: True" in output
