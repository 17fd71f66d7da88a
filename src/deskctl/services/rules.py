"""RuleService: manage the active rule list and run it against the desktop."""

from __future__ import annotations

from deskctl.domain.ids import generate_id
from deskctl.domain.models import Region, Rule
from deskctl.domain.rules import UnknownSubject, describe, parse_rule
from deskctl.domain.runner import RunOutcome, run_rules
from deskctl.domain.session import DesktopSession
from deskctl.services._helpers import item_payload, moved_count, rule_payload
from deskctl.services.base import BaseService
from deskctl.services.result import (
    EMPTY_RULE_SET,
    INVALID_INPUT,
    NO_EFFECT,
    NOT_FOUND,
    ServiceResult,
)
from deskctl.services.telemetry import trace_span, traced


def _rule_view(rule: Rule) -> dict[str, object]:
    view: dict[str, object] = rule_payload(rule)
    parsed = parse_rule(rule.text) if not rule.rules else None
    if parsed is not None:
        view["decoded"] = describe(parsed)
    return view


class RuleService(BaseService):
    """Active rules, saved rule sets, preview and apply."""

    # ------------------------------------------------------------------
    # Active rule list
    # ------------------------------------------------------------------

    @traced
    def parse(self, text: str) -> ServiceResult:
        """Decode rule text without touching the session."""
        parsed = parse_rule(text)
        if parsed is None:
            return ServiceResult.failure(
                "parse_rule", INVALID_INPUT, f'Rule must be "<subject> + <action>": {text!r}'
            )
        return ServiceResult(
            ok=True,
            op="parse_rule",
            data={"text": text, **describe(parsed)},
        )

    @traced
    def add(self, text: str, *, region: Region | None = None) -> ServiceResult:
        op = "add_rule"
        parsed = parse_rule(text)
        if parsed is None:
            return ServiceResult.failure(
                op, INVALID_INPUT, f'Rule must be "<subject> + <action>": {text!r}'
            )

        warnings: list[str] = []
        if isinstance(parsed.subject, UnknownSubject):
            warnings.append(f"Unrecognized subject {parsed.text.subject!r}; rule will be skipped")
        if parsed.action is None:
            warnings.append(f"Unrecognized action {parsed.text.action!r}; rule will be skipped")

        rule = Rule(id=generate_id("rule"), text=text.strip(), selected_region=region)
        with self._workspace.session() as unit:
            unit.replace(unit.state.model_copy(update={"rules": [*unit.state.rules, rule]}))
        return ServiceResult(ok=True, op=op, data={"rule": _rule_view(rule)}, warnings=warnings)

    @traced
    def remove(self, rule_id: str) -> ServiceResult:
        op = "remove_rule"
        with self._workspace.session() as unit:
            remaining = [r for r in unit.state.rules if r.id != rule_id]
            if len(remaining) == len(unit.state.rules):
                return ServiceResult.failure(op, NOT_FOUND, f"No rule with id {rule_id}")
            unit.replace(unit.state.model_copy(update={"rules": remaining}))
        return ServiceResult(ok=True, op=op, data={"id": rule_id, "remaining": len(remaining)})

    @traced
    def list(self) -> ServiceResult:
        with self._workspace.session() as unit:
            rules = unit.state.rules
        return ServiceResult(
            ok=True,
            op="list_rules",
            data={"count": len(rules), "rules": [_rule_view(r) for r in rules]},
        )

    @traced
    def clear(self) -> ServiceResult:
        with self._workspace.session() as unit:
            count = len(unit.state.rules)
            if count:
                unit.replace(unit.state.model_copy(update={"rules": []}))
        return ServiceResult(ok=True, op="clear_rules", data={"cleared": count})

    # ------------------------------------------------------------------
    # Preview / apply
    # ------------------------------------------------------------------

    @traced
    def preview(self, *, region: Region | None = None) -> ServiceResult:
        """Run the active rules on a copy of the desktop. Nothing is saved."""
        op = "preview_rules"
        with self._workspace.session() as unit:
            failure = self._no_session(op, unit) or self._check_rules(op, unit.state)
            if failure is not None:
                return failure
            state = unit.state

        outcome = self._run(state, region)
        if not outcome.success:
            return self._no_effect(op, outcome.skipped)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "descriptions": outcome.descriptions,
                "skipped": outcome.skipped,
                "moved": moved_count(state.items, outcome.items),
                "count": len(outcome.items),
                "items": item_payload(outcome.items),
            },
        )

    @traced
    def apply(self, *, region: Region | None = None) -> ServiceResult:
        """Run the active rules and commit the result to the desktop.

        Writes a "Before apply rule" snapshot first when the desktop was
        changed since the last apply (or was never applied), then a
        "Rules" snapshot of the result.
        """
        op = "apply_rules"
        warnings: list[str] = []
        with self._workspace.session() as unit:
            failure = self._no_session(op, unit) or self._check_rules(op, unit.state)
            if failure is not None:
                return failure
            state = unit.state

            outcome = self._run(state, region)
            if not outcome.success:
                return self._no_effect(op, outcome.skipped)

            summary = ", ".join(outcome.descriptions)
            history = state.history_store()
            recorded: list[str] = []
            changed_since_apply = state.last_applied is None or state.last_applied != state.items
            if self._workspace.settings.history.record_before_state and changed_since_apply:
                recorded.append(history.append(state.items, f"Before apply rule: {summary}").id)
            recorded.append(history.append(outcome.items, f"Rules: {summary}").id)

            unit.replace(
                state.with_history(history).model_copy(
                    update={"items": outcome.items, "last_applied": outcome.items}
                )
            )

        self._dispatch_event(
            "post_apply",
            {"descriptions": outcome.descriptions, "item_count": len(outcome.items)},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "descriptions": outcome.descriptions,
                "skipped": outcome.skipped,
                "moved": moved_count(state.items, outcome.items),
                "count": len(outcome.items),
                "history": recorded,
                "items": item_payload(outcome.items),
            },
            warnings=warnings,
        )

    def _run(self, state: DesktopSession, region: Region | None) -> RunOutcome:
        with trace_span("run_rules") as span:
            outcome = run_rules(state.rules, state.items, state.tags, region, self._action_context())
            if span:
                span.annotate("rules", len(state.rules))
                span.annotate("skipped", len(outcome.skipped))
        return outcome

    @staticmethod
    def _check_rules(op: str, state: DesktopSession) -> ServiceResult | None:
        if state.rules:
            return None
        return ServiceResult.failure(op, EMPTY_RULE_SET, "No rules to run. Add one with 'deskctl rule add'.")

    @staticmethod
    def _no_effect(op: str, skipped: list[str]) -> ServiceResult:
        return ServiceResult.failure(
            op, NO_EFFECT, "None of the rules could be applied; check the rule format.",
            skipped=skipped,
        )

    # ------------------------------------------------------------------
    # Saved rule sets
    # ------------------------------------------------------------------

    @traced
    def save_set(self, name: str | None = None, *, region: Region | None = None) -> ServiceResult:
        """Save the active rules as a named set.

        Each rule keeps its own region; *region* is stored as the set's
        fallback for rules without one.
        """
        op = "save_rule_set"
        with self._workspace.session() as unit:
            failure = self._check_rules(op, unit.state)
            if failure is not None:
                return failure
            state = unit.state
            final_name = (name or "").strip() or f"My Rule Set {len(state.saved_rules) + 1}"
            saved = Rule(
                id=generate_id("saved"),
                name=final_name,
                text=f"{len(state.rules)} rules",
                rules=[
                    r.model_copy(update={"selected_region": r.selected_region or region})
                    for r in state.rules
                ],
                selected_region=region,
            )
            unit.replace(state.model_copy(update={"saved_rules": [saved, *state.saved_rules]}))
        return ServiceResult(ok=True, op=op, data={"saved": _rule_view(saved)})

    @traced
    def load_set(self, saved_id: str) -> ServiceResult:
        """Append a saved set's rules to the active list, with fresh ids."""
        op = "load_rule_set"
        with self._workspace.session() as unit:
            state = unit.state
            saved = next((s for s in state.saved_rules if s.id == saved_id), None)
            if saved is None:
                return ServiceResult.failure(op, NOT_FOUND, f"No saved rule set with id {saved_id}")

            sources = saved.rules or [saved]
            added = [
                Rule(
                    id=generate_id("rule"),
                    text=r.text,
                    selected_region=r.selected_region or saved.selected_region,
                )
                for r in sources
            ]
            unit.replace(state.model_copy(update={"rules": [*state.rules, *added]}))
        return ServiceResult(
            ok=True,
            op=op,
            data={"name": saved.name, "added": [_rule_view(r) for r in added]},
        )

    @traced
    def list_sets(self) -> ServiceResult:
        with self._workspace.session() as unit:
            saved = unit.state.saved_rules
        return ServiceResult(
            ok=True,
            op="list_rule_sets",
            data={"count": len(saved), "saved": [_rule_view(s) for s in saved]},
        )

    @traced
    def delete_set(self, saved_id: str) -> ServiceResult:
        op = "delete_rule_set"
        with self._workspace.session() as unit:
            remaining = [s for s in unit.state.saved_rules if s.id != saved_id]
            if len(remaining) == len(unit.state.saved_rules):
                return ServiceResult.failure(op, NOT_FOUND, f"No saved rule set with id {saved_id}")
            unit.replace(unit.state.model_copy(update={"saved_rules": remaining}))
        return ServiceResult(ok=True, op=op, data={"id": saved_id})
