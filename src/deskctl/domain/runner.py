"""Rule-set runner: thread the item collection through an ordered rule list."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field, replace

from deskctl.domain.actions import ActionContext, ActionResult, apply_action
from deskctl.domain.filters import filter_items, in_region
from deskctl.domain.grid import DEFAULT_GRID, GridSpec
from deskctl.domain.models import DesktopItem, Region, Rule, Tag
from deskctl.domain.rules import UnknownSubject, parse_rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOutcome:
    """Final collection plus one description per rule that produced a result."""

    items: list[DesktopItem]
    descriptions: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.descriptions)


def apply_within_region(
    region: Region | None,
    items: Sequence[DesktopItem],
    fn: Callable[[list[DesktopItem]], ActionResult | None],
    grid: GridSpec = DEFAULT_GRID,
) -> ActionResult | None:
    """Run *fn* on the items inside *region* and merge the rest back.

    Merge order is fixed: items outside the region first, then whatever
    *fn* returned for the region items. Without a region *fn* sees the
    whole collection.
    """
    if region is None:
        return fn(list(items))

    inside = [item for item in items if in_region(item, region, grid)]
    outside = [item for item in items if not in_region(item, region, grid)]
    result = fn(inside)
    if result is None:
        return None
    return ActionResult(items=outside + result.items, description=result.description)


def expand_rules(
    rules: Sequence[Rule], region: Region | None = None
) -> Iterator[tuple[Rule, Region | None]]:
    """Flatten rule sets into ``(rule, effective_region)`` pairs, in order.

    A rule's own region wins over its parent's, which wins over the run's.
    """
    for rule in rules:
        effective = rule.selected_region or region
        if rule.rules:
            yield from expand_rules(rule.rules, effective)
        else:
            yield rule, effective


def run_rules(
    rules: Sequence[Rule],
    items: Sequence[DesktopItem],
    tags: Sequence[Tag] = (),
    region: Region | None = None,
    context: ActionContext | None = None,
) -> RunOutcome:
    """Execute *rules* in order, each rule's output feeding the next.

    Malformed or unrecognized rules are recorded in ``skipped`` and never
    abort the run.
    """
    ctx = context or ActionContext()
    current = list(items)
    descriptions: list[str] = []
    skipped: list[str] = []

    for rule, scope in expand_rules(rules, region):
        parsed = parse_rule(rule.text)
        if parsed is None or parsed.action is None or isinstance(parsed.subject, UnknownSubject):
            logger.debug("Skipping rule %s: %r", rule.id, rule.text)
            skipped.append(rule.text)
            continue

        rule_ctx = replace(ctx, region=scope)

        def run_one(candidates: list[DesktopItem]) -> ActionResult | None:
            matched = filter_items(
                parsed.subject, candidates, tags, grid=rule_ctx.grid, now=rule_ctx.now
            )
            return apply_action(parsed.action, matched, candidates, rule_ctx)

        result = apply_within_region(scope, current, run_one, ctx.grid)
        if result is None:
            skipped.append(rule.text)
            continue
        current = result.items
        descriptions.append(result.description)
        logger.debug("Applied rule %s: %s", rule.id, result.description)

    return RunOutcome(items=current, descriptions=descriptions, skipped=skipped)
