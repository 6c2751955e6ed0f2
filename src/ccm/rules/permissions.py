"""Permission rule grouping: decision → tool → rules."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from ccm.models import DECISIONS, PermissionRule, ToolGroup

logger = logging.getLogger(__name__)

# "Bash(npm run test:*)" → tool "Bash", pattern "npm run test:*"
_RULE_RE = re.compile(r"^([^(]+)\((.*)\)$", re.DOTALL)


def parse_rule(raw: str) -> tuple[str, str]:
    """Split a settings entry into (tool, pattern); a bare tool matches ``*``."""
    text = raw.strip()
    match = _RULE_RE.match(text)
    if match:
        return match.group(1).strip(), match.group(2)
    return text, "*"


def permission_rules_from_settings(
    settings: Mapping, location: str, config_path: str
) -> list[PermissionRule]:
    """Read ``permissions.allow|ask|deny`` from one parsed settings file."""
    permissions = settings.get("permissions") if isinstance(settings, Mapping) else None
    if not isinstance(permissions, Mapping):
        return []

    rules: list[PermissionRule] = []
    for decision in DECISIONS:
        entries = permissions.get(decision)
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, str) or not entry.strip():
                logger.debug("Skipping %s entry %r in %s", decision, entry, config_path)
                continue
            tool, pattern = parse_rule(entry)
            rules.append(
                PermissionRule(
                    decision=decision,
                    tool=tool,
                    pattern=pattern,
                    location=location,
                    config_path=config_path,
                )
            )
    return rules


def group_permissions(rules: Iterable[PermissionRule]) -> dict[str, tuple[ToolGroup, ...]]:
    """Group rules by decision (allow, ask, deny), then by tool.

    Tool groups are sorted by case-sensitive comparison of the tool name;
    rules inside a group keep their input order. Decisions without rules are
    left out.
    """
    by_decision: dict[str, dict[str, list[PermissionRule]]] = {d: {} for d in DECISIONS}
    for rule in rules:
        tools = by_decision.get(rule.decision)
        if tools is None:
            logger.debug("Skipping rule with unknown decision %r", rule.decision)
            continue
        tools.setdefault(rule.tool, []).append(rule)

    return {
        decision: tuple(
            ToolGroup(tool=tool, rules=tuple(tools[tool])) for tool in sorted(tools)
        )
        for decision, tools in by_decision.items()
        if tools
    }


def count_rules(groups: Iterable[ToolGroup]) -> int:
    """Number of rules across the tool groups of one decision."""
    return sum(group.count for group in groups)
