"""Hook grouping: location → event → matcher → hooks.

Settings files carry hooks as:

    {"hooks": {"PreToolUse": [{"matcher": "Bash",
                               "hooks": [{"type": "command", "command": "./lint.sh",
                                          "timeout": 30}]}]}}

``hook_configs_from_settings`` lifts one parsed file into HookConfig values;
``group_hooks`` folds the configs of every file into the display hierarchy.
Both are pure: no I/O, inputs untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ccm.models import EventGroup, HookConfig, HookRule, LocationGroup, MatcherGroup

logger = logging.getLogger(__name__)

HOOK_EVENTS = (
    "PreToolUse",
    "PostToolUse",
    "PermissionRequest",
    "Notification",
    "UserPromptSubmit",
    "Stop",
    "SubagentStop",
    "SessionStart",
    "SessionEnd",
    "PreCompact",
)


def hook_configs_from_settings(
    settings: Mapping, location: str, config_path: str
) -> list[HookConfig]:
    """Read the ``hooks`` object of one parsed settings file."""
    hooks = settings.get("hooks") if isinstance(settings, Mapping) else None
    if not isinstance(hooks, Mapping):
        return []

    configs: list[HookConfig] = []
    for event_type, matchers in hooks.items():
        if not isinstance(matchers, list):
            logger.debug("Skipping %s in %s: matchers is not a list", event_type, config_path)
            continue
        if event_type not in HOOK_EVENTS:
            logger.debug("Unrecognized hook event %s in %s", event_type, config_path)
        configs.append(
            HookConfig(
                event_type=str(event_type),
                matchers=tuple(m for m in matchers if isinstance(m, Mapping)),
                location=location,
                config_path=config_path,
            )
        )
    return configs


def _timeout(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _to_rule(
    config: HookConfig, pattern: str | None, matcher_index: int, hook_index: int, hook: object
) -> HookRule | None:
    if not isinstance(hook, Mapping):
        return None
    kind = hook.get("type")
    if kind not in ("command", "prompt"):
        return None
    body = hook.get(kind)
    if not isinstance(body, str):
        return None
    return HookRule(
        location=config.location,
        event_type=config.event_type,
        matcher_pattern=pattern,
        hook_index=hook_index,
        kind=kind,
        command_or_prompt=body,
        timeout_seconds=_timeout(hook.get("timeout")),
        config_path=config.config_path,
        matcher_index=matcher_index,
    )


def _pattern(matcher: Mapping) -> str | None:
    value = matcher.get("matcher")
    if not isinstance(value, str) or not value:
        return None
    return value


def group_hooks(configs: Iterable[HookConfig]) -> dict[str, LocationGroup]:
    """Group hooks by location, then event type, then matcher pattern.

    Locations, events and matchers keep the order they first appear in.
    Hooks under the same pattern merge into one matcher group; an absent or
    empty pattern is its own group (displayed as ``*``), separate from a
    literal ``"*"``. Hooks of unknown type are left out.
    """
    # location → event → pattern → rules
    tree: dict[str, dict[str, dict[str | None, list[HookRule]]]] = {}

    for config in configs:
        events = tree.setdefault(config.location, {})
        matchers = events.setdefault(config.event_type, {})
        for matcher_index, matcher in enumerate(config.matchers):
            pattern = _pattern(matcher)
            rules = matchers.setdefault(pattern, [])
            hooks = matcher.get("hooks")
            if not isinstance(hooks, list):
                continue
            for hook_index, hook in enumerate(hooks):
                rule = _to_rule(config, pattern, matcher_index, hook_index, hook)
                if rule is None:
                    logger.debug(
                        "Skipping hook %d of %s/%s in %s",
                        hook_index,
                        config.event_type,
                        pattern,
                        config.config_path,
                    )
                    continue
                rules.append(rule)

    return {
        location: LocationGroup(
            location=location,
            events={
                event_type: EventGroup(
                    event_type=event_type,
                    matchers=tuple(
                        MatcherGroup(pattern=pattern, hooks=tuple(rules))
                        for pattern, rules in matchers.items()
                    ),
                )
                for event_type, matchers in events.items()
            },
        )
        for location, events in tree.items()
    }


def count_hooks(groups: Mapping[str, LocationGroup]) -> int:
    """Total number of hooks across all locations."""
    return sum(group.count for group in groups.values())
