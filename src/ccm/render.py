"""Plain-text rendering of trees, outlines, metadata and grouped rules.

Everything is drawn with the same box-drawing connectors:

    Project (3)
    ├── deploy
    └── git
        ├── commit
        └── review
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from ccm.models import (
    ConfigItem,
    FolderPlaceholder,
    HookRule,
    ItemDetails,
    LocationGroup,
    MetadataBlock,
    PermissionRule,
    ScopeGroup,
    Section,
    ToolGroup,
    TreeNode,
)
from ccm.rules.hooks import count_hooks
from ccm.rules.permissions import count_rules

SectionSource = Callable[[str], list[Section]]


@dataclass
class Entry:
    """One display line and the lines nested under it."""

    label: str
    note: str = ""
    children: list[Entry] = field(default_factory=list)


def render_entries(entries: list[Entry], lines: list[str] | None = None, prefix: str = "") -> list[str]:
    """Draw ``entries`` with ├── / └── connectors, appending to ``lines``."""
    if lines is None:
        lines = []
    for i, entry in enumerate(entries):
        is_last = i == len(entries) - 1
        connector = "└── " if is_last else "├── "
        text = f"{entry.label}  ({entry.note})" if entry.note else entry.label
        lines.append(f"{prefix}{connector}{text}")
        if entry.children:
            render_entries(entry.children, lines, prefix + ("    " if is_last else "│   "))
    return lines


def _titled(title: str, entries: list[Entry]) -> list[str]:
    return [title, *render_entries(entries)]


# ── Trees ─────────────────────────────────────────────────────


def section_entry(section: Section) -> Entry:
    return Entry(
        label=f"{'  ' * section.depth}{section.title}",
        note=f"H{section.level} L{section.line_number}",
    )


def node_entry(
    node: TreeNode,
    details: Mapping[str, ItemDetails] | None = None,
    sections: SectionSource | None = None,
) -> Entry:
    """Display entry for a tree node; files may expand into their sections."""
    payload = node.payload
    if isinstance(payload, FolderPlaceholder):
        note = ""
    elif isinstance(payload, ConfigItem):
        note = "" if payload.is_directory else _file_note(payload, (details or {}).get(node.path))
    else:
        raise TypeError(f"Unexpected node payload: {type(payload).__name__}")

    if node.is_directory:
        children = [node_entry(child, details, sections) for child in node.children]
    elif sections is not None:
        children = [section_entry(s) for s in sections(node.path)]
    else:
        children = []
    return Entry(label=node.label, note=note, children=children)


def _file_note(item: ConfigItem, details: ItemDetails | None) -> str:
    if details is None:
        return ""
    if item.kind == "rule" and details.paths:
        return f"[{details.paths}]"
    parts = [details.description] if details.description else []
    if item.kind == "agent" and details.color:
        parts.append(f"[{details.color}]")
    return " ".join(parts)


def render_scope_groups(
    title: str,
    groups: Iterable[ScopeGroup],
    details: Mapping[str, ItemDetails] | None = None,
    sections: SectionSource | None = None,
) -> list[str]:
    entries = [
        Entry(
            label=f"{group.label} ({group.count})",
            children=[node_entry(node, details, sections) for node in group.nodes],
        )
        for group in groups
    ]
    if not entries:
        return [title, f"└── (no {title.lower()} found)"]
    return _titled(title, entries)


def render_outline(path: str, sections: list[Section]) -> list[str]:
    if not sections:
        return [path, "└── (no headings)"]
    return _titled(path, [section_entry(s) for s in sections])


def render_metadata(path: str, block: MetadataBlock | None) -> list[str]:
    if block is None:
        return [path, "└── (no metadata block)"]
    entries = []
    for key, value in block.items():
        if isinstance(value, list):
            shown = "[" + ", ".join(value) + "]"
        elif isinstance(value, bool):
            shown = "true" if value else "false"
        else:
            shown = str(value)
        entries.append(Entry(label=f"{key}: {shown}", note=type(value).__name__))
    return _titled(path, entries)


# ── Rules ─────────────────────────────────────────────────────


def preview(text: str, limit: int = 50) -> str:
    """First ``limit`` characters of ``text``, with ``...`` when cut."""
    return text[:limit] + "..." if len(text) > limit else text


def is_global_location(location: str) -> bool:
    return "User" in location


def hook_entry(hook: HookRule, preview_length: int = 50) -> Entry:
    kind = "Command" if hook.kind == "command" else "Prompt"
    note = f"{hook.timeout_seconds:g}s timeout" if hook.timeout_seconds else ""
    return Entry(label=f"{kind}: {preview(hook.command_or_prompt, preview_length)}", note=note)


def render_hooks(groups: Mapping[str, LocationGroup], preview_length: int = 50) -> list[str]:
    if not groups:
        return ["Hooks", "└── (no hooks configured)"]
    entries = []
    for location, group in groups.items():
        scope = "Global" if is_global_location(location) else "Project"
        events = [
            Entry(
                label=f"{event.event_type} [{event.count} hooks]",
                children=[
                    Entry(
                        label=f'Matcher: "{matcher.label}" [{matcher.count} hooks]',
                        children=[hook_entry(h, preview_length) for h in matcher.hooks],
                    )
                    for matcher in event.matchers
                ],
            )
            for event in group.events.values()
        ]
        entries.append(Entry(label=f"{scope} ({group.count})", note=location, children=events))
    return _titled(f"Hooks ({count_hooks(groups)})", entries)


def permission_entry(rule: PermissionRule) -> Entry:
    return Entry(label=rule.pattern, note=rule.location)


def render_permissions(groups: Mapping[str, tuple[ToolGroup, ...]]) -> list[str]:
    if not groups:
        return ["Permissions", "└── (no permissions configured)"]
    entries = [
        Entry(
            label=f"{decision.title()} ({count_rules(tools)})",
            children=[
                Entry(
                    label=f"{tool.tool} ({tool.count})",
                    children=[permission_entry(r) for r in tool.rules],
                )
                for tool in tools
            ],
        )
        for decision, tools in groups.items()
    ]
    return _titled("Permissions", entries)
