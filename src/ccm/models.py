"""Shared data model: configuration items, tree nodes, sections, rules.

Every type here is an immutable value. Producers build them once per call and
hand them to the caller; nothing holds on to them afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

Scope = Literal["global", "project", "nested"]
ItemKind = Literal["memory", "command", "skill", "agent", "rule", "settings"]
Decision = Literal["allow", "ask", "deny"]
HookKind = Literal["command", "prompt"]

SCOPES: tuple[Scope, ...] = ("global", "project", "nested")
DECISIONS: tuple[Decision, ...] = ("allow", "ask", "deny")

# Display token for a hook matcher that is absent or empty.
WILDCARD = "*"

SCOPE_LABELS: dict[str, str] = {
    "global": "Global",
    "project": "Project",
    "nested": "Nested",
}


# ── Discovered items ──────────────────────────────────────────


@dataclass(frozen=True)
class ConfigItem:
    """One discovered file or directory, tagged with its scope and kind."""

    name: str
    path: str
    scope: Scope
    kind: ItemKind
    is_directory: bool = False


@dataclass(frozen=True)
class FolderPlaceholder:
    """A folder synthesized for an ancestor segment nobody supplied."""

    name: str
    path: str
    scope: Scope
    kind: ItemKind


# ── Tree nodes ────────────────────────────────────────────────

# The payload type is the node's tag:
#   ConfigItem (is_directory=False) → file
#   ConfigItem (is_directory=True)  → explicit folder
#   FolderPlaceholder               → synthesized folder
NodePayload = Union[ConfigItem, FolderPlaceholder]


@dataclass(frozen=True)
class TreeNode:
    """A folder or file in an assembled tree."""

    label: str
    path: str
    payload: NodePayload
    children: tuple[TreeNode, ...] = ()

    @property
    def is_directory(self) -> bool:
        if isinstance(self.payload, FolderPlaceholder):
            return True
        return self.payload.is_directory

    @property
    def is_placeholder(self) -> bool:
        return isinstance(self.payload, FolderPlaceholder)

    @property
    def scope(self) -> Scope:
        return self.payload.scope

    @property
    def kind(self) -> ItemKind:
        return self.payload.kind

    def walk(self):
        """Yield this node and all its descendants, depth-first, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class ScopeGroup:
    """Root-level grouping of one scope's nodes."""

    scope: Scope
    count: int
    nodes: tuple[TreeNode, ...] = ()

    @property
    def label(self) -> str:
        return SCOPE_LABELS.get(self.scope, self.scope.title())


# ── Documents ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Section:
    """A heading found in a document."""

    title: str
    level: int
    line_number: int

    @property
    def depth(self) -> int:
        return self.level - 1


MetadataValue = Union[str, int, float, bool, list]
MetadataBlock = dict  # str → MetadataValue


@dataclass(frozen=True)
class ItemDetails:
    """Descriptive fields pulled from a document's metadata block."""

    description: str | None = None
    color: str | None = None
    paths: str | None = None


# ── Rules ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class HookConfig:
    """The matchers configured for one event in one settings file."""

    event_type: str
    matchers: tuple[dict, ...]
    location: str
    config_path: str


@dataclass(frozen=True)
class HookRule:
    """A single hook, flattened out of its settings file."""

    location: str
    event_type: str
    matcher_pattern: str | None
    hook_index: int
    kind: HookKind
    command_or_prompt: str
    timeout_seconds: float | None = None
    config_path: str = ""
    matcher_index: int = 0


@dataclass(frozen=True)
class PermissionRule:
    """One allow/ask/deny entry from a settings file."""

    decision: Decision
    tool: str
    pattern: str
    location: str
    config_path: str = ""

    @property
    def raw(self) -> str:
        """The rule as written in settings, e.g. ``Bash(npm run test:*)``."""
        if self.pattern == "*":
            return self.tool
        return f"{self.tool}({self.pattern})"


@dataclass(frozen=True)
class MatcherGroup:
    """Hooks sharing one matcher pattern under a location/event."""

    pattern: str | None
    hooks: tuple[HookRule, ...] = ()

    @property
    def label(self) -> str:
        return self.pattern if self.pattern else WILDCARD

    @property
    def count(self) -> int:
        return len(self.hooks)


@dataclass(frozen=True)
class EventGroup:
    """Matcher groups for one event type under a location."""

    event_type: str
    matchers: tuple[MatcherGroup, ...] = ()

    @property
    def count(self) -> int:
        return sum(m.count for m in self.matchers)


@dataclass(frozen=True)
class LocationGroup:
    """Event groups for one settings location."""

    location: str
    events: dict[str, EventGroup] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return sum(e.count for e in self.events.values())


@dataclass(frozen=True)
class ToolGroup:
    """Permission rules for one tool under a decision."""

    tool: str
    rules: tuple[PermissionRule, ...] = ()

    @property
    def count(self) -> int:
        return len(self.rules)

