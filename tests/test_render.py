"""Tests for plain-text rendering."""

from __future__ import annotations

import pytest

from ccm.models import (
    ConfigItem,
    HookConfig,
    ItemDetails,
    PermissionRule,
    Section,
    TreeNode,
)
from ccm.render import (
    Entry,
    is_global_location,
    node_entry,
    preview,
    render_entries,
    render_hooks,
    render_metadata,
    render_outline,
    render_permissions,
    render_scope_groups,
)
from ccm.rules.hooks import group_hooks
from ccm.rules.permissions import group_permissions
from ccm.tree.assembler import group_by_scope

BASE = "/home/u/.claude/commands"


def _item(rel: str, kind: str = "command", is_directory: bool = False) -> ConfigItem:
    return ConfigItem(
        name=rel.rsplit("/", 1)[-1],
        path=f"{BASE}/{rel}",
        scope="global",
        kind=kind,
        is_directory=is_directory,
    )


class TestEntries:
    def test_connectors(self):
        entries = [
            Entry("a", children=[Entry("a1"), Entry("a2", note="n")]),
            Entry("b", children=[Entry("b1")]),
        ]
        assert render_entries(entries) == [
            "├── a",
            "│   ├── a1",
            "│   └── a2  (n)",
            "└── b",
            "    └── b1",
        ]

    def test_empty(self):
        assert render_entries([]) == []


class TestTrees:
    def test_scope_group_with_descriptions(self):
        items = [_item("deploy.md"), _item("git", is_directory=True), _item("git/commit.md")]
        groups = group_by_scope(items, {"global": BASE})
        details = {f"{BASE}/deploy.md": ItemDetails(description="Ship it")}

        assert render_scope_groups("Commands", groups, details) == [
            "Commands",
            "└── Global (2)",
            "    ├── deploy  (Ship it)",
            "    └── git",
            "        └── commit",
        ]

    def test_rule_shows_paths(self):
        items = [_item("style.md", kind="rule")]
        groups = group_by_scope(items, {"global": BASE})
        details = {f"{BASE}/style.md": ItemDetails(description="Style", paths="src/**")}
        assert render_scope_groups("Rules", groups, details)[-1] == "    └── style  ([src/**])"

    def test_agent_shows_color(self):
        items = [_item("reviewer.md", kind="agent"), _item("planner.md", kind="agent")]
        groups = group_by_scope(items, {"global": BASE})
        details = {
            f"{BASE}/reviewer.md": ItemDetails(description="Reviews code", color="blue"),
            f"{BASE}/planner.md": ItemDetails(color="green"),
        }
        assert render_scope_groups("Agents", groups, details)[-2:] == [
            "    ├── reviewer  (Reviews code [blue])",
            "    └── planner  ([green])",
        ]

    def test_color_only_for_agents(self):
        groups = group_by_scope([_item("deploy.md")], {"global": BASE})
        details = {f"{BASE}/deploy.md": ItemDetails(description="Ship it", color="red")}
        assert render_scope_groups("Commands", groups, details)[-1] == "    └── deploy  (Ship it)"

    def test_sections_expand_files(self):
        groups = group_by_scope([_item("deploy.md")], {"global": BASE})
        lines = render_scope_groups(
            "Commands", groups, sections=lambda path: [Section("Steps", 2, 4)]
        )
        assert lines == [
            "Commands",
            "└── Global (1)",
            "    └── deploy",
            "        └──   Steps  (H2 L4)",
        ]

    def test_nothing_found(self):
        assert render_scope_groups("Agents", []) == ["Agents", "└── (no agents found)"]

    def test_unknown_payload(self):
        with pytest.raises(TypeError):
            node_entry(TreeNode(label="x", path="x", payload="not a payload"))


class TestDocuments:
    def test_outline(self):
        sections = [Section("Title", 1, 1), Section("Usage", 2, 3)]
        assert render_outline("doc.md", sections) == [
            "doc.md",
            "├── Title  (H1 L1)",
            "└──   Usage  (H2 L3)",
        ]

    def test_outline_empty(self):
        assert render_outline("doc.md", []) == ["doc.md", "└── (no headings)"]

    def test_metadata(self):
        block = {"name": "x", "tools": ["Read", "Write"], "enabled": True, "timeout": 30}
        assert render_metadata("a.md", block) == [
            "a.md",
            "├── name: x  (str)",
            "├── tools: [Read, Write]  (list)",
            "├── enabled: true  (bool)",
            "└── timeout: 30  (int)",
        ]

    def test_metadata_missing(self):
        assert render_metadata("a.md", None) == ["a.md", "└── (no metadata block)"]


class TestHooks:
    def test_hierarchy(self):
        configs = [
            HookConfig(
                event_type="PreToolUse",
                matchers=(
                    {"matcher": "Bash", "hooks": [
                        {"type": "command", "command": "x" * 60, "timeout": 30},
                    ]},
                ),
                location="User settings",
                config_path="/u.json",
            ),
            HookConfig(
                event_type="Stop",
                matchers=({"hooks": [{"type": "prompt", "prompt": "Wrap up"}]},),
                location="Project local settings",
                config_path="/p.json",
            ),
        ]
        assert render_hooks(group_hooks(configs)) == [
            "Hooks (2)",
            "├── Global (1)  (User settings)",
            "│   └── PreToolUse [1 hooks]",
            '│       └── Matcher: "Bash" [1 hooks]',
            "│           └── Command: " + "x" * 50 + "...  (30s timeout)",
            "└── Project (1)  (Project local settings)",
            "    └── Stop [1 hooks]",
            '        └── Matcher: "*" [1 hooks]',
            "            └── Prompt: Wrap up",
        ]

    def test_preview_length(self):
        configs = [
            HookConfig(
                event_type="Stop",
                matchers=({"hooks": [{"type": "command", "command": "abcdefgh"}]},),
                location="User settings",
                config_path="/u.json",
            )
        ]
        assert render_hooks(group_hooks(configs), preview_length=3)[-1].endswith("Command: abc...")

    def test_empty(self):
        assert render_hooks({}) == ["Hooks", "└── (no hooks configured)"]

    def test_preview(self):
        assert preview("short") == "short"
        assert preview("y" * 50) == "y" * 50
        assert preview("y" * 51) == "y" * 50 + "..."

    def test_global_location(self):
        assert is_global_location("User settings")
        assert not is_global_location("Project settings")


class TestPermissions:
    def test_hierarchy(self):
        rules = [
            PermissionRule("deny", "Read", "./.env", "Project settings"),
            PermissionRule("allow", "Write", "*", "User settings"),
            PermissionRule("allow", "Bash", "git status", "User settings"),
        ]
        assert render_permissions(group_permissions(rules)) == [
            "Permissions",
            "├── Allow (2)",
            "│   ├── Bash (1)",
            "│   │   └── git status  (User settings)",
            "│   └── Write (1)",
            "│       └── *  (User settings)",
            "└── Deny (1)",
            "    └── Read (1)",
            "        └── ./.env  (Project settings)",
        ]

    def test_empty(self):
        assert render_permissions({}) == ["Permissions", "└── (no permissions configured)"]
