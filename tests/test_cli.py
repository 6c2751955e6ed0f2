"""Tests for the command line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ccm.__main__ import main


@pytest.fixture
def roots(tmp_path: Path, monkeypatch) -> tuple[Path, Path]:
    home = tmp_path / "home" / ".claude"
    project = tmp_path / "proj"
    home.mkdir(parents=True)
    project.mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CCM_GLOBAL_ROOT", str(home))
    monkeypatch.setenv("CCM_PROJECT_ROOT", str(project))
    for key in ("CCM_STRICT_FENCES", "CCM_PREVIEW_LENGTH", "CCM_SHOW_SECTIONS", "CCM_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    return home, project


def _write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestTree:
    def test_commands(self, roots, capsys):
        home, project = roots
        _write(home / "commands" / "deploy.md", "---\ndescription: Ship it\n---\n# Deploy\n")
        _write(project / ".claude" / "commands" / "git" / "commit.md", "# Commit\n")

        assert main(["tree", "command"]) == 0

        out = capsys.readouterr().out.splitlines()
        assert out == [
            "Commands",
            "├── Global (1)",
            "│   └── deploy  (Ship it)",
            "└── Project (1)",
            "    └── git",
            "        └── commit",
        ]

    def test_memories_named_by_location(self, roots, capsys):
        home, project = roots
        _write(home / "CLAUDE.md", "# Global\n")
        _write(project / "CLAUDE.md", "# Project\n")
        _write(project / ".claude" / "CLAUDE.md", "# Local\n")
        _write(project / "lib" / "CLAUDE.md", "# Lib\n")
        _write(project / "src" / "CLAUDE.md", "# Src\n")

        assert main(["tree", "memory"]) == 0

        assert capsys.readouterr().out.splitlines() == [
            "Memories",
            "├── Global (1)",
            "│   └── CLAUDE.md",
            "├── Project (2)",
            "│   ├── CLAUDE.md",
            "│   └── .claude/CLAUDE.md",
            "└── Nested (2)",
            "    ├── lib/CLAUDE.md",
            "    └── src/CLAUDE.md",
        ]

    def test_agent_description_skips_block_scalar(self, roots, capsys):
        home, _ = roots
        _write(
            home / "agents" / "rev.md",
            "---\ndescription: >-\n  Reviews code\ncolor: blue\n---\n# Rev\n",
        )

        assert main(["tree", "agent"]) == 0

        assert capsys.readouterr().out.splitlines()[-1] == "    └── rev  ([blue])"

    def test_all_kinds_by_default(self, roots, capsys):
        assert main([]) == 0
        out = capsys.readouterr().out
        for title in ("Memories", "Commands", "Agents", "Skills", "Rules"):
            assert f"{title}\n└── (no {title.lower()} found)" in out

    def test_unknown_kind(self, roots, capsys):
        assert main(["tree", "widgets"]) == 1
        assert "Unknown kind(s): widgets" in capsys.readouterr().out

    def test_show_sections_from_toml(self, roots, capsys, tmp_path: Path):
        home, _ = roots
        _write(tmp_path / "ccm.toml", "[render]\nshow_sections = true\n")
        _write(home / "agents" / "reviewer.md", "# Reviewer\n\n## Checks\n")

        assert main(["tree", "agent"]) == 0

        out = capsys.readouterr().out.splitlines()
        assert out[-3:] == [
            "    └── reviewer",
            "        ├── Reviewer  (H1 L1)",
            "        └──   Checks  (H2 L3)",
        ]


class TestDocuments:
    def test_outline(self, roots, capsys, tmp_path: Path):
        doc = _write(tmp_path / "doc.md", "# One\n```\n# skip\n```\n## Two\n")
        assert main(["outline", str(doc)]) == 0
        assert capsys.readouterr().out.splitlines() == [
            str(doc),
            "├── One  (H1 L1)",
            "└──   Two  (H2 L5)",
        ]

    def test_outline_missing_file(self, roots, capsys, tmp_path: Path):
        missing = tmp_path / "missing.md"
        assert main(["outline", str(missing)]) == 0
        assert capsys.readouterr().out.splitlines() == [str(missing), "└── (no headings)"]

    def test_meta(self, roots, capsys, tmp_path: Path):
        doc = _write(tmp_path / "agent.md", "---\nname: reviewer\ntimeout: 30\n---\nbody\n")
        assert main(["meta", str(doc)]) == 0
        assert capsys.readouterr().out.splitlines() == [
            str(doc),
            "├── name: reviewer  (str)",
            "└── timeout: 30  (int)",
        ]

    def test_meta_needs_a_path(self, roots, capsys):
        assert main(["meta"]) == 1
        assert "Usage" in capsys.readouterr().out


class TestRules:
    def test_hooks(self, roots, capsys):
        home, _ = roots
        _write(
            home / "settings.json",
            json.dumps(
                {"hooks": {"Stop": [{"hooks": [{"type": "command", "command": "say done"}]}]}}
            ),
        )

        assert main(["hooks"]) == 0

        assert capsys.readouterr().out.splitlines() == [
            "Hooks (1)",
            "└── Global (1)  (User settings)",
            "    └── Stop [1 hooks]",
            '        └── Matcher: "*" [1 hooks]',
            "            └── Command: say done",
        ]

    def test_preview_length_from_env(self, roots, capsys, monkeypatch):
        home, _ = roots
        monkeypatch.setenv("CCM_PREVIEW_LENGTH", "3")
        _write(
            home / "settings.json",
            json.dumps(
                {"hooks": {"Stop": [{"hooks": [{"type": "command", "command": "say done"}]}]}}
            ),
        )
        assert main(["hooks"]) == 0
        assert capsys.readouterr().out.splitlines()[-1].endswith("Command: say...")

    def test_permissions(self, roots, capsys):
        _, project = roots
        _write(
            project / ".claude" / "settings.json",
            json.dumps({"permissions": {"allow": ["Write", "Bash(npm test)"]}}),
        )

        assert main(["permissions"]) == 0

        assert capsys.readouterr().out.splitlines() == [
            "Permissions",
            "└── Allow (2)",
            "    ├── Bash (1)",
            "    │   └── npm test  (Project settings)",
            "    └── Write (1)",
            "        └── *  (Project settings)",
        ]

    def test_nothing_configured(self, roots, capsys):
        assert main(["permissions"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "Permissions",
            "└── (no permissions configured)",
        ]


class TestUsage:
    def test_unknown_command(self, roots, capsys):
        assert main(["frobnicate"]) == 1
        assert "Usage: python -m ccm" in capsys.readouterr().out
