"""Read-only discovery of configuration files under the global and project roots.

Produces the flat inputs the tree, document and rules modules work on:
ConfigItem lists per kind, document text, and parsed settings files.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from ccm.models import ConfigItem, HookConfig, ItemKind, PermissionRule, Scope
from ccm.rules.hooks import hook_configs_from_settings
from ccm.rules.permissions import permission_rules_from_settings

if TYPE_CHECKING:
    from ccm.config import CcmConfig

logger = logging.getLogger(__name__)

MEMORY_FILENAME = "CLAUDE.md"

KIND_DIRS: dict[str, str] = {
    "command": "commands",
    "agent": "agents",
    "skill": "skills",
    "rule": "rules",
}

# Skills are bundles (scripts, templates, ...); the other kinds are markdown only.
_MARKDOWN_ONLY = {"command", "agent", "rule"}


class ConfigDiscovery:
    """Enumerates memories, kind folders and settings files of both scopes."""

    def __init__(
        self,
        global_root: Path,
        project_root: Path,
        skip_dirs: list[str] | None = None,
    ) -> None:
        self.global_root = global_root
        self.project_root = project_root
        self.skip_dirs = set(skip_dirs if skip_dirs is not None else [".git", "node_modules"])

    @classmethod
    def from_config(cls, config: CcmConfig) -> ConfigDiscovery:
        return cls(config.global_root, config.project_root, config.discovery.skip_dirs)

    @property
    def project_claude_dir(self) -> Path:
        return self.project_root / ".claude"

    def _scope_roots(self) -> list[tuple[Scope, Path]]:
        roots: list[tuple[Scope, Path]] = [("global", self.global_root)]
        # Running from $HOME makes the project .claude the global one
        if self.project_claude_dir != self.global_root:
            roots.append(("project", self.project_claude_dir))
        return roots

    # ── Items ─────────────────────────────────────────────────

    def base_dirs(self, kind: ItemKind) -> dict[str, Path]:
        """Base directory per scope for ``kind``; empty for flat kinds (memory)."""
        dirname = KIND_DIRS.get(kind)
        if dirname is None:
            return {}
        return {scope: root / dirname for scope, root in self._scope_roots()}

    def items(self, kind: ItemKind) -> list[ConfigItem]:
        """All items of ``kind`` in both scopes, in sorted walk order."""
        if kind == "memory":
            return self.memories()
        if kind not in KIND_DIRS:
            logger.warning("Unknown item kind: %s", kind)
            return []

        found: list[ConfigItem] = []
        for scope, base in self.base_dirs(kind).items():
            found.extend(self._walk_kind(base, scope, kind))
        return found

    def _walk_kind(self, base: Path, scope: Scope, kind: ItemKind) -> Iterator[ConfigItem]:
        if not base.is_dir():
            return
        markdown_only = kind in _MARKDOWN_ONLY
        for root, dirs, files in os.walk(base):
            dirs[:] = sorted(d for d in dirs if d not in self.skip_dirs and not d.startswith("."))
            files.sort()

            root_path = Path(root)
            if root_path != base:
                yield ConfigItem(
                    name=root_path.name,
                    path=str(root_path),
                    scope=scope,
                    kind=kind,
                    is_directory=True,
                )
            for file_name in files:
                if file_name.startswith("."):
                    continue
                if markdown_only and not file_name.lower().endswith(".md"):
                    continue
                yield ConfigItem(
                    name=file_name,
                    path=str(root_path / file_name),
                    scope=scope,
                    kind=kind,
                )

    def memories(self) -> list[ConfigItem]:
        """CLAUDE.md files: global, project root, and nested in subdirectories."""
        found: list[ConfigItem] = []

        # Names are relative to the scope root, e.g. "src/CLAUDE.md"
        def add(path: Path, scope: Scope, root: Path) -> None:
            if path.is_file():
                name = path.relative_to(root).as_posix()
                found.append(ConfigItem(name=name, path=str(path), scope=scope, kind="memory"))

        add(self.global_root / MEMORY_FILENAME, "global", self.global_root)
        if self.project_claude_dir == self.global_root or not self.project_root.is_dir():
            return found
        add(self.project_root / MEMORY_FILENAME, "project", self.project_root)
        add(self.project_claude_dir / MEMORY_FILENAME, "project", self.project_root)

        for root, dirs, files in os.walk(self.project_root):
            dirs[:] = sorted(d for d in dirs if d not in self.skip_dirs and not d.startswith("."))
            root_path = Path(root)
            if root_path != self.project_root and MEMORY_FILENAME in files:
                add(root_path / MEMORY_FILENAME, "nested", self.project_root)
        return found

    # ── Documents ─────────────────────────────────────────────

    @staticmethod
    def read_text(path: str) -> str | None:
        """Read one document, or None when it cannot be read."""
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            return None

    # ── Settings ──────────────────────────────────────────────

    def settings_files(self) -> list[tuple[str, Path]]:
        """(location label, path) for every settings file, existing or not."""
        files = [("User settings", self.global_root / "settings.json")]
        if self.project_claude_dir != self.global_root:
            files.append(("Project settings", self.project_claude_dir / "settings.json"))
        files.append(("Project local settings", self.project_claude_dir / "settings.local.json"))
        return files

    def load_settings(self) -> list[tuple[str, Path, dict]]:
        """Parse every existing settings file; broken files are logged and skipped."""
        loaded: list[tuple[str, Path, dict]] = []
        for location, path in self.settings_files():
            if not path.is_file():
                continue
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning("Skipping settings file %s: %s", path, e)
                continue
            if not isinstance(data, dict):
                logger.warning("Skipping settings file %s: top level is not an object", path)
                continue
            loaded.append((location, path, data))
        return loaded

    def hook_configs(self) -> list[HookConfig]:
        configs: list[HookConfig] = []
        for location, path, data in self.load_settings():
            configs.extend(hook_configs_from_settings(data, location, str(path)))
        return configs

    def permission_rules(self) -> list[PermissionRule]:
        rules: list[PermissionRule] = []
        for location, path, data in self.load_settings():
            rules.extend(permission_rules_from_settings(data, location, str(path)))
        return rules
