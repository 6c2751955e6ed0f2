"""Path tree assembly: flat ConfigItem lists → nested, de-duplicated trees.

Discovery hands over one flat list per item kind and scope. This module turns
it into folder/file nodes relative to a base directory:

    commands/
    ├── deploy.md            → root file "deploy"
    └── git/
        ├── commit.md        → "git" (placeholder folder) → "commit"
        └── review/pr.md     → "git" → "review" → "pr"

Each call keeps its own path → node map, so assembling is pure and
independent calls never see each other's nodes.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import PurePath

from ccm.models import SCOPES, ConfigItem, FolderPlaceholder, NodePayload, ScopeGroup, TreeNode

logger = logging.getLogger(__name__)


@dataclass
class _Draft:
    """Mutable node used while a tree is being built."""

    label: str
    path: str
    payload: NodePayload
    children: list[_Draft] = field(default_factory=list)

    def freeze(self) -> TreeNode:
        return TreeNode(
            label=self.label,
            path=self.path,
            payload=self.payload,
            children=tuple(child.freeze() for child in self.children),
        )


def _relative_parts(path: str, base: PurePath) -> tuple[str, ...] | None:
    """Segments of ``path`` below ``base``, or None when it is not below it."""
    try:
        rel = PurePath(os.path.normpath(path)).relative_to(base)
    except ValueError:
        return None
    return tuple(p for p in rel.parts if p not in ("", "."))


def _file_label(item: ConfigItem) -> str:
    return PurePath(item.name).stem or item.name


class _Assembly:
    """State of a single assemble() call."""

    def __init__(self, base: PurePath) -> None:
        self.base = base
        self.nodes: dict[str, _Draft] = {}
        self.roots: list[_Draft] = []

    def _attach(self, node: _Draft, parent: _Draft | None) -> None:
        if parent is None:
            self.roots.append(node)
        else:
            parent.children.append(node)

    def ensure_folders(self, parts: tuple[str, ...], origin: ConfigItem) -> _Draft | None:
        """Walk ``parts`` from the base downward, creating missing folders.

        Returns the deepest folder, or None when it is occupied by a file.
        """
        parent: _Draft | None = None
        for depth in range(1, len(parts) + 1):
            key = PurePath(*parts[:depth]).as_posix()
            node = self.nodes.get(key)
            if node is None:
                name = parts[depth - 1]
                folder_path = str(self.base.joinpath(*parts[:depth]))
                node = _Draft(
                    label=name,
                    path=folder_path,
                    payload=FolderPlaceholder(
                        name=name, path=folder_path, scope=origin.scope, kind=origin.kind
                    ),
                )
                self.nodes[key] = node
                self._attach(node, parent)
            elif not _is_folder(node):
                logger.debug("Path %s is a file, cannot nest %s under it", key, origin.path)
                return None
            parent = node
        return parent

    def add_directory(self, item: ConfigItem, parts: tuple[str, ...]) -> None:
        folder = self.ensure_folders(parts, item)
        if folder is not None:
            folder.payload = item

    def add_file(self, item: ConfigItem, parts: tuple[str, ...]) -> None:
        key = PurePath(*parts).as_posix()
        if key in self.nodes:
            logger.debug("Skipping duplicate entry for %s", item.path)
            return

        parent = None
        if len(parts) > 1:
            parent = self.ensure_folders(parts[:-1], item)
            if parent is None:
                return

        node = _Draft(label=_file_label(item), path=item.path, payload=item)
        self.nodes[key] = node
        self._attach(node, parent)


def _is_folder(node: _Draft) -> bool:
    payload = node.payload
    if isinstance(payload, FolderPlaceholder):
        return True
    return payload.is_directory


def assemble(items: Iterable[ConfigItem], base_dir: str | PurePath) -> list[TreeNode]:
    """Build the folder/file tree for ``items`` relative to ``base_dir``.

    Children keep the order in which their paths were first seen. Items outside
    ``base_dir`` and the base directory itself are skipped.
    """
    base = PurePath(os.path.normpath(str(base_dir)))
    assembly = _Assembly(base)

    for item in items:
        parts = _relative_parts(item.path, base)
        if parts is None:
            logger.debug("Skipping %s: not under %s", item.path, base)
            continue
        if not parts:
            continue  # the container itself

        if item.is_directory:
            assembly.add_directory(item, parts)
        else:
            assembly.add_file(item, parts)

    return [root.freeze() for root in assembly.roots]


def _flat_node(item: ConfigItem) -> TreeNode:
    # Memory names are root-relative paths ("src/CLAUDE.md")
    label = item.name if item.is_directory or item.kind == "memory" else _file_label(item)
    return TreeNode(label=label, path=item.path, payload=item)


def group_by_scope(
    items: Iterable[ConfigItem],
    base_dirs: Mapping[str, str | PurePath] | None = None,
) -> list[ScopeGroup]:
    """Partition items into global/project/nested groups.

    Scopes with an entry in ``base_dirs`` are assembled into trees; the others
    (memory files, the nested scope) list their files flat, in input order.
    """
    base_dirs = base_dirs or {}
    by_scope: dict[str, list[ConfigItem]] = {scope: [] for scope in SCOPES}
    for item in items:
        if item.scope not in by_scope:
            logger.debug("Skipping %s: unknown scope %r", item.path, item.scope)
            continue
        by_scope[item.scope].append(item)

    groups: list[ScopeGroup] = []
    for scope in SCOPES:
        scoped = by_scope[scope]
        if not scoped:
            continue

        base = base_dirs.get(scope)
        if base is not None:
            nodes = assemble(scoped, base)
        else:
            nodes = [_flat_node(item) for item in scoped if not item.is_directory]
        if not nodes:
            continue
        # Files actually shown, after assemble() dropped skipped items
        count = sum(1 for root in nodes for node in root.walk() if not node.is_directory)
        groups.append(ScopeGroup(scope=scope, count=count, nodes=tuple(nodes)))
    return groups
