"""Entry point: python -m ccm <command>

- "tree [kind ...]": Scope-grouped trees of memories, commands, agents, skills, rules
- "outline FILE":    Heading outline of one document
- "meta FILE":       Leading metadata block of one document
- "hooks":           Hooks grouped by location, event and matcher
- "permissions":     Permission rules grouped by decision and tool
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ccm.config import CcmConfig, load_config
from ccm.discovery import ConfigDiscovery

TREE_KINDS = {
    "memory": "Memories",
    "command": "Commands",
    "agent": "Agents",
    "skill": "Skills",
    "rule": "Rules",
}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _emit(lines: list[str]) -> None:
    print("\n".join(lines))


def _run_tree(config: CcmConfig, kinds: list[str]) -> int:
    from ccm.documents.details import annotate
    from ccm.documents.outline import extract_outline
    from ccm.render import render_scope_groups
    from ccm.tree.assembler import group_by_scope

    unknown = [k for k in kinds if k not in TREE_KINDS]
    if unknown:
        print(f"Unknown kind(s): {', '.join(unknown)}. Choose from: {', '.join(TREE_KINDS)}")
        return 1

    discovery = ConfigDiscovery.from_config(config)

    strict = config.outline.strict_fences

    def file_sections(path: str):
        return extract_outline(discovery.read_text(path), strict_fences=strict)

    sections = file_sections if config.render.show_sections else None

    for kind in kinds or list(TREE_KINDS):
        groups = group_by_scope(discovery.items(kind), discovery.base_dirs(kind))
        details = annotate(
            [node for group in groups for node in group.nodes], discovery.read_text
        )
        _emit(render_scope_groups(TREE_KINDS[kind], groups, details, sections))
    return 0


def _run_outline(config: CcmConfig, path: str) -> int:
    from ccm.documents.outline import extract_outline
    from ccm.render import render_outline

    text = ConfigDiscovery.read_text(path)
    _emit(render_outline(path, extract_outline(text, strict_fences=config.outline.strict_fences)))
    return 0


def _run_meta(path: str) -> int:
    from ccm.documents.metadata import parse_metadata_block
    from ccm.render import render_metadata

    _emit(render_metadata(path, parse_metadata_block(ConfigDiscovery.read_text(path))))
    return 0


def _run_hooks(config: CcmConfig) -> int:
    from ccm.render import render_hooks
    from ccm.rules.hooks import group_hooks

    discovery = ConfigDiscovery.from_config(config)
    _emit(render_hooks(group_hooks(discovery.hook_configs()), config.render.preview_length))
    return 0


def _run_permissions(config: CcmConfig) -> int:
    from ccm.render import render_permissions
    from ccm.rules.permissions import group_permissions

    discovery = ConfigDiscovery.from_config(config)
    _emit(render_permissions(group_permissions(discovery.permission_rules())))
    return 0


def _usage() -> None:
    print("Usage: python -m ccm [tree|outline|meta|hooks|permissions]")
    print("  tree [kind ...]  — Scope-grouped trees (memory, command, agent, skill, rule)")
    print("  outline FILE     — Heading outline of a document")
    print("  meta FILE        — Leading metadata block of a document")
    print("  hooks            — Hooks by location, event and matcher")
    print("  permissions      — Permission rules by decision and tool")


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    cmd = args[0] if args else "tree"

    config = load_config()
    _setup_logging(config.log_level)

    if cmd == "tree":
        return _run_tree(config, args[1:])
    if cmd in ("outline", "meta") and len(args) == 2:
        path = str(Path(args[1]).expanduser())
        return _run_outline(config, path) if cmd == "outline" else _run_meta(path)
    if cmd == "hooks":
        return _run_hooks(config)
    if cmd == "permissions":
        return _run_permissions(config)

    _usage()
    return 1


if __name__ == "__main__":
    sys.exit(main())
