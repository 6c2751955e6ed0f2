"""Per-node details for tooltips, kept beside the tree rather than on it."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import PurePath

from ccm.documents.metadata import parse_metadata_block
from ccm.models import ConfigItem, ItemDetails, MetadataBlock, TreeNode

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".markdown")


def _text(block: MetadataBlock, key: str) -> str | None:
    value = block.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, list):
        return ", ".join(value)
    return str(value)


def details_from_block(block: MetadataBlock | None) -> ItemDetails | None:
    """Pick the descriptive fields out of a metadata block."""
    if not block:
        return None
    details = ItemDetails(
        description=_text(block, "description"),
        color=_text(block, "color"),
        paths=_text(block, "paths"),
    )
    if details == ItemDetails():
        return None
    return details


def annotate(
    nodes: Iterable[TreeNode],
    read_text: Callable[[str], str | None],
) -> dict[str, ItemDetails]:
    """Build a path → ItemDetails table for the markdown files under ``nodes``.

    ``read_text`` is the document store; it returns None for files it cannot
    read. Files without descriptive metadata get no entry.
    """
    table: dict[str, ItemDetails] = {}
    for root in nodes:
        for node in root.walk():
            payload = node.payload
            if not isinstance(payload, ConfigItem) or payload.is_directory:
                continue
            if PurePath(payload.path).suffix.lower() not in MARKDOWN_SUFFIXES:
                continue
            details = details_from_block(parse_metadata_block(read_text(payload.path)))
            if details is not None:
                table[payload.path] = details
    logger.debug("Annotated %d nodes", len(table))
    return table
