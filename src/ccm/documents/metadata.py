"""Leading metadata block parsing.

Supports the flat subset used by command, agent, skill and rule files:

    ---
    name: code-reviewer
    description: "Reviews diffs before commit"
    tools: [Read, Grep, Glob]
    color: blue
    timeout: 30
    ---

One ``key: value`` per line. Values are coerced to bool, number, list of
strings, or left as strings. Nested blocks, multi-line scalars and anchors are
not interpreted; such lines are skipped and parsing carries on.
"""

from __future__ import annotations

import logging
import re

from ccm.models import MetadataBlock, MetadataValue

logger = logging.getLogger(__name__)

DELIMITER = "---"

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$")
# Block scalar headers (|, >-, |2+) and anchors/aliases (&name, *name)
_UNSUPPORTED_RE = re.compile(r"^(?:[|>][-+0-9]*|[&*].*)$")


def _unquote(value: str) -> tuple[str, bool]:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1], True
    return value, False


def coerce_value(raw: str) -> MetadataValue:
    """Convert one raw value to its primitive type."""
    value = raw.strip()
    value, quoted = _unquote(value)
    if quoted:
        return value

    if value in ("true", "false"):
        return value == "true"
    if _INT_RE.match(value):
        return int(value)
    if _FLOAT_RE.match(value):
        return float(value)
    if value.startswith("[") and value.endswith("]"):
        items = (_unquote(part.strip())[0] for part in value[1:-1].split(","))
        return [item for item in items if item]
    return value


def _parse_line(line: str) -> tuple[str, MetadataValue] | None:
    if not line.strip() or line.lstrip().startswith("#"):
        return None
    if line[0] in (" ", "\t"):
        return None  # nested content
    key, sep, raw = line.partition(":")
    key = key.strip()
    if not sep or not key:
        return None
    if _UNSUPPORTED_RE.match(raw.strip()):
        logger.debug("Skipping unsupported value for %s: %s", key, raw.strip())
        return None
    return key, coerce_value(raw)


def split_metadata(text: str | None) -> tuple[MetadataBlock | None, int]:
    """Parse the leading block and report the 1-based line where the body starts.

    Returns ``(None, 1)`` when the document has no complete block.
    """
    if not text:
        return None, 1

    lines = text.split("\n")
    first = lines[0].lstrip("\ufeff").rstrip()
    if first != DELIMITER:
        return None, 1

    block: MetadataBlock = {}
    for index in range(1, len(lines)):
        line = lines[index].rstrip("\r")
        if line.rstrip() == DELIMITER:
            return block, index + 2
        parsed = _parse_line(line)
        if parsed is None:
            continue
        key, value = parsed
        block[key] = value

    logger.debug("Metadata block is never closed, ignoring it")
    return None, 1


def parse_metadata_block(text: str | None) -> MetadataBlock | None:
    """Return the leading ``---`` block as a dict, or None if there is none."""
    block, _ = split_metadata(text)
    return block
