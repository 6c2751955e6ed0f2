"""Configuration loading from environment variables and ccm.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_GLOBAL_ROOT = Path.home() / ".claude"
_CONFIG_FILENAME = "ccm.toml"
_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class OutlineConfig:
    """Heading outline options."""

    strict_fences: bool = False


@dataclass
class RenderConfig:
    """Text rendering options for the CLI."""

    preview_length: int = 50
    show_sections: bool = False


@dataclass
class DiscoveryConfig:
    """Directory walking options."""

    skip_dirs: list[str] = field(default_factory=lambda: [".git", "node_modules"])


@dataclass
class CcmConfig:
    """Top-level ccm configuration."""

    global_root: Path = _DEFAULT_GLOBAL_ROOT
    project_root: Path = field(default_factory=Path.cwd)
    outline: OutlineConfig = field(default_factory=OutlineConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    log_level: str = "WARNING"


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def load_config(config_path: Path | None = None) -> CcmConfig:
    """Load configuration from environment variables and optional ccm.toml.

    Priority: environment variables > ccm.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.claude/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, _DEFAULT_GLOBAL_ROOT / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    outline_data = file_data.get("outline", {})
    render_data = file_data.get("render", {})
    discovery_data = file_data.get("discovery", {})

    config = CcmConfig(
        global_root=Path(
            os.getenv("CCM_GLOBAL_ROOT", file_data.get("global_root", str(_DEFAULT_GLOBAL_ROOT)))
        ).expanduser(),
        project_root=Path(
            os.getenv("CCM_PROJECT_ROOT", file_data.get("project_root", str(Path.cwd())))
        ).expanduser(),
        outline=OutlineConfig(
            strict_fences=_as_bool(
                os.getenv("CCM_STRICT_FENCES", outline_data.get("strict_fences", False))
            ),
        ),
        render=RenderConfig(
            preview_length=int(
                os.getenv("CCM_PREVIEW_LENGTH", render_data.get("preview_length", 50))
            ),
            show_sections=_as_bool(
                os.getenv("CCM_SHOW_SECTIONS", render_data.get("show_sections", False))
            ),
        ),
        discovery=DiscoveryConfig(
            skip_dirs=list(discovery_data.get("skip_dirs", [".git", "node_modules"])),
        ),
        log_level=os.getenv("CCM_LOG_LEVEL", file_data.get("log_level", "WARNING")),
    )
    return config
