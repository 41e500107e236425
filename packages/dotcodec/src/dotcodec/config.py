"""Codec settings and the module-level default settings."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotcodec.errors import ConfigurationError

logger = logging.getLogger("dotcodec.config")

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off", ""}


@dataclass(slots=True, frozen=True)
class CodecSettings:
    # Attribute the augmenter sets on parallel edges to tell them apart.
    edge_index_attribute: str = "comment"
    max_nesting_depth: int = 64
    warn_on_ambiguity: bool = False

    def __post_init__(self) -> None:
        if not self.edge_index_attribute:
            raise ConfigurationError("edge_index_attribute must not be empty")
        if self.max_nesting_depth < 1:
            raise ConfigurationError(
                f"max_nesting_depth must be positive, got {self.max_nesting_depth}"
            )

    @classmethod
    def from_env(cls, *, environ: Mapping[str, str] | None = None) -> CodecSettings:
        """Build settings from ``DOTCODEC_*`` environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()

        depth_text = env.get("DOTCODEC_MAX_NESTING_DEPTH")
        if depth_text is None:
            depth = defaults.max_nesting_depth
        else:
            try:
                depth = int(depth_text)
            except ValueError as exc:
                raise ConfigurationError(
                    f"DOTCODEC_MAX_NESTING_DEPTH is not an integer: {depth_text!r}", cause=exc
                ) from exc

        settings = cls(
            edge_index_attribute=env.get(
                "DOTCODEC_EDGE_INDEX_ATTRIBUTE", defaults.edge_index_attribute
            ),
            max_nesting_depth=depth,
            warn_on_ambiguity=_parse_flag(
                "DOTCODEC_WARN_ON_AMBIGUITY", env.get("DOTCODEC_WARN_ON_AMBIGUITY")
            ),
        )
        logger.debug("Loaded codec settings from environment: %s", settings)
        return settings


_default_settings: CodecSettings | None = None


def set_default_settings(settings: CodecSettings | None) -> None:
    """Set the module-level default settings; ``None`` resets to the environment."""
    global _default_settings
    _default_settings = settings


def get_default_settings() -> CodecSettings:
    """Get the module-level default settings, loading them from the environment once."""
    global _default_settings
    if _default_settings is None:
        _default_settings = CodecSettings.from_env()
    return _default_settings


def _parse_flag(name: str, text: str | None) -> bool:
    if text is None:
        return False
    lowered = text.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ConfigurationError(f"{name} is not a boolean flag: {text!r}")
