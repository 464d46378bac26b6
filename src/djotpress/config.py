"""ContextVar-based render configuration for djotpress.

Provides thread-local configuration using Python's ContextVars (PEP 567).
The site build sets a config once; every render in that context reads it.

Usage:
    from djotpress.config import RenderConfig, render_config_context

    with render_config_context(RenderConfig(highlight=False)):
        html = render(doc, PageContext())

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Attributes:
        highlight: Run code blocks through the syntax highlighter
        show_linenos: Ask the highlighter for line numbers
        date_format: strftime format for the publish date shown in titles
        callout_style: List marker style that turns a list into a callout list

    """

    highlight: bool = True
    show_linenos: bool = False
    date_format: str = "%b %d, %Y"
    callout_style: str = "1)"

    @classmethod
    def from_dict(cls, config_dict: dict) -> "RenderConfig":
        """Create RenderConfig from dictionary.

        Only includes keys that are valid RenderConfig fields; unknown keys
        are silently ignored, so a site's whole settings table can be passed.

        Example:
            >>> config = RenderConfig.from_dict({"highlight": False, "title": "x"})
            >>> config.highlight
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


_DEFAULT_CONFIG: RenderConfig = RenderConfig()

_render_config: ContextVar[RenderConfig] = ContextVar(
    "render_config",
    default=_DEFAULT_CONFIG,
)


def get_render_config() -> RenderConfig:
    """Get current render configuration (context-local)."""
    return _render_config.get()


def set_render_config(config: RenderConfig) -> None:
    """Set render configuration for current context."""
    _render_config.set(config)


def reset_render_config() -> None:
    """Reset to the module-level default configuration."""
    _render_config.set(_DEFAULT_CONFIG)


@contextmanager
def render_config_context(config: RenderConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with render_config_context(RenderConfig(highlight=False)):
        ...     get_render_config().highlight
        False

    """
    previous = _render_config.get()
    _render_config.set(config)
    try:
        yield
    finally:
        _render_config.set(previous)


__all__ = [
    "RenderConfig",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
]
