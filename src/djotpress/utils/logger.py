"""Logger lookup for djotpress modules.

All loggers live under the ``djotpress`` namespace, so a site build can
silence or raise rendering diagnostics with a single
``logging.getLogger("djotpress").setLevel(...)``.
"""

from __future__ import annotations

import logging

ROOT_LOGGER = "djotpress"


def get_logger(name: str) -> logging.Logger:
    """Standard library logger for ``name``, namespaced under ``djotpress``.

    Example:
        >>> get_logger("djotpress.view").name
        'djotpress.view'
        >>> get_logger("site_build").name
        'djotpress.site_build'
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
