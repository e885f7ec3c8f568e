"""Package loggers.

Every module logs through ``get_logger(__name__)`` so that all output sits
under the ``plantilla`` hierarchy. That logger carries a NullHandler, so
applications see nothing until they configure logging themselves:

    logging.getLogger("plantilla").setLevel(logging.DEBUG)
"""

from __future__ import annotations

import logging

_ROOT = "plantilla"


def get_logger(name: str) -> logging.Logger:
    """Standard-library logger under the ``plantilla`` namespace.

    Names outside the namespace are nested under it:

        >>> get_logger("plugins").name
        'plantilla.plugins'
        >>> get_logger("plantilla.parser").name
        'plantilla.parser'
    """
    if name != _ROOT and not name.startswith(_ROOT + "."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
