"""Optimistic updates with rollback for locally cached records."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

_MISSING = object()

T = TypeVar("T")


def patch_with_undo(target: MutableMapping, changes: Mapping) -> Callable[[], None]:
    """Apply ``changes`` to ``target`` and return a closure restoring the previous values."""

    previous = {key: target.get(key, _MISSING) for key in changes}
    target.update(changes)

    def undo() -> None:
        for key, value in previous.items():
            if value is _MISSING:
                target.pop(key, None)
            else:
                target[key] = value

    return undo


def apply_optimistic(target: MutableMapping, changes: Mapping, commit: Callable[[], T]) -> T:
    """Patch ``target`` before ``commit`` runs; restore it if ``commit`` raises."""

    undo = patch_with_undo(target, changes)
    try:
        return commit()
    except Exception:
        logger.warning("Rolling back optimistic update of %s", list(changes))
        undo()
        raise
