"""Atomic replacement of a live permission engine.

Engines are immutable, so changing the RBAC configuration at runtime means
building a new engine off the serving path and swapping the reference that
readers use. Readers never see a partially built graph: the swap happens only
after construction succeeded, and a failed rebuild leaves the current engine
in place.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping

from ..logging import BuildObserver
from .engine import PermissionEngine
from .models import RBACConfig

logger = logging.getLogger(__name__)


class EngineHolder:
    """Thread-safe holder of the current :class:`PermissionEngine`.

    Usage::

        holder = EngineHolder(load_config())
        ...
        # request path: lock-free read of the current reference
        holder.engine.has_permission(user_perms, "posts:update")
        ...
        # admin path: rebuild, then swap
        holder.rebuild(new_config)
    """

    def __init__(
        self,
        config: RBACConfig | Mapping[str, Any],
        *,
        observer: BuildObserver | None = None,
    ) -> None:
        self._observer = observer
        self._lock = threading.Lock()
        self._engine = PermissionEngine(config, observer=observer)

    @property
    def engine(self) -> PermissionEngine:
        """The current engine. Hold on to it for the duration of one request."""
        return self._engine

    def rebuild(self, config: RBACConfig | Mapping[str, Any]) -> PermissionEngine:
        """Build a new engine from ``config`` and make it current.

        Construction errors propagate and the previous engine stays current.
        Construction runs outside the lock; only the swap is serialized, so
        of two racing rebuilds the one that finishes last wins.

        Returns:
            The previous engine.
        """
        engine = PermissionEngine(config, observer=self._observer)
        with self._lock:
            previous, self._engine = self._engine, engine
        logger.info("Swapped permission graph %s -> %s", previous.graph_id, engine.graph_id)
        return previous

    def swap(self, engine: PermissionEngine) -> PermissionEngine:
        """Install an engine built elsewhere. Returns the previous engine."""
        with self._lock:
            previous, self._engine = self._engine, engine
        return previous


__all__ = ["EngineHolder"]
