"""Registry of admission webhook handlers keyed by URL path."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

_log = logging.getLogger(__name__)

# All admission webhook handlers, keyed by path.
HANDLER_MAP: dict[str, Any] = {}


class WebhookServer(Protocol):
    def register(self, path: str, handler: Any) -> None: ...


class Manager(Protocol):
    webhook_server: WebhookServer


def register_handlers(handlers: Mapping[str, Any], target: dict[str, Any] | None = None) -> None:
    """Add ``handlers`` to ``target`` (the global map by default).

    Empty paths are skipped, paths get a leading slash, and a handler
    replaces any already registered at the same path.
    """
    registry = HANDLER_MAP if target is None else target
    for path, handler in handlers.items():
        if not path:
            _log.info("Skip handler with empty path.")
            continue
        if not path.startswith("/"):
            path = "/" + path
        if path in registry:
            _log.debug("conflicting webhook path in handler map: path=%s", path)
        registry[path] = handler


def setup_with_manager(manager: Manager, handlers: Mapping[str, Any] | None = None) -> None:
    """Register every handler with the manager's webhook server."""
    server = manager.webhook_server
    for path, handler in (HANDLER_MAP if handlers is None else handlers).items():
        server.register(path, handler)
        _log.debug("Registered webhook handler: path=%s", path)