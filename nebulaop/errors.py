"""Errors raised while reconciling cluster state."""

from __future__ import annotations

from typing import Any


class ReconcileError(Exception):
    """A reconcile step that must be retried later."""

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return self.msg


def reconcile_error(fmt: str, *args: Any) -> ReconcileError:
    """Build a ReconcileError from a %-style format and its arguments."""
    return ReconcileError(fmt % args if args else fmt)


def is_reconcile_error(err: BaseException | None) -> bool:
    """Tell whether ``err`` is a ReconcileError."""
    return isinstance(err, ReconcileError)