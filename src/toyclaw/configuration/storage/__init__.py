"""Storage configurations."""

from toyclaw.configuration.storage.local import LocalStorage

__all__ = ["LocalStorage"]
