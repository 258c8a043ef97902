"""Store backends for zones, edges and the dispatch log."""

from .store import DispatchStore, get_dispatch_store

__all__ = ["DispatchStore", "get_dispatch_store"]
