from __future__ import annotations

from abc import ABC, abstractmethod

from .._models import Snapshot


class SnapshotStorage(ABC):
    def prepare(self) -> None:
        """(Optional) Executed upon session creation."""
        pass

    @abstractmethod
    def save(self, snapshot: Snapshot) -> None:
        """Persists the snapshot under `snapshot.name`, replacing any previous one. Raises `StoreError` on failure"""
        pass

    @abstractmethod
    def load(self, name: str) -> Snapshot:
        """Loads the snapshot stored as `name`. Raises `SnapshotNotFound` if missing"""
        pass

    @abstractmethod
    def exists(self, name: str) -> bool:
        pass

    @abstractmethod
    def remove(self, name: str) -> None:
        """Deletes the snapshot stored as `name`. Raises `SnapshotNotFound` if missing"""
        pass
