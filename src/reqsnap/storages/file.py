from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from .._codec import decode_snapshot, encode_snapshot
from .._models import Snapshot
from ..exceptions import SnapshotNotFound, StoreError
from ._base import SnapshotStorage

logger = logging.getLogger(__name__)


class FileSnapshotStorage(SnapshotStorage):
    """One JSON document per snapshot: `<base_dir>/<name>.<extension>`"""

    def __init__(self, base_dir: str | Path, extension: str = "json") -> None:
        self.base_dir = Path(base_dir)
        self.extension = extension.lstrip(".")

    def path_for(self, name: str) -> Path:
        return self.base_dir / f"{name}.{self.extension}"

    def prepare(self) -> None:
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as ex:
            raise StoreError(f"Unable to create the reference directory {self.base_dir}", ex) from ex

    def save(self, snapshot: Snapshot) -> None:
        destination = self.path_for(snapshot.name)
        content = encode_snapshot(snapshot)

        try:
            if not destination.parent.exists():
                logger.debug(f"Creating snapshot directory {destination.parent}")
                destination.parent.mkdir(parents=True, exist_ok=True)

            fd, tmp_name = tempfile.mkstemp(dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                    tmp_file.write(content)

                os.replace(tmp_name, destination)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

        except OSError as ex:
            raise StoreError(f"Unable to save snapshot '{snapshot.name}' at {destination}", ex) from ex

        logger.debug(f"Snapshot '{snapshot.name}' saved at {destination}")

    def load(self, name: str) -> Snapshot:
        source = self.path_for(name)

        try:
            content = source.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SnapshotNotFound(name, str(source)) from None
        except (OSError, UnicodeDecodeError) as ex:
            raise StoreError(f"Unable to read snapshot '{name}' at {source}", ex) from ex

        return decode_snapshot(name, content)

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def remove(self, name: str) -> None:
        target = self.path_for(name)

        try:
            target.unlink()
        except FileNotFoundError:
            raise SnapshotNotFound(name, str(target)) from None
        except OSError as ex:
            raise StoreError(f"Unable to remove snapshot '{name}' at {target}", ex) from ex
