"""
Flat-file record storage: one JSON file per record, one directory per collection.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Protocol, Union

from errors import StorageError

logger = logging.getLogger(__name__)

MAX_INSERT_ATTEMPTS = 1000


class RecordStore(Protocol):
    """Storage capability injected into AnimalService."""

    async def list_records(self, collection: str) -> List[Dict[str, Any]]: ...

    async def write_record(self, path: str, record: Dict[str, Any]) -> None: ...

    async def insert_record(self, collection: str, record: Dict[str, Any]) -> str: ...


def _sort_key(path: Path):
    # numeric ids sort numerically, anything else after them by name
    stem = path.stem
    return (0, int(stem), stem) if stem.isdigit() else (1, 0, stem)


def _dump(record: Dict[str, Any]) -> str:
    return json.dumps(record, ensure_ascii=False, indent=2)


class JsonFileStore:
    """RecordStore backed by the local filesystem.

    Records live at <base_dir>/<collection>/<id>.json. Files are always
    written to a temp file first, so readers never see half a record.
    """

    def __init__(self, base_dir: Union[str, Path] = "./data"):
        self.base_dir = Path(base_dir).resolve()

    def _resolve(self, path: str) -> Path:
        clean = Path(path).as_posix().lstrip("/")
        full = (self.base_dir / clean).resolve()
        try:
            full.relative_to(self.base_dir)
        except ValueError:
            raise ValueError(f"Invalid path: {path} (outside base directory)")
        return full

    def record_path(self, collection: str, record_id: str) -> str:
        return f"{collection}/{record_id}.json"

    def _read_all(self, collection: str) -> List[Dict[str, Any]]:
        directory = self._resolve(collection)
        if not directory.is_dir():
            return []
        records = []
        for path in sorted(directory.glob("*.json"), key=_sort_key):
            try:
                records.append(json.loads(path.read_text(encoding="utf-8")))
            except (OSError, ValueError) as e:
                logger.warning(
                    f"Skipping unreadable record: {e}",
                    extra={"path": str(path), "collection": collection},
                )
        return records

    def _temp_file(self, directory: Path, content: str) -> str:
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".part")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
        except BaseException:
            os.unlink(tmp)
            raise
        return tmp

    def _write(self, path: str, record: Dict[str, Any]) -> None:
        target = self._resolve(path)
        tmp = self._temp_file(target.parent, _dump(record))
        os.replace(tmp, target)

    def _insert(self, collection: str, record: Dict[str, Any]) -> str:
        directory = self._resolve(collection)
        candidate = self.count_records(collection) + 1
        for _ in range(MAX_INSERT_ATTEMPTS):
            record_id = str(candidate)
            tmp = self._temp_file(directory, _dump({**record, "id": record_id}))
            try:
                # link() refuses to replace an existing file, which makes the claim atomic
                os.link(tmp, self._resolve(self.record_path(collection, record_id)))
            except FileExistsError:
                candidate += 1
                continue
            finally:
                os.unlink(tmp)
            logger.info(
                "Record inserted",
                extra={"collection": collection, "animal_id": record_id},
            )
            return record_id
        raise StorageError(
            f"no free id after {MAX_INSERT_ATTEMPTS} attempts", "insert",
        )

    async def list_records(self, collection: str) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._read_all, collection)

    async def write_record(self, path: str, record: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._write, path, record)

    async def insert_record(self, collection: str, record: Dict[str, Any]) -> str:
        """Persist record under the next free sequential id and return that id."""
        return await asyncio.to_thread(self._insert, collection, record)

    def count_records(self, collection: str) -> int:
        directory = self._resolve(collection)
        if not directory.is_dir():
            return 0
        return sum(1 for _ in directory.glob("*.json"))
