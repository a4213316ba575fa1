import json
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from courtside.core.exceptions import CollaboratorError, NotFoundError
from courtside.repositories.base import EntityStore, FilterSpec, ModelT, matches_spec, sort_records

logger = logging.getLogger(__name__)


class JsonFileEntityStore(EntityStore[ModelT]):
    """
    One JSON file per record kind holding a list of objects.
    Every call reads the whole file and every write rewrites it.
    """

    def __init__(self, model_cls, data_file_path: str, kind: Optional[str] = None):
        super().__init__(model_cls, kind)
        self.data_file_path = data_file_path
        os.makedirs(os.path.dirname(self.data_file_path) or ".", exist_ok=True)
        if not os.path.exists(self.data_file_path):
            self._save([])

    def _load(self) -> List[ModelT]:
        try:
            with open(self.data_file_path, "r") as f:
                content = f.read()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise CollaboratorError(f"Could not read {self.data_file_path}: {e}") from e
        if not content.strip():
            return []
        try:
            rows: List[Dict[str, Any]] = json.loads(content)
        except json.JSONDecodeError as e:
            # Refuse to continue: the next write would overwrite whatever is in the file
            raise CollaboratorError(f"Could not decode JSON from {self.data_file_path}: {e}") from e
        return [self.model_cls.model_validate(row) for row in rows]

    def _save(self, records: List[ModelT]) -> None:
        try:
            with open(self.data_file_path, "w") as f:
                json.dump([r.model_dump(mode="json") for r in records], f, indent=4, default=str)
        except OSError as e:
            raise CollaboratorError(f"Could not write {self.data_file_path}: {e}") from e

    def create(self, fields: Mapping[str, Any]) -> ModelT:
        records = self._load()
        record = self._new_record(fields)
        records.append(record)
        self._save(records)
        return record

    def get(self, record_id: str) -> ModelT:
        for record in self._load():
            if record.id == record_id:
                return record
        raise NotFoundError(self.kind, record_id)

    def update(self, record_id: str, patch: Mapping[str, Any]) -> ModelT:
        records = self._load()
        for i, record in enumerate(records):
            if record.id == record_id:
                records[i] = self._patched(record, patch)
                self._save(records)
                return records[i]
        raise NotFoundError(self.kind, record_id)

    def delete(self, record_id: str) -> None:
        records = self._load()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            raise NotFoundError(self.kind, record_id)
        self._save(remaining)

    def filter(self, spec: FilterSpec, sort: Optional[str] = None) -> List[ModelT]:
        return sort_records([r for r in self._load() if matches_spec(r, spec)], sort)

    def list(self, sort: Optional[str] = None) -> List[ModelT]:
        return sort_records(self._load(), sort)
