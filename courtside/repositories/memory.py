from typing import Any, Dict, List, Mapping, Optional

from courtside.core.exceptions import NotFoundError
from courtside.repositories.base import EntityStore, FilterSpec, ModelT, matches_spec, sort_records


class InMemoryEntityStore(EntityStore[ModelT]):
    """Keeps records in insertion order; hands out copies so callers can't mutate stored state."""

    def __init__(self, model_cls, kind: Optional[str] = None):
        super().__init__(model_cls, kind)
        self._records: Dict[str, ModelT] = {}

    def create(self, fields: Mapping[str, Any]) -> ModelT:
        record = self._new_record(fields)
        self._records[record.id] = record
        return record.model_copy(deep=True)

    def get(self, record_id: str) -> ModelT:
        record = self._records.get(record_id)
        if record is None:
            raise NotFoundError(self.kind, record_id)
        return record.model_copy(deep=True)

    def update(self, record_id: str, patch: Mapping[str, Any]) -> ModelT:
        if record_id not in self._records:
            raise NotFoundError(self.kind, record_id)
        record = self._patched(self._records[record_id], patch)
        self._records[record_id] = record
        return record.model_copy(deep=True)

    def delete(self, record_id: str) -> None:
        if self._records.pop(record_id, None) is None:
            raise NotFoundError(self.kind, record_id)

    def filter(self, spec: FilterSpec, sort: Optional[str] = None) -> List[ModelT]:
        found = [r.model_copy(deep=True) for r in self._records.values() if matches_spec(r, spec)]
        return sort_records(found, sort)

    def list(self, sort: Optional[str] = None) -> List[ModelT]:
        return sort_records([r.model_copy(deep=True) for r in self._records.values()], sort)
