"""Entity store contract.

One store per record kind. Records are pydantic models; the store assigns
``id`` and ``created_date`` on create. ``filter`` takes a mapping of
field -> exact value or field -> {"$in": [values]}; ``sort`` is a field
name, prefixed with "-" for descending order. No store offers
transactions: every call is an independent write or read.
"""
from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

from courtside.models._common import new_id, utcnow

ModelT = TypeVar("ModelT", bound=BaseModel)

FilterSpec = Mapping[str, Any]


def matches_spec(record: BaseModel, spec: FilterSpec) -> bool:
    for field, condition in spec.items():
        value = getattr(record, field, None)
        if isinstance(condition, dict) and "$in" in condition:
            if value not in condition["$in"]:
                return False
        elif value != condition:
            return False
    return True


def sort_records(records: Iterable[ModelT], sort: Optional[str]) -> List[ModelT]:
    records = list(records)
    if not sort:
        return records
    descending = sort.startswith("-")
    field = sort.lstrip("-")
    present = [r for r in records if getattr(r, field, None) is not None]
    missing = [r for r in records if getattr(r, field, None) is None]
    present.sort(key=lambda r: getattr(r, field), reverse=descending)
    return present + missing


class EntityStore(ABC, Generic[ModelT]):
    def __init__(self, model_cls: Type[ModelT], kind: Optional[str] = None):
        self.model_cls = model_cls
        self.kind = kind or model_cls.__name__.replace("Model", "")

    def _new_record(self, fields: Mapping[str, Any]) -> ModelT:
        data = dict(fields)
        data["id"] = new_id()
        data["created_date"] = utcnow()
        return self.model_cls.model_validate(data)

    def _patched(self, record: ModelT, patch: Mapping[str, Any]) -> ModelT:
        data = record.model_dump()
        data.update(patch)
        data["id"] = record.id # id is immutable
        return self.model_cls.model_validate(data)

    @abstractmethod
    def create(self, fields: Mapping[str, Any]) -> ModelT: ...

    @abstractmethod
    def get(self, record_id: str) -> ModelT:
        """Raises NotFoundError when the record is missing."""

    @abstractmethod
    def update(self, record_id: str, patch: Mapping[str, Any]) -> ModelT: ...

    @abstractmethod
    def delete(self, record_id: str) -> None: ...

    @abstractmethod
    def filter(self, spec: FilterSpec, sort: Optional[str] = None) -> List[ModelT]: ...

    @abstractmethod
    def list(self, sort: Optional[str] = None) -> List[ModelT]: ...

    def first(self, spec: FilterSpec) -> Optional[ModelT]:
        found = self.filter(spec)
        return found[0] if found else None
