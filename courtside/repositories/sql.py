from typing import Any, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from courtside.core.exceptions import CollaboratorError, NotFoundError
from courtside.repositories.base import EntityStore, FilterSpec, ModelT


class SqlAlchemyEntityStore(EntityStore[ModelT]):
    """Maps one pydantic record kind onto one SQLAlchemy table."""

    def __init__(self, model_cls, orm_cls, session_factory: sessionmaker, kind: Optional[str] = None):
        super().__init__(model_cls, kind)
        self.orm_cls = orm_cls
        self.session_factory = session_factory

    def _column(self, field: str):
        column = getattr(self.orm_cls, field, None)
        if column is None:
            raise ValueError(f"{self.kind} has no field '{field}'")
        return column

    def _to_model(self, row) -> ModelT:
        return self.model_cls.model_validate(row)

    def create(self, fields: Mapping[str, Any]) -> ModelT:
        record = self._new_record(fields)
        try:
            with self.session_factory() as db:
                db.add(self.orm_cls(**record.model_dump()))
                db.commit()
        except SQLAlchemyError as e:
            raise CollaboratorError(f"Could not create {self.kind}: {e}") from e
        return record

    def get(self, record_id: str) -> ModelT:
        try:
            with self.session_factory() as db:
                row = db.get(self.orm_cls, record_id)
                if row is None:
                    raise NotFoundError(self.kind, record_id)
                return self._to_model(row)
        except SQLAlchemyError as e:
            raise CollaboratorError(f"Could not read {self.kind} {record_id}: {e}") from e

    def update(self, record_id: str, patch: Mapping[str, Any]) -> ModelT:
        try:
            with self.session_factory() as db:
                row = db.get(self.orm_cls, record_id)
                if row is None:
                    raise NotFoundError(self.kind, record_id)
                record = self._patched(self._to_model(row), patch)
                for key, value in record.model_dump().items():
                    setattr(row, key, value)
                db.commit()
                return record
        except SQLAlchemyError as e:
            raise CollaboratorError(f"Could not update {self.kind} {record_id}: {e}") from e

    def delete(self, record_id: str) -> None:
        try:
            with self.session_factory() as db:
                row = db.get(self.orm_cls, record_id)
                if row is None:
                    raise NotFoundError(self.kind, record_id)
                db.delete(row)
                db.commit()
        except SQLAlchemyError as e:
            raise CollaboratorError(f"Could not delete {self.kind} {record_id}: {e}") from e

    def _select(self, spec: FilterSpec, sort: Optional[str]):
        query = select(self.orm_cls)
        for field, condition in spec.items():
            column = self._column(field)
            if isinstance(condition, dict) and "$in" in condition:
                query = query.where(column.in_(list(condition["$in"])))
            elif condition is None:
                query = query.where(column.is_(None))
            else:
                query = query.where(column == condition)
        if sort:
            column = self._column(sort.lstrip("-"))
            query = query.order_by(column.desc().nullslast() if sort.startswith("-") else column.asc().nullslast())
        return query

    def filter(self, spec: FilterSpec, sort: Optional[str] = None) -> List[ModelT]:
        try:
            with self.session_factory() as db:
                return [self._to_model(row) for row in db.scalars(self._select(spec, sort)).all()]
        except SQLAlchemyError as e:
            raise CollaboratorError(f"Could not query {self.kind}: {e}") from e

    def list(self, sort: Optional[str] = None) -> List[ModelT]:
        return self.filter({}, sort)
