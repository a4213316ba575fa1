from typing import Any, List, Mapping, Optional

from courtside.core.retry import retry_call
from courtside.repositories.base import EntityStore, FilterSpec, ModelT


class RetryingEntityStore(EntityStore[ModelT]):
    """
    Retries reads on CollaboratorError with exponential backoff.
    Writes go straight through: retrying a create/update could apply a
    ranking change twice, so the caller decides whether to try again.
    """

    def __init__(self, inner: EntityStore[ModelT], attempts: int = 3, backoff_seconds: float = 0.2, sleep=None):
        super().__init__(inner.model_cls, inner.kind)
        self.inner = inner
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds
        self._retry_kwargs = {"sleep": sleep} if sleep is not None else {}

    def _read(self, fn):
        return retry_call(fn, attempts=self.attempts, backoff_seconds=self.backoff_seconds, **self._retry_kwargs)

    def create(self, fields: Mapping[str, Any]) -> ModelT:
        return self.inner.create(fields)

    def get(self, record_id: str) -> ModelT:
        return self._read(lambda: self.inner.get(record_id))

    def update(self, record_id: str, patch: Mapping[str, Any]) -> ModelT:
        return self.inner.update(record_id, patch)

    def delete(self, record_id: str) -> None:
        self.inner.delete(record_id)

    def filter(self, spec: FilterSpec, sort: Optional[str] = None) -> List[ModelT]:
        return self._read(lambda: self.inner.filter(spec, sort))

    def list(self, sort: Optional[str] = None) -> List[ModelT]:
        return self._read(lambda: self.inner.list(sort))
