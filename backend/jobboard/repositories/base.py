"""Base repository utilities."""

from __future__ import annotations

from typing import Any, Generic, Optional, Sequence, TypeVar

from sqlalchemy.orm import Query, Session

TModel = TypeVar("TModel")

# Signed 64-bit INTEGER range; Python ints outside it cannot be bound.
DB_INT_MAX = 2**63 - 1
DB_INT_MIN = -(2**63)


def fits_db_int(value: int) -> bool:
    return DB_INT_MIN <= value <= DB_INT_MAX


class SQLAlchemyRepository(Generic[TModel]):
    """Session holder with the lookups shared by every model repository.

    Subclasses set ``model``; queries are built per call and never cached.
    """

    model: type[TModel]

    def __init__(self, session: Session) -> None:
        self.session = session

    def query(self) -> Query:
        """Fresh, unexecuted query over the repository's model."""
        return self.session.query(self.model)

    def get(self, pk: int) -> Optional[TModel]:
        if not fits_db_int(pk):
            return None
        return self.session.get(self.model, pk)

    def first_where(self, *criteria: Any) -> Optional[TModel]:
        return self.query().filter(*criteria).first()

    def list_where(self, *criteria: Any, order_by: Sequence[Any] = ()) -> list[TModel]:
        return self.query().filter(*criteria).order_by(*order_by).all()

    def add(self, instance: TModel) -> TModel:
        self.session.add(instance)
        return instance

    def remove(self, instance: TModel) -> None:
        self.session.delete(instance)

    def refresh(self, instance: TModel) -> TModel:
        self.session.refresh(instance)
        return instance

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
