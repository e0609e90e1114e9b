"""레포지터리 패턴 구현."""
from __future__ import annotations

from typing import Any, List, Optional, Type, TypeVar

from sqlalchemy import delete, inspect, select, text
from sqlalchemy.orm import Session

from fastuow.core import AbstractRepository, Entity

E = TypeVar("E", bound=Entity)


class SqlAlchemyRepository(AbstractRepository[E]):
    """SqlAlchemy ORM을 저장소로 하는 :class:`AbstractRepository` 구현입니다.

    세션의 생명주기는 UoW가 관리합니다. 레포지터리는 세션을 닫지 않습니다.
    """

    def __init__(self, entity_class: Type[E], session: Session):
        """임의의 엔티티 E 를 받아 E에 대한 Repository를 초기화합니다."""
        super().__init__()
        self.entity_class = entity_class
        self.session = session

    def __repr__(self) -> str:
        return f"SqlAlchemyRepository[{self.entity_class}]"

    def _add(self, item: E) -> None:
        self.session.add(item)

    def _get(self, id: Any = None, **kwargs: Any) -> Optional[E]:
        if id is not None:
            return self.session.get(self.entity_class, id)

        filter_by = {k: v for k, v in kwargs.items() if v is not None}
        if not filter_by:
            return None

        stmt = select(self.entity_class).filter_by(**filter_by)
        return self.session.scalars(stmt).first()

    def delete(self, item: E) -> None:
        self.session.delete(item)

    def all(self) -> List[E]:
        pk = inspect(self.entity_class).primary_key
        return list(self.session.scalars(select(self.entity_class).order_by(*pk)))

    def query(self, statement: str, **params: Any) -> List[E]:
        """텍스트 SELECT 문 결과를 엔티티로 매핑합니다.

        Example: ::

            repo.query("SELECT * FROM events WHERE title = :title", title="x")
        """
        stmt = select(self.entity_class).from_statement(text(statement))
        return list(self.session.scalars(stmt, params))

    def clear(self) -> None:
        self.session.execute(delete(self.entity_class))
