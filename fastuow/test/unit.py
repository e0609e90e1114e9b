"""Test 헬퍼를 제공하는 모듈.

- DB 없이 UoW 흐름을 검증하기 위한 FakeSession, FakeSessionFactory 를 제공합니다.
- 서비스 단위 테스트를 위한 FakeRepository 와 FakeUnitOfWork 를 제공합니다.
"""
from __future__ import annotations

import itertools
from typing import Any, Optional, Type, TypeVar

from fastuow.core import (
    AbstractRepository,
    AbstractUnitOfWork,
    Entity,
    EntityReposMap,
    FastUoWError,
)

E = TypeVar("E", bound=Entity)


class FakeTransaction:
    def __init__(self):
        self.is_active = True


class FakeSession:
    """단위 테스트를 위한 Fake Session.

    Params:
        - fail_on_begin: ``begin()`` 에서 던질 예외
        - fail_on_commit: ``commit()`` 에서 던질 예외. 예외를 던지면 트랜잭션은
          비활성 상태가 됩니다 (flush 실패를 흉내냄).
    """

    def __init__(
        self,
        fail_on_begin: Optional[Exception] = None,
        fail_on_commit: Optional[Exception] = None,
    ):
        self.fail_on_begin = fail_on_begin
        self.fail_on_commit = fail_on_commit
        self.transaction: Optional[FakeTransaction] = None
        self.added = list[Any]()
        self.calls = list[str]()
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def begin(self) -> FakeTransaction:
        self.calls.append("begin")
        if self.fail_on_begin:
            raise self.fail_on_begin
        self.transaction = FakeTransaction()
        return self.transaction

    def get_transaction(self) -> Optional[FakeTransaction]:
        return self.transaction

    def add(self, item: Any) -> None:
        self.added.append(item)

    def commit(self) -> None:
        self.calls.append("commit")
        if self.fail_on_commit:
            if self.transaction:
                self.transaction.is_active = False
            raise self.fail_on_commit
        self.committed = True
        self.transaction = None

    def rollback(self) -> None:
        self.calls.append("rollback")
        self.rolled_back = True
        self.added.clear()
        self.transaction = None

    def close(self) -> None:
        self.calls.append("close")
        self.closed = True


class FakeSessionFactory:
    """열었던 세션을 모두 기록하는 Fake 세션 팩토리."""

    def __init__(self, **session_kwargs: Any):
        self.session_kwargs = session_kwargs
        self.sessions = list[FakeSession]()

    def open_session(self) -> FakeSession:
        session = FakeSession(**self.session_kwargs)
        self.sessions.append(session)
        return session

    @property
    def last(self) -> FakeSession:
        return self.sessions[-1]


class FakeRepository(AbstractRepository[E]):
    """단위 테스트를 위한 Fake 레포지터리.

    ``id`` 가 없는 엔티티가 추가되면 1부터 증가하는 id를 부여합니다.
    """

    def __init__(self, items: Optional[list[E]] = None):
        super().__init__()
        self._items = list(items) if items else []
        self._ids = itertools.count(1)

    def _add(self, item: E) -> None:
        if getattr(item, "id", None) is None:
            item.id = next(self._ids)
        self._items.append(item)

    def _get(self, id: Any = None, **kwargs: Any) -> Optional[E]:
        if not kwargs:
            return next((it for it in self._items if it.id == id), None)

        check = lambda it: all(getattr(it, k) == v for k, v in kwargs.items())
        return next((it for it in self._items if check(it)), None)

    def delete(self, item: E) -> None:
        self._items.remove(item)

    def all(self) -> list[E]:
        return list(self._items)

    def query(self, statement: str, **params: Any) -> list[E]:
        """SQL은 해석하지 않고 `params` 를 필드 조건으로 사용합니다."""
        return [
            it
            for it in self._items
            if all(getattr(it, k) == v for k, v in params.items())
        ]

    def clear(self) -> None:
        self._items = []


class FakeUnitOfWork(AbstractUnitOfWork):
    """단위 테스트를 위한 Fake UoW.

    커밋되지 않은 채로 ``with`` 블록을 빠져나가면 그 동안 추가된 아이템을
    되돌립니다.
    """

    def __init__(
        self,
        entity_classes: Optional[list[Type[Any]]] = None,
        repos: Optional[EntityReposMap] = None,
    ) -> None:
        super().__init__()

        if repos:
            self.repos = repos
        elif entity_classes:
            self.repos = {cls: FakeRepository() for cls in entity_classes}
        else:
            raise FastUoWError("entity_classes or repos should be given!")
        self.entity_classes = list(self.repos)
        self.committed = False
        self._snapshot: dict[Type[Any], list[Any]] = {}

    def __enter__(self) -> AbstractUnitOfWork:
        self.committed = False
        self._snapshot = {cls: repo.all() for cls, repo in self.repos.items()}
        return super().__enter__()

    def _commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        if self.committed:
            return
        for cls, items in self._snapshot.items():
            repo = self.repos[cls]
            repo.clear()
            for item in items:
                repo._add(item)
