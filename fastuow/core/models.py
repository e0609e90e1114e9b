from __future__ import annotations

import abc
from contextlib import AbstractContextManager
from typing import (
    Any,
    Callable,
    Generic,
    List,
    Optional,
    Protocol,
    Sequence,
    Type,
    TypeVar,
)

from fastuow.core.errors import FastUoWError


class Entity(Protocol):
    """Entity 프로토콜 명세."""

    id: Any  # PK 컬럼으로 id 라는 필드를 제공해야 합니다.


E = TypeVar("E", bound=Entity)
T = TypeVar("T")


class AbstractTransaction(Protocol):
    """세션이 소유한 트랜잭션."""

    @property
    def is_active(self) -> bool:
        ...


class AbstractSession(Protocol):
    """UoW가 사용하는 세션 인터페이스.

    ``sqlalchemy.orm.Session`` 이 그대로 이 프로토콜을 만족합니다.
    """

    def begin(self) -> Any:
        ...

    def get_transaction(self) -> Optional[AbstractTransaction]:
        ...

    def add(self, instance: Any) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...

    def close(self) -> None:
        ...


class AbstractSessionFactory(Protocol):
    """새 세션을 여는 팩토리."""

    def open_session(self) -> AbstractSession:
        ...


class AbstractRepository(Generic[E], abc.ABC):
    """Repository 패턴의 추상 인터페이스 입니다.

    세션의 생명주기는 UoW 가 관리하므로 레포지터리는 세션을 닫지 않습니다.
    """

    entity_class: Type[E]

    def add(self, item: E) -> None:
        """레포지터리에 :class:`E` 객체를 추가(persist)합니다."""
        self._add(item)

    @abc.abstractmethod
    def _add(self, item: E) -> None:
        raise NotImplementedError

    def get(self, id: Any = None, **kwargs: Any) -> Optional[E]:
        """주어진 id 혹은 필드 조건에 해당하는 :class:`E` 객체를 조회합니다.

        못 찾을 경우 ``None`` 을 리턴합니다.
        """
        if kwargs:
            return self._get(None, **kwargs)
        return self._get(id)

    @abc.abstractmethod
    def _get(self, id: Any = None, **kwargs: Any) -> Optional[E]:
        raise NotImplementedError

    @abc.abstractmethod
    def all(self) -> List[E]:
        """모든 엔티티 리스트를 조회합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def query(self, statement: str, **params: Any) -> List[E]:
        """텍스트 SELECT 문을 실행해 엔티티 리스트로 돌려줍니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def delete(self, item: E) -> None:
        """레포지터리에서 :class:`E` 객체를 삭제합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def clear(self) -> None:
        """레포지터리 내의 모든 엔티티 데이터를 지웁니다."""
        raise NotImplementedError


EntityReposMap = dict[Type[Any], AbstractRepository]


class AbstractUowProtocol(Protocol):
    repos: EntityReposMap
    entity_classes: Sequence[Type[Any]]


class AbstractUnitOfWork(
    AbstractUowProtocol, AbstractContextManager["AbstractUnitOfWork"]
):
    """UnitOfWork 패턴의 추상 인터페이스입니다.

    하나의 세션/트랜잭션이 ``with`` 블록 하나에 묶입니다. 블록을 빠져나갈 때
    커밋되지 않은 변경은 롤백됩니다.
    """

    repos: EntityReposMap

    def __enter__(self) -> AbstractUnitOfWork:
        """``with`` 블록에 진입했을때 실행되는 메소드입니다."""
        return self

    def __exit__(self, *args: Any) -> None:
        """``with`` 블록에서 빠져나갈 때 실행되는 메소드입니다."""
        self.rollback()  # commit() 안되었을때 변경을 롤백합니다.
        # (이미 커밋 되었을 경우 rollback은 아무 효과도 없음)

    def __getitem__(self, key: Type[E]) -> AbstractRepository[E]:
        if key not in self.repos:
            raise FastUoWError("repository not found for: %r" % key)
        return self.repos[key]

    def run(self, operation: Callable[[AbstractUnitOfWork], T]) -> T:
        """`operation` 을 하나의 트랜잭션 안에서 실행하고 커밋합니다.

        `operation` 이 예외를 던지면 롤백 후 세션을 닫고 예외를 그대로
        호출자에게 전달합니다.
        """
        with self:
            result = operation(self)
            self.commit()
        return result

    def commit(self) -> None:
        """세션을 커밋합니다."""
        self._commit()

    @abc.abstractmethod
    def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self) -> None:
        """세션을 롤백합니다."""
        raise NotImplementedError
