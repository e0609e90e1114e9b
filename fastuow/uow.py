"""UnitOfWork 패턴 모듈.

SqlAlchemy를 이용한 기본 구현체를 제공합니다.

- 세션을 열고 트랜잭션을 시작합니다.
- 작업이 성공하면 커밋, 실패하면 (트랜잭션이 살아있을 때만) 롤백합니다.
- 어떤 경우에도 세션을 닫습니다.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fastuow.core import (
    AbstractRepository,
    AbstractSessionFactory,
    AbstractUnitOfWork,
    EntityReposMap,
    FastUoWError,
    OperationFailure,
)
from fastuow.logging import get_logger
from fastuow.repo import SqlAlchemyRepository

RepoMakerFunc = Callable[[Session], AbstractRepository]
RepoMakerDict = dict[Type[Any], RepoMakerFunc]
T = TypeVar("T")


logger = get_logger("fastuow.uow")


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):  # type: ignore
    """``SqlAlchemy`` ORM을 이용한 UnitOfWork 패턴 구현입니다.

    Example: ::

        uow = SqlAlchemyUnitOfWork([Event], session_factory)
        uow.run(lambda uow: uow[Event].add(Event("hello", datetime.now())))
    """

    # pylint: disable=super-init-not-called
    def __init__(
        self,
        entity_classes: Sequence[Type[Any]],
        session_factory: AbstractSessionFactory,
        repo_maker: Optional[RepoMakerDict] = None,
    ) -> None:
        """``SqlAlchemy`` 기반의 UoW를 초기화합니다.

        Args:
            entity_classes: 레포지터리를 만들 엔티티 클래스들.
            session_factory: ``open_session()`` 을 제공하는 세션 팩토리.
            repo_maker: 엔티티별 커스텀 레포지터리 생성 함수.
        """
        super().__init__()
        self.entity_classes = entity_classes
        self.session_factory = session_factory
        self.repos: EntityReposMap = {}
        self.repo_maker = repo_maker or {}

        self.committed = False
        self.session: Optional[Session] = None

    def __repr__(self):
        return f"SqlAlchemyUnitOfWork[{self.session_factory}]"

    def __enter__(self) -> AbstractUnitOfWork:
        """``with`` 블록에 진입했을 때 필요한 작업을 수행합니다.

        세션을 할당하고 트랜잭션을 시작한 뒤 레포지터리를 초기화합니다.
        """
        if self.session is not None:
            raise FastUoWError("unit of work already in progress")

        super().__enter__()
        self.committed = False
        self.session = self.session_factory.open_session()
        logger.debug("session opened: %r", self.session)
        try:
            self.session.begin()
        except Exception:
            self._close()
            raise

        self.repos = {}
        for entity_class in self.entity_classes:
            repo_maker = self.repo_maker.get(entity_class)
            self.repos[entity_class] = (
                repo_maker(self.session)
                if repo_maker
                else SqlAlchemyRepository(entity_class, self.session)
            )
        return self

    def __exit__(self, *args: Any) -> None:
        """``with`` 블록을 빠져나갈 때 필요한 작업을 수행합니다.

        롤백이 필요하면 롤백하고, 세션을 close합니다.
        """
        try:
            super().__exit__(*args)
        finally:
            self._close()

    def run(self, operation: Callable[[AbstractUnitOfWork], T]) -> T:
        """`operation` 을 하나의 트랜잭션으로 실행합니다.

        Raises:
            OperationFailure: persist/query/commit 중 DB 에러가 발생한 경우.
                원본 예외는 ``__cause__`` 에 남습니다.
        """
        try:
            return super().run(operation)
        except SQLAlchemyError as e:
            logger.warning("unit of work failed: %s", e)
            raise OperationFailure(f"unit of work failed: {e}") from e

    def _commit(self) -> None:
        """세션을 커밋합니다."""
        if self.session:
            self.session.commit()
            self.committed = True
            logger.debug("session committed: %r", self.session)

    def rollback(self) -> None:
        """트랜잭션이 아직 활성 상태일 때만 세션을 롤백합니다."""
        if not self.session:
            return

        transaction = self.session.get_transaction()
        if transaction is not None and transaction.is_active:
            self.session.rollback()
            logger.debug("session rolled back: %r", self.session)

    def _close(self) -> None:
        if self.session is None:
            return

        session, self.session = self.session, None
        session.close()
        logger.debug("session closed: %r", session)
