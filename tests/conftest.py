# pylint: disable=redefined-outer-name
"""pytest 에서 사용될 전역 Fixture들을 정의합니다."""
from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from fastuow.domain import Event
from fastuow.orm import SessionFactory, init_db
from fastuow.uow import SqlAlchemyUnitOfWork


@pytest.fixture
def session_factory() -> Generator[SessionFactory, None, None]:
    """매번 새로 만들어지는 in-memory SQLite :class:`SessionFactory` 픽스처."""
    with init_db(db_url="sqlite://") as factory:
        yield factory


@pytest.fixture
def session(session_factory: SessionFactory) -> Generator[Session, None, None]:
    """테스트에 사용될 새로운 :class:`.Session` 픽스처를 리턴합니다."""
    session = session_factory.open_session()
    yield session
    session.close()


@pytest.fixture
def file_session_factory(tmp_path: Path) -> Generator[SessionFactory, None, None]:
    """파일 기반 SQLite :class:`SessionFactory` 픽스처.

    실제 커넥션 풀(QueuePool)을 사용하므로 커넥션 누수 검사에 씁니다.
    """
    with init_db(db_url=f"sqlite:///{tmp_path / 'events.db'}") as factory:
        yield factory


@pytest.fixture
def tracked_session_factory(file_session_factory: SessionFactory) -> SessionFactory:
    """열린 세션과 close 여부를 기록하는 :class:`SessionFactory` 를 리턴합니다.

    ``factory.opened`` 에 열렸던 세션들이 쌓입니다.
    """
    opened = list[Session]()

    class TrackedSession(Session):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self.was_closed = False
            opened.append(self)

        def close(self) -> None:
            self.was_closed = True
            super().close()

    factory = SessionFactory(file_session_factory.engine, session_class=TrackedSession)
    setattr(factory, "opened", opened)
    return factory


@pytest.fixture
def uow(session_factory: SessionFactory) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork([Event], session_factory)
