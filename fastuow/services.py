"""Event 서비스.

모든 함수는 주어진 UoW 하나로 하나의 트랜잭션을 실행합니다.
"""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Tuple

from fastuow.core import AbstractUnitOfWork
from fastuow.domain import Event

EventItem = Tuple[str, Optional[datetime]]
""":meth:`add_events` 함수의 인자 타입. (title, date)"""


def add_event(title: str, date: Optional[datetime], uow: AbstractUnitOfWork) -> int:
    """이벤트 하나를 저장하고 DB가 할당한 id를 리턴합니다.

    `date` 가 없으면 현재 시각을 사용합니다.
    """
    [event_id] = add_events([(title, date)], uow)
    return event_id


def add_events(items: Iterable[EventItem], uow: AbstractUnitOfWork) -> list[int]:
    """여러 이벤트를 한 트랜잭션으로 저장합니다. 하나라도 실패하면 모두 롤백됩니다."""
    events = [Event(title, date or datetime.now()) for title, date in items]

    def persist(uow: AbstractUnitOfWork) -> None:
        for event in events:
            uow[Event].add(event)

    uow.run(persist)
    # 커밋 시 flush 되면서 id가 채워집니다.
    return [event.id for event in events]


def list_events(uow: AbstractUnitOfWork) -> list[Event]:
    return uow.run(lambda uow: uow[Event].all())


def find_events(title: str, uow: AbstractUnitOfWork) -> list[Event]:
    """제목이 정확히 `title` 인 이벤트들을 조회합니다."""
    return uow.run(
        lambda uow: uow[Event].query(
            "SELECT event_id, title, event_date FROM events"
            " WHERE title = :title ORDER BY event_id",
            title=title,
        )
    )


def format_event(event: Event) -> str:
    return f"Event ({event.date}) : {event.title}"
