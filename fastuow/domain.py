"""도메인 모델."""
from __future__ import annotations

from datetime import datetime
from typing import Optional


class Event:
    """제목(`title`)과 일시(`date`)를 가진 이벤트 레코드입니다."""

    def __init__(
        self, title: str, date: datetime, id: Optional[int] = None
    ):  # pylint: disable=redefined-builtin
        """기본 생성자.

        Args:
            id: 매핑된 DB가 할당한 고유 ID. 세션 flush가 될 경우에만 값이 부여됩니다.
        """
        self.id = id  # pylint: disable=invalid-name
        """매핑된 DB가 할당한 고유 ID."""

        self.title = title
        self.date = date

    def __repr__(self) -> str:
        return f"<Event {self.id} {self.title!r} @ {self.date.isoformat()}>"
