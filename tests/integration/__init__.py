from datetime import datetime
from typing import cast

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.orm import Session


def insert_event(session: Session, title: str, date: datetime) -> int:
    session.execute(
        text("INSERT INTO events (title, event_date) VALUES (:title, :date)").bindparams(
            bindparam("date", type_=DateTime)
        ),
        dict(title=title, date=date),
    )
    [[event_id]] = session.execute(
        text("SELECT event_id FROM events WHERE title=:title"), dict(title=title)
    )
    return cast(int, event_id)


def select_titles(session: Session) -> list[str]:
    rows = session.execute(text("SELECT title FROM events ORDER BY event_id"))
    return [title for (title,) in rows]
