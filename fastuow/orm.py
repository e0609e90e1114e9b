"""ORM 어댑터 모듈"""
from __future__ import annotations

import io
import logging
import re
from dataclasses import replace
from typing import Any, Optional, Type, Union

from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, create_engine
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, registry, sessionmaker
from sqlalchemy.pool import Pool

from fastuow.config import FastUoW
from fastuow.domain import Event
from fastuow.logging import get_logger

logger = get_logger("fastuow.orm")

mapper_registry = registry()
metadata: MetaData = mapper_registry.metadata

events = Table(
    "events",
    metadata,
    Column("event_id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("event_date", DateTime, nullable=False),
)


class SessionFactory:
    """Engine 하나를 소유하고 새 :class:`Session` 을 열어주는 팩토리입니다.

    프로세스 전역 상태 없이 UoW에 직접 주입해서 사용합니다. ::

        with init_db(db_url="sqlite://") as factory:
            uow = SqlAlchemyUnitOfWork([Event], factory)
            ...
    """

    def __init__(self, engine: Engine, session_class: Type[Session] = Session):
        self.engine = engine
        # 커밋 후에도 UoW 밖으로 나간 객체를 읽을 수 있어야 합니다.
        self._sessionmaker = sessionmaker(
            engine, class_=session_class, expire_on_commit=False
        )

    def __repr__(self) -> str:
        return f"SessionFactory[{self.engine.url!r}]"

    def __enter__(self) -> SessionFactory:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def open_session(self) -> Session:
        """새 세션을 엽니다."""
        return self._sessionmaker()

    def close(self) -> None:
        """Engine의 커넥션 풀을 정리합니다."""
        self.engine.dispose()


def start_mappers() -> MetaData:
    """도메인 객체들을 SqlAlchemy ORM 매퍼에 등록합니다.

    이미 매핑되어 있으면 아무 것도 하지 않습니다.
    """
    if sa_inspect(Event, raiseerr=False) is None:
        mapper_registry.map_imperatively(
            Event,
            events,
            properties={"id": events.c.event_id, "date": events.c.event_date},
        )
    return metadata


def init_engine(
    meta: MetaData,
    url: str,
    connect_args: Optional[dict[str, Any]] = None,
    poolclass: Optional[Type[Pool]] = None,
    show_log: Union[bool, dict[str, Any]] = False,
    drop_all: bool = False,
) -> Engine:
    """ORM Engine을 초기화하고 스키마를 생성합니다.

    Args:
        meta: 생성할 테이블들의 메타데이터.
        url: SqlAlchemy DB URL.
        show_log: ``True`` 면 실행된 CREATE 문을, ``{"all": True}`` 면 모든 SQL 로그를
            남깁니다.
        drop_all: 스키마 생성 전에 모든 테이블을 지울지 여부.

    스키마 생성에 실패하면 Engine을 정리하고 예외를 다시 던집니다.
    """
    kwargs: dict[str, Any] = {"connect_args": connect_args or {}, "echo": bool(show_log)}
    if poolclass:
        kwargs["poolclass"] = poolclass
    engine = create_engine(url, **kwargs)

    sa_logger = logging.getLogger("sqlalchemy.engine.Engine")
    out = io.StringIO()
    handler = logging.StreamHandler(out)
    sa_logger.addHandler(handler)
    try:
        if drop_all:
            meta.drop_all(engine)
        meta.create_all(engine)
    except Exception:
        engine.dispose()
        raise
    finally:
        sa_logger.removeHandler(handler)

    if show_log:
        log_txt = out.getvalue()
        if show_log is True:
            for stmt in re.findall("CREATE.*?\n\n", log_txt, re.DOTALL | re.I):
                logger.info(stmt.strip())
        elif isinstance(show_log, dict) and show_log.get("all"):
            logger.info(log_txt)

    return engine


def init_db(
    config: Optional[FastUoW] = None,
    db_url: Optional[str] = None,
    drop_all: bool = False,
    show_log: Optional[bool] = None,
) -> SessionFactory:
    """엔티티를 매핑하고 DB 엔진을 초기화해서 :class:`SessionFactory` 를 리턴합니다."""
    meta = start_mappers()

    if not config:
        config = FastUoW.default(db_url=db_url or "sqlite://")
    elif db_url:
        config = replace(config, db_url=db_url)

    url = config.get_db_url()
    engine = init_engine(
        meta,
        url,
        connect_args=config.get_db_connect_args(),
        poolclass=config.get_db_poolclass(),
        drop_all=drop_all,
        show_log=config.show_log if show_log is None else show_log,
    )
    logger.debug("database initialized: %s (%s)", url, ", ".join(meta.tables))
    return SessionFactory(engine)
