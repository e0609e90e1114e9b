"""기본 환경 설정."""

from __future__ import annotations

import os
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Type

from sqlalchemy.engine import make_url
from sqlalchemy.pool import Pool, StaticPool

from fastuow.core.errors import FastUoWConfigError

DB_URL_ENV = "FASTUOW_DB_URL"
"""``db_url`` 설정을 덮어쓰는 환경변수 이름."""


@dataclass
class FastUoWSetupConfig:
    name: str
    title: Optional[str] = None
    db_url: Optional[str] = None
    show_log: Optional[str] = None


def load_setupcfg(path: Path) -> Optional[FastUoWSetupConfig]:
    if (path / "setup.cfg").exists():
        # 현재 경로에 "setup.cfg" 파일이 있다면 [fastuow] 섹션에서
        # name, db_url 등의 정보를 읽습니다.
        config = ConfigParser()
        config.read(path / "setup.cfg", encoding="utf8")
        if "fastuow" in config:
            try:
                return FastUoWSetupConfig(**config["fastuow"])
            except TypeError as e:
                raise FastUoWConfigError(f"invalid [fastuow] section: {e}") from e
    return None


@dataclass
class FastUoW:
    """FastUoW App 설정."""

    name: str
    title: str
    db_url: str = "sqlite://"
    show_log: bool = False
    is_implicit_name: bool = True
    """setup.cfg 없이 암시적으로 부여된 이름인지 여부."""

    @staticmethod
    def default(db_url: str = "sqlite://") -> FastUoW:
        return FastUoW(name="fastuow", title="FastUoW", db_url=db_url)

    @staticmethod
    def load_from_config(path: Path = Path(".")) -> FastUoW:
        """`path` 의 ``setup.cfg`` 에서 설정을 읽습니다.

        ``FASTUOW_DB_URL`` 환경변수가 있으면 ``db_url`` 보다 우선합니다.
        """
        cfg = load_setupcfg(path)
        name = path.absolute().name.replace("-", "_")
        title = name
        db_url = "sqlite://"
        show_log = False
        is_implicit_name = True

        if cfg:
            is_implicit_name = False
            name = cfg.name
            title = cfg.title or name
            db_url = cfg.db_url or db_url
            show_log = (cfg.show_log or "").lower() in ("1", "true", "yes", "on")

        if not name.isidentifier():
            raise FastUoWConfigError(f"invalid app name: {name!r}")

        return FastUoW(
            name=name,
            title=title,
            db_url=os.environ.get(DB_URL_ENV, db_url),
            show_log=show_log,
            is_implicit_name=is_implicit_name,
        )

    def get_db_url(self) -> str:
        """SqlAlchemy 에서 사용 가능한 형식의 DB URL을 리턴합니다."""
        return self.db_url

    def is_memory_db(self) -> bool:
        url = make_url(self.get_db_url())
        return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")

    def get_db_connect_args(self) -> dict[str, Any]:
        """Get db connection arguments for SQLAlchemy's engine creation.

        SQLite DB 라면 ``{'check_same_thread': False}`` 를 리턴합니다.
        """
        if make_url(self.get_db_url()).get_backend_name() == "sqlite":
            return {"check_same_thread": False}
        return {}

    def get_db_poolclass(self) -> Optional[Type[Pool]]:
        """Get db poolclass argument for SQLAlchemy's engine creation.

        In-memory SQLite 는 커넥션이 끊기면 데이터가 사라지므로 :class:`StaticPool`
        을 사용하고, 나머지는 엔진 기본값을 따릅니다.
        """
        if self.is_memory_db():
            return StaticPool
        return None
