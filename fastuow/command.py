"""Command line script for FastUoW."""
from __future__ import annotations

import os
import sys
from argparse import ArgumentParser, Namespace, RawTextHelpFormatter
from datetime import datetime
from pathlib import Path
from textwrap import dedent
from typing import Optional, Sequence

from fastuow import services
from fastuow.config import FastUoW
from fastuow.core import FastUoWError
from fastuow.domain import Event
from fastuow.logging import get_logger
from fastuow.orm import SessionFactory, init_db
from fastuow.uow import SqlAlchemyUnitOfWork
from fastuow.utils import Fore, bold, fg, parse_datetime

YELLOW, CYAN, RED, GREEN, WHITE = (
    Fore.YELLOW,
    Fore.CYAN,
    Fore.RED,
    Fore.GREEN,
    Fore.WHITE,
)
WHITE_EX, CYAN_EX = Fore.LIGHTWHITE_EX, Fore.LIGHTCYAN_EX

DEMO_TITLES = ("Our very first event!", "A follow up event")


logger = get_logger("fastuow.command")


class FastUoWCommand:
    def __init__(self, path: Optional[Path] = None):
        """Constructor.

        현재 경로(혹은 `path`)의 ``setup.cfg`` 에서 설정을 읽습니다.
        DB 연결은 실제로 필요할 때 처음 한 번만 초기화합니다.
        """
        self.path = path or Path(os.path.abspath("."))
        self.app = FastUoW.load_from_config(self.path)
        self._session_factory: Optional[SessionFactory] = None

    @property
    def session_factory(self) -> SessionFactory:
        if not self._session_factory:
            self._session_factory = init_db(self.app)
        return self._session_factory

    @property
    def uow(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork([Event], self.session_factory)

    def close(self):
        if self._session_factory:
            self._session_factory.close()
            self._session_factory = None

    def banner(self, msg, icon=""):
        """배너를 표시합니다."""
        if os.name == "nt":
            icon = ""
        term_width = os.get_terminal_size().columns
        banner_width = min(75, term_width)
        print("─" * banner_width)
        print(f"{icon} {msg}")
        print("─" * banner_width)

    def info(self):
        """FastUoW 앱 정보를 출력합니다."""
        dot = bold("-", YELLOW)
        self.banner(f"{bold('FastUoW Information')}", icon="💡")
        print(dot, fg("Name", CYAN), "    :", fg(self.app.name, WHITE_EX))
        print(dot, fg("Title", CYAN), "   :", fg(self.app.title, WHITE_EX))
        print(dot, fg("Database", CYAN), ":", fg(self.app.get_db_url(), WHITE_EX))
        print(dot, fg("Path", CYAN), "    :", fg(self.path, WHITE_EX))

    def init(self, drop=False):
        """DB 스키마를 생성합니다.

        --drop 옵션을 주면 기존 테이블을 지우고 다시 만듭니다.
        """
        self.close()
        self._session_factory = init_db(self.app, drop_all=drop)
        bullet = bold("✓" if os.name != "nt" else "v", GREEN)
        logger.info(
            f"{bullet} init {fg('database', CYAN)}... %s",
            bold(self.app.get_db_url(), YELLOW),
        )

    def add(self, title: str, date: Optional[datetime] = None) -> int:
        """이벤트 하나를 저장합니다."""
        event_id = services.add_event(title, date, self.uow)
        logger.info("event %s added: %s", bold(event_id, YELLOW), title)
        return event_id

    def list(self) -> list[Event]:
        """저장된 모든 이벤트를 출력합니다."""
        events = services.list_events(self.uow)
        for event in events:
            print(services.format_event(event))
        return events

    def demo(self) -> list[Event]:
        """이벤트 두 개를 저장하고 다시 조회해서 출력합니다."""
        now = datetime.now()
        services.add_events([(title, now) for title in DEMO_TITLES], self.uow)
        return self.list()


class FastUoWCommandParser:
    """콘솔 커맨드 명령어 파서.

    실제 작업은 `FastUoWCommand` 객체에 위임합니다.
    """

    def __init__(self, cmd: Optional[FastUoWCommand] = None):
        """기본 생성자."""
        self.parser = ArgumentParser(
            "uow",
            description=f"✨ {bold('FastUoW')} : {fg('command line utility', CYAN_EX)}",
        )
        self._subparsers = self.parser.add_subparsers(dest="command")
        self._cmd = cmd

        # init subparsers
        for handler in [
            FastUoWCommand.info,
            FastUoWCommand.init,
            FastUoWCommand.add,
            FastUoWCommand.list,
            FastUoWCommand.demo,
        ]:
            command = handler.__name__
            # 핸들러 함수의 주석을 커맨드라인 도움말로 변환하기 위한 작업입니다.
            doc = None
            if handler.__doc__:
                lines = handler.__doc__.splitlines()
                doc = lines[0] + "\n" + dedent("\n".join(lines[1:]))
            parser = self._subparsers.add_parser(
                command,
                description=doc,
                formatter_class=RawTextHelpFormatter,
            )
            if command == "init":
                parser.add_argument(
                    "--drop", action="store_true", help="기존 테이블을 지우고 다시 생성"
                )
            if command == "add":
                parser.add_argument("title", metavar="title")
                parser.add_argument(
                    "--date", help="ISO 8601 형식의 일시 (기본값: 현재 시각)"
                )

    @property
    def cmd(self) -> FastUoWCommand:
        if not self._cmd:
            self._cmd = FastUoWCommand()
        return self._cmd

    def parse_args(self, args: Sequence[str]) -> int:
        """콘솔 명령어를 해석해서 적절한 작업을 수행합니다.

        Returns:
            프로세스 종료 코드.
        """
        if not args:
            self.parser.print_help()
            return 0

        ns = self.parser.parse_args(args)
        try:
            if hasattr(self, ns.command):
                # 커맨드 명령어와 동일한 이름의 메소드가 파서 클래스에 있으면
                # 그 메소드를 호출해서 적당한 처리 후 실제 메소드를 호출합니다.
                getattr(self, ns.command)(ns)
            else:
                # 아닐 경우 FastUoWCommand 클래스에서 핸들러를 호출합니다.
                getattr(self.cmd, ns.command)()
        except FastUoWError as e:
            print(
                f"{bold('FastUoW ERROR:', RED)} {fg(e.message, YELLOW)}",
                file=sys.stderr,
            )
            return 1
        finally:
            if self._cmd:
                self._cmd.close()
        return 0

    def init(self, ns: Namespace):
        """`init` 명령어 처리."""
        self.cmd.init(drop=ns.drop)

    def add(self, ns: Namespace):
        """`add` 명령어 처리."""
        try:
            date = parse_datetime(ns.date)
        except ValueError as e:
            raise FastUoWError(f"invalid --date: {ns.date!r}") from e
        self.cmd.add(ns.title, date)


def console_main():
    parser = FastUoWCommandParser()
    sys.exit(parser.parse_args(sys.argv[1:]))


if __name__ == "__main__":
    console_main()
