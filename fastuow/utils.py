import os
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional

from colorama import init as init_colors

init_colors()  # For Windows environment

from colorama import Fore, Style  # noqa: E402


def fg(text, color=Fore.WHITE):
    """텍스트를 지정된 ANSI 컬러로 출력합니다."""
    return f"{color}{text}{Fore.RESET}"


def bold(text, color=Fore.WHITE):
    """텍스트를 지정된 ANSI 컬러와 밝기 효과를 주어 출력합니다."""
    return f"{Style.BRIGHT}{color}{text}{Style.RESET_ALL}"


@contextmanager
def cwd(path: Path) -> Generator:
    """Helper to guarantee work in the path only during the context.

    Restore previous working directory when exit the context block.
    """
    oldpwd = os.getcwd()
    os.chdir(path)
    try:
        yield
    finally:
        os.chdir(oldpwd)


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """ISO 8601 문자열을 :class:`datetime` 으로 바꿉니다. 빈 값이면 ``None``."""
    if not value:
        return None
    return datetime.fromisoformat(value)
