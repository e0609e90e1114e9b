"""``fastuow`` 로거 설정."""
import logging
import os
from typing import Optional, Union

from uvicorn.logging import DefaultFormatter

LOG_LEVEL_ENV = "FASTUOW_LOG_LEVEL"


def get_logger(name: str, log_level: Optional[Union[int, str]] = None) -> logging.Logger:
    """uvicorn 스타일 포맷터가 달린 로거를 리턴합니다.

    `log_level` 이 없으면 ``FASTUOW_LOG_LEVEL`` 환경변수, 그것도 없으면 INFO.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        level = log_level or os.environ.get(LOG_LEVEL_ENV, "INFO")
        logger.setLevel(level.upper() if isinstance(level, str) else level)
        ch = logging.StreamHandler()
        ch.setFormatter(DefaultFormatter(fmt="%(levelprefix)s %(message)s"))
        logger.addHandler(ch)

    return logger
