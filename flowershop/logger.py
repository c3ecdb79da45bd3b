"""
로그 설정 모듈

flowershop 로거 하나에 콘솔, 일별 전체 로그, 일별 오류 로그 handler를 붙인다.
모듈에서는 get_logger(__name__)로 하위 로거를 받아 쓴다.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from flowershop.config import LOG_DIR, LOG_LEVEL

ROOT_LOGGER_NAME = "flowershop"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _daily_file_handler(log_dir: Path, prefix: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(
        log_dir / f"{prefix}_{datetime.now().strftime('%Y%m%d')}.log",
        encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_logging(log_dir: Path = LOG_DIR, console_level: str = LOG_LEVEL) -> logging.Logger:
    """
    flowershop 로거 초기화 (여러 번 호출해도 handler는 한 번만 추가)

    Args:
        log_dir: 로그 파일 디렉터리
        console_level: 콘솔 출력 수준 (DEBUG, INFO, ...)

    Returns:
        logging.Logger: flowershop 로거
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers:
        return root

    root.setLevel(logging.DEBUG)
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(getattr(logging, console_level.upper(), logging.INFO))

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    for handler in (
        console,
        _daily_file_handler(log_dir, ROOT_LOGGER_NAME, logging.DEBUG),
        _daily_file_handler(log_dir, "error", logging.ERROR),
    ):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return root


def get_logger(name: str = None) -> logging.Logger:
    """
    로거 가져오기

    Args:
        name: 보통 호출 모듈의 __name__ (flowershop 패키지 밖이면 flowershop. 접두어를 붙임)

    Returns:
        logging.Logger: 로거 객체

    사용 예:
        from flowershop.logger import get_logger
        logger = get_logger(__name__)
        logger.info("정보 로그")
        logger.error("오류 로그", exc_info=True)
    """
    root = setup_logging()
    if not name or name == ROOT_LOGGER_NAME:
        return root
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
