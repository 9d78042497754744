"""ログ出力の設定と、確定結果の記録"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from loguru import logger

from .errors import describe_error
from .json_files import write_json_atomic
from .settings_resolver import ResolveOutcome


def setup_logging(
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """ロギングの設定を行います"""
    logger.remove()  # デフォルト設定を削除
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{function}</cyan>: <white>{message}</white>",
        colorize=True,
        level=console_level,
    )
    if log_file is not None:
        logger.add(
            str(log_file),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {function}: {message}",
            level=file_level,
            encoding="utf-8",
        )


def log_batch_outcomes(outcomes: Iterable[ResolveOutcome]) -> tuple[int, int]:
    """確定結果を画像ごとにログへ残し、(成功数, 失敗数) を返す"""
    resolved = failed = 0
    for outcome in outcomes:
        label = outcome.settings.source.label
        if outcome.success:
            resolved += 1
            logger.info(
                f"確定 ({label}): grid={outcome.settings.grid_width}x{outcome.settings.grid_height} "
                f"resampler={outcome.resampler.resampler.name.lower()}"
            )
        else:
            failed += 1
            logger.error(f"確定できません ({label}): {describe_error(outcome.error)}")
    logger.debug(f"確定結果: 成功 {resolved} 件 / 失敗 {failed} 件")
    return resolved, failed


def write_run_summary(summary_path: Path, payload: Mapping[str, Any]) -> None:
    """summary JSON をアトミックに保存する。"""
    write_json_atomic(summary_path, payload)
    logger.debug(f"summaryを保存: {summary_path}")
