"""設定ファイルと実行summaryで共通に使うJSON入出力"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from loguru import logger


def read_json_object(path: Path) -> Optional[dict[str, Any]]:
    """JSONオブジェクトを読む。無い・読めない・オブジェクトでない場合は None"""
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.warning(f"JSONファイルを読み込めません ({path}): {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"JSONファイルの形式が不正です ({path}): {type(data).__name__}")
        return None
    return data


def write_json_atomic(path: Path, payload: Mapping[str, Any]) -> None:
    """一時ファイルに書いてから置き換える。途中で失敗しても元のファイルは残る"""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(dict(payload), fh, ensure_ascii=False, indent=2)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
