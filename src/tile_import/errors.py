"""
インポート処理で使う例外と、ユーザー向けメッセージの変換
"""
from __future__ import annotations

from typing import Optional


class TileImportError(Exception):
    """インポート処理の基底例外"""


class EmptyQueueError(TileImportError):
    """キューが空なのに現在の画像を要求された"""


class ImageNotFoundError(TileImportError):
    """指定された画像がキューに存在しない"""


class InvalidConfigurationError(TileImportError):
    """設定値が不正"""


class InvalidSelectionIndexError(InvalidConfigurationError):
    """カタログの選択インデックスが範囲外"""

    def __init__(self, catalog: str, index: object, length: int) -> None:
        self.catalog = catalog
        self.index = index
        self.length = length
        super().__init__(f"{catalog}: index {index!r} is outside [0, {length})")


class InvalidGridSizeError(InvalidConfigurationError):
    """グリッドの幅・高さが正の整数ではない"""

    def __init__(self, field_name: str, value: object) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(f"{field_name} must be a positive integer, got {value!r}")


class DeferredEvaluationError(TileImportError):
    """遅延評価（画像サイズの取得など）に失敗した"""

    def __init__(self, label: str, cause: Optional[BaseException] = None) -> None:
        self.label = label
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{label}{detail}")


_ERROR_MESSAGES = {
    EmptyQueueError: "キューに画像がありません",
    ImageNotFoundError: "画像がキューに見つかりません: {error}",
    InvalidSelectionIndexError: "設定の選択値が範囲外です: {error}",
    InvalidGridSizeError: "グリッドサイズが不正です: {error}",
    InvalidConfigurationError: "設定が不正です: {error}",
    DeferredEvaluationError: "画像サイズを取得できません: {error}",
    FileNotFoundError: "ファイルが見つかりません: {error}",
    PermissionError: "ファイルへのアクセス権限がありません: {error}",
}


def describe_error(error: BaseException) -> str:
    """例外からユーザー向けのメッセージを作る"""
    for error_type in type(error).__mro__:
        template = _ERROR_MESSAGES.get(error_type)
        if template is not None:
            return template.format(error=error)
    return f"予期しないエラー: {type(error).__name__}: {error}"
