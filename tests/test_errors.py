from __future__ import annotations

from tile_import.errors import (
    DeferredEvaluationError,
    EmptyQueueError,
    InvalidConfigurationError,
    InvalidGridSizeError,
    InvalidSelectionIndexError,
    TileImportError,
    describe_error,
)


def test_configuration_errors_share_base() -> None:
    assert issubclass(InvalidSelectionIndexError, InvalidConfigurationError)
    assert issubclass(InvalidGridSizeError, InvalidConfigurationError)
    assert issubclass(DeferredEvaluationError, TileImportError)


def test_describe_error_uses_most_specific_message() -> None:
    assert describe_error(EmptyQueueError()) == "キューに画像がありません"
    assert describe_error(InvalidSelectionIndexError("scale_choice", 5, 3)).startswith("設定の選択値が範囲外です")
    assert describe_error(InvalidGridSizeError("grid_width", 0)).startswith("グリッドサイズが不正です")
    assert "boom" in describe_error(DeferredEvaluationError("a.png", OSError("boom")))


def test_describe_error_falls_back_for_unknown_types() -> None:
    assert describe_error(RuntimeError("x")) == "予期しないエラー: RuntimeError: x"
