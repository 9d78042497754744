#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
pytest設定ファイル
共通のフィクスチャやテスト設定を定義
"""

import pytest
from PIL import Image

from tile_import.pending_source import PendingSource


@pytest.fixture
def sample_images(tmp_path):
    """サイズの異なるサンプル画像を作成するフィクスチャ"""
    images = {}

    # 大きい画像（両辺とも128pxを超える）
    large_path = tmp_path / "large.png"
    Image.new("RGBA", (200, 200), color=(0, 255, 0, 255)).save(large_path, "PNG")
    images["large"] = large_path

    # 縦長画像（幅が128px以下）
    narrow_path = tmp_path / "narrow.png"
    Image.new("RGB", (64, 200), color=(255, 255, 0)).save(narrow_path, "PNG")
    images["narrow"] = narrow_path

    # 小さい画像
    small_path = tmp_path / "small.jpg"
    Image.new("RGB", (100, 100), color=(128, 128, 128)).save(small_path, "JPEG")
    images["small"] = small_path

    # 画像として読めないファイル
    broken_path = tmp_path / "broken.png"
    broken_path.write_bytes(b"this is not an image")
    images["broken"] = broken_path

    return images


@pytest.fixture
def sized_source():
    """サイズを直接指定できる入力画像を作るフィクスチャ"""

    def _make(width: int, height: int, label: str = "") -> PendingSource:
        return PendingSource(
            f"{label or 'image'}_{width}x{height}",
            label=label or f"{width}x{height}",
            size_provider=lambda: (width, height),
        )

    return _make


@pytest.fixture
def failing_source():
    """サイズ取得に失敗する入力画像を作るフィクスチャ"""

    def _make(label: str = "missing.png") -> PendingSource:
        def _raise():
            raise FileNotFoundError(label)

        return PendingSource(label, label=label, size_provider=_raise)

    return _make
