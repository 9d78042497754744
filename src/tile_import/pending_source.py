"""
まだ処理されていない入力画像への参照
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

from loguru import logger
from PIL import Image

from .deferred import Deferred
from .errors import DeferredEvaluationError

Size = Tuple[int, int]
SourceReference = Union[str, Path, bytes, Image.Image]


def read_image_size(reference: SourceReference) -> Size:
    """画素データを展開せずに画像のサイズを読む"""
    if isinstance(reference, Image.Image):
        return reference.size
    if isinstance(reference, (bytes, bytearray)):
        with Image.open(io.BytesIO(reference)) as img:
            return img.size
    with Image.open(Path(reference)) as img:
        return img.size


class PendingSource:
    """入力画像とその遅延評価されるサイズ"""

    def __init__(
        self,
        reference: SourceReference,
        *,
        label: Optional[str] = None,
        size_provider: Optional[Callable[[], Size]] = None,
    ) -> None:
        self.reference = reference
        self.label = label or self._default_label(reference)
        provider = size_provider or (lambda: read_image_size(reference))
        self._size: Deferred[Size] = Deferred(lambda: self._lookup_size(provider))

    @classmethod
    def wrap(cls, source: Union["PendingSource", SourceReference]) -> "PendingSource":
        if isinstance(source, PendingSource):
            return source
        return cls(source)

    @property
    def size_known(self) -> bool:
        return self._size.evaluated

    def size(self) -> Size:
        """画像サイズ (width, height) を返す。初回のみ実際に読み込む

        Raises:
            DeferredEvaluationError: 画像が読めない場合
        """
        return self._size.get()

    def _lookup_size(self, provider: Callable[[], Size]) -> Size:
        try:
            width, height = provider()
            size = int(width), int(height)
        except Exception as e:
            # 例外の種類を問わず、この画像1枚の失敗として扱う
            logger.error(f"画像サイズの取得に失敗: {self.label}: {e}")
            raise DeferredEvaluationError(self.label, e) from e
        logger.debug(f"画像サイズを取得: {self.label} -> {size[0]}x{size[1]}")
        return size

    @staticmethod
    def _default_label(reference: SourceReference) -> str:
        if isinstance(reference, (str, Path)):
            return Path(reference).name
        if isinstance(reference, Image.Image):
            return getattr(reference, "filename", "") or f"<image {reference.width}x{reference.height}>"
        return f"<bytes {len(reference)}>"

    def __repr__(self) -> str:
        return f"PendingSource({self.label!r})"
