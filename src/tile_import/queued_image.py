"""
キューに入っている画像 (入力画像 + 変形状態)
"""
from __future__ import annotations

from .pending_source import PendingSource
from .transform_state import TransformState


class QueuedImage:
    """プレビューキュー内の1枚

    同一性で比較する (同じ入力を2回追加しても別の要素として扱う)。
    """

    __slots__ = ("source", "transform")

    def __init__(self, source: PendingSource) -> None:
        self.source = source
        self.transform = TransformState()

    @property
    def label(self) -> str:
        return self.source.label

    def __repr__(self) -> str:
        return f"QueuedImage({self.source.label!r}, {self.transform!r})"
