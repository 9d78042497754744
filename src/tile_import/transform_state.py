"""
画像ごとの回転・反転の状態
"""
from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class TransformSnapshot:
    """確定時点の変形状態"""
    rotation: float = 0.0
    scale_x: int = 1
    scale_y: int = 1

    @property
    def is_identity(self) -> bool:
        return self.rotation == 0 and self.scale_x == 1 and self.scale_y == 1

    def to_dict(self) -> dict:
        return {
            "rotation": self.rotation,
            "scale_x": self.scale_x,
            "scale_y": self.scale_y,
        }


class TransformState:
    """回転角と左右・上下反転

    回転角は更新のたびに符号を保ったまま360で割った余りに正規化される。
    反転は scale_x / scale_y の符号 (+1 / -1) で表す。
    """

    def __init__(self, rotation: float = 0.0, scale_x: int = 1, scale_y: int = 1) -> None:
        if scale_x not in (1, -1) or scale_y not in (1, -1):
            raise ValueError(f"scale must be +1 or -1, got ({scale_x}, {scale_y})")
        self._rotation = math.fmod(float(rotation), 360.0)
        self._scale_x = scale_x
        self._scale_y = scale_y

    @property
    def rotation(self) -> float:
        return self._rotation

    @property
    def scale_x(self) -> int:
        return self._scale_x

    @property
    def scale_y(self) -> int:
        return self._scale_y

    def rotate(self, delta: float) -> float:
        """回転する

        片方の軸だけ反転していると見た目の回転方向が逆になるため、
        scale_x * scale_y の符号を掛けてから加算する。
        """
        sign = self._scale_x * self._scale_y
        self._rotation = math.fmod(self._rotation + delta * sign, 360.0)
        return self._rotation

    def flip_horizontal(self) -> None:
        self._scale_x *= -1

    def flip_vertical(self) -> None:
        self._scale_y *= -1

    def snapshot(self) -> TransformSnapshot:
        return TransformSnapshot(self._rotation, self._scale_x, self._scale_y)

    def __repr__(self) -> str:
        return (
            f"TransformState(rotation={self._rotation!r}, "
            f"scale_x={self._scale_x}, scale_y={self._scale_y})"
        )
