"""確定した画像の設定を組み立てる。

ResolvedSettings はレンダラーに渡す不変の設定。リサンプラーは画像の
最終サイズに依存するので Deferred として持ち、レンダラーが必要に
なった時点で初めて画像サイズを読む。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from loguru import logger
from PIL import Image

from .deferred import Deferred
from .errors import DeferredEvaluationError, TileImportError
from .import_policy import PolicySelection
from .option_registry import (
    RGBA,
    ColorAlgorithm,
    DitherStrategy,
    ResamplerChoice,
    ResizeMode,
    ScalingOption,
)
from .pending_source import PendingSource
from .queued_image import QueuedImage
from .transform_state import TransformSnapshot


@dataclass(frozen=True)
class ProcessSettings:
    dither: Optional[DitherStrategy]
    algorithm: ColorAlgorithm


@dataclass(frozen=True)
class ResolvedSettings:
    source: PendingSource
    transform: TransformSnapshot
    grid_width: int
    grid_height: int
    resampler: Deferred[ResamplerChoice]
    resize_mode: ResizeMode
    background: RGBA
    process: ProcessSettings

    def resolve_resampler(self) -> Image.Resampling:
        """リサンプラーを評価する

        Raises:
            DeferredEvaluationError: 画像サイズが取得できない場合
        """
        return self.resampler.get().resampler

    def to_dict(self, include_resampler: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "source": self.source.label,
            "transform": self.transform.to_dict(),
            "grid_width": self.grid_width,
            "grid_height": self.grid_height,
            "resize_mode": self.resize_mode.value,
            "background": list(self.background),
            "dither": self.process.dither.value if self.process.dither else None,
            "algorithm": self.process.algorithm.value,
        }
        if include_resampler:
            choice = self.resampler.get()
            payload["resampler"] = choice.resampler.name.lower()
            payload["scaling_hint"] = choice.hint.value
        return payload


@dataclass(frozen=True)
class ResolveOutcome:
    """1枚分の評価結果。resampler と error のどちらか一方が入る"""
    settings: ResolvedSettings
    resampler: Optional[ResamplerChoice] = None
    error: Optional[TileImportError] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ConfirmedBatch:
    """1回の確定操作で出力される設定の集まり"""
    settings: Tuple[ResolvedSettings, ...]

    def __len__(self) -> int:
        return len(self.settings)

    def __iter__(self):
        return iter(self.settings)

    def materialize(self) -> list[ResolveOutcome]:
        """すべてのリサンプラーを評価する

        失敗した画像があっても残りの画像は個別に評価を続ける。
        """
        outcomes: list[ResolveOutcome] = []
        for resolved in self.settings:
            try:
                choice = resolved.resampler.get()
            except DeferredEvaluationError as e:
                logger.warning(f"設定の評価に失敗: {resolved.source.label}: {e}")
                outcomes.append(ResolveOutcome(settings=resolved, error=e))
                continue
            outcomes.append(ResolveOutcome(settings=resolved, resampler=choice))
        return outcomes


def defer_resampler(scale: ScalingOption, source: PendingSource) -> Deferred[ResamplerChoice]:
    return Deferred(lambda: scale.choose(source.size()))


class SettingsResolver:
    """現在のポリシー選択と画像の変形状態から ResolvedSettings を作る"""

    def resolve(self, image: QueuedImage, selection: PolicySelection) -> ResolvedSettings:
        return ResolvedSettings(
            source=image.source,
            transform=image.transform.snapshot(),
            grid_width=selection.grid_width,
            grid_height=selection.grid_height,
            resampler=defer_resampler(selection.scale, image.source),
            resize_mode=selection.stretch.mode,
            background=selection.background.pixel,
            process=ProcessSettings(
                dither=selection.dither.dither,
                algorithm=selection.algorithm.algorithm,
            ),
        )

    def resolve_batch(self, images: Iterable[QueuedImage], selection: PolicySelection) -> ConfirmedBatch:
        resolved = tuple(self.resolve(image, selection) for image in images)
        logger.debug(f"{len(resolved)} 件の設定を作成")
        return ConfirmedBatch(resolved)
