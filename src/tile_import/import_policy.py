"""
全画像に共通する変換ポリシー (各カタログの選択とグリッドサイズ)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from loguru import logger

from .errors import InvalidGridSizeError
from .observable import Observable
from .option_registry import (
    ALGORITHM_OPTIONS,
    BACKGROUND_COLOR_OPTIONS,
    DITHER_OPTIONS,
    SCALE_OPTIONS,
    STRETCH_OPTIONS,
    AlgorithmOption,
    BackgroundColorOption,
    DitherOption,
    OptionCatalog,
    ScalingOption,
    StretchOption,
)
from .policy_settings_store import SELECTION_KEYS, default_policy_settings

CATALOGS: Dict[str, OptionCatalog] = {
    "stretch_choice": STRETCH_OPTIONS,
    "scale_choice": SCALE_OPTIONS,
    "dither_choice": DITHER_OPTIONS,
    "algorithm_choice": ALGORITHM_OPTIONS,
    "background_color_choice": BACKGROUND_COLOR_OPTIONS,
}


@dataclass(frozen=True)
class PolicySelection:
    """確定時点で選ばれている選択肢"""
    stretch: StretchOption
    scale: ScalingOption
    dither: DitherOption
    algorithm: AlgorithmOption
    background: BackgroundColorOption
    grid_width: int = 1
    grid_height: int = 1


def validate_grid_size(field_name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidGridSizeError(field_name, value)
    return value


class ImportPolicy(Observable):
    """選択インデックスを保持し、変更を通知する

    インデックスは代入時と読み込み時に検証されるので、
    保持している値は常にカタログの範囲内にある。
    """

    def __init__(self) -> None:
        super().__init__()
        defaults = default_policy_settings()
        self._indices: Dict[str, int] = {key: defaults[key] for key in SELECTION_KEYS}
        self._grid_width: int = defaults["grid_width"]
        self._grid_height: int = defaults["grid_height"]

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "ImportPolicy":
        """保存された設定から作る

        Raises:
            InvalidSelectionIndexError: インデックスが範囲外
            InvalidGridSizeError: グリッドサイズが正の整数でない
        """
        policy = cls()
        defaults = default_policy_settings()
        for key in SELECTION_KEYS:
            policy._indices[key] = CATALOGS[key].validate_index(settings.get(key, defaults[key]))
        policy._grid_width = validate_grid_size("grid_width", settings.get("grid_width", defaults["grid_width"]))
        policy._grid_height = validate_grid_size("grid_height", settings.get("grid_height", defaults["grid_height"]))
        return policy

    def to_settings(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self._indices)
        payload["grid_width"] = self._grid_width
        payload["grid_height"] = self._grid_height
        return payload

    # インデックス
    def index(self, key: str) -> int:
        return self._indices[key]

    def set_index(self, key: str, index: int) -> None:
        catalog = CATALOGS[key]
        index = catalog.validate_index(index)
        if self._indices[key] == index:
            return
        self._indices[key] = index
        logger.debug(f"{key} -> {catalog.entry_at(index).name}")
        self._notify(key, catalog.entry_at(index))

    def select_by_name(self, key: str, name: str) -> None:
        self.set_index(key, CATALOGS[key].index_by_name(name))

    def cycle(self, key: str, step: int = 1) -> int:
        index = CATALOGS[key].next_index(self._indices[key], step)
        self.set_index(key, index)
        return index

    def cycle_background(self) -> BackgroundColorOption:
        """背景色を次の候補に切り替える"""
        self.cycle("background_color_choice")
        return self.background

    # 選択中の項目
    @property
    def stretch(self) -> StretchOption:
        return STRETCH_OPTIONS.entry_at(self._indices["stretch_choice"])

    @stretch.setter
    def stretch(self, value: StretchOption) -> None:
        self.set_index("stretch_choice", STRETCH_OPTIONS.index_of(value))

    @property
    def scale(self) -> ScalingOption:
        return SCALE_OPTIONS.entry_at(self._indices["scale_choice"])

    @scale.setter
    def scale(self, value: ScalingOption) -> None:
        self.set_index("scale_choice", SCALE_OPTIONS.index_of(value))

    @property
    def dither(self) -> DitherOption:
        return DITHER_OPTIONS.entry_at(self._indices["dither_choice"])

    @dither.setter
    def dither(self, value: DitherOption) -> None:
        self.set_index("dither_choice", DITHER_OPTIONS.index_of(value))

    @property
    def algorithm(self) -> AlgorithmOption:
        return ALGORITHM_OPTIONS.entry_at(self._indices["algorithm_choice"])

    @algorithm.setter
    def algorithm(self, value: AlgorithmOption) -> None:
        self.set_index("algorithm_choice", ALGORITHM_OPTIONS.index_of(value))

    @property
    def background(self) -> BackgroundColorOption:
        return BACKGROUND_COLOR_OPTIONS.entry_at(self._indices["background_color_choice"])

    @background.setter
    def background(self, value: BackgroundColorOption) -> None:
        self.set_index("background_color_choice", BACKGROUND_COLOR_OPTIONS.index_of(value))

    # グリッド
    @property
    def grid_width(self) -> int:
        return self._grid_width

    @grid_width.setter
    def grid_width(self, value: int) -> None:
        value = validate_grid_size("grid_width", value)
        if self._grid_width == value:
            return
        self._grid_width = value
        self._notify("grid_width", value)

    @property
    def grid_height(self) -> int:
        return self._grid_height

    @grid_height.setter
    def grid_height(self, value: int) -> None:
        value = validate_grid_size("grid_height", value)
        if self._grid_height == value:
            return
        self._grid_height = value
        self._notify("grid_height", value)

    def selection(self) -> PolicySelection:
        return PolicySelection(
            stretch=self.stretch,
            scale=self.scale,
            dither=self.dither,
            algorithm=self.algorithm,
            background=self.background,
            grid_width=self._grid_width,
            grid_height=self._grid_height,
        )
