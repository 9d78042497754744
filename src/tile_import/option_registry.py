"""変換ポリシーの選択肢カタログ。

各カタログは (表示名, 値) の固定順タプルで、設定ファイルには
選択位置 (インデックス) だけを保存する。並び順は保存形式の一部なので
変更しないこと。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Iterator, Optional, Sequence, Tuple, TypeVar

from PIL import Image

from .errors import InvalidSelectionIndexError

Size = Tuple[int, int]
RGBA = Tuple[int, int, int, int]

AUTOMATIC_THRESHOLD = 128


class Stretch(Enum):
    """プレビュー表示での拡大方法"""
    UNIFORM = "uniform"
    FILL = "fill"
    UNIFORM_TO_FILL = "uniform_to_fill"


class ResizeMode(Enum):
    """レンダラーでのリサイズ方法"""
    MAX = "max"
    STRETCH = "stretch"
    CROP = "crop"


class ScalingHint(Enum):
    """プレビュー表示の補間ヒント"""
    CRISP = "crisp"
    SMOOTH = "smooth"


class DitherStrategy(Enum):
    FLOYD_STEINBERG = "floyd_steinberg"
    BURKS = "burks"


class ColorAlgorithm(Enum):
    SIMPLE = "simple"
    EUCLIDEAN = "euclidean"
    CIEDE2000 = "ciede2000"
    CIE76 = "cie76"
    CMC = "cmc"
    OKLAB = "oklab"


@dataclass(frozen=True)
class ResamplerChoice:
    resampler: Image.Resampling
    hint: ScalingHint


NEAREST_CHOICE = ResamplerChoice(Image.Resampling.NEAREST, ScalingHint.CRISP)
BICUBIC_CHOICE = ResamplerChoice(Image.Resampling.BICUBIC, ScalingHint.SMOOTH)


def automatic_rule(size: Size) -> ResamplerChoice:
    """幅・高さがともに閾値を超えるときだけ高品質な補間を使う"""
    width, height = size
    if width > AUTOMATIC_THRESHOLD and height > AUTOMATIC_THRESHOLD:
        return BICUBIC_CHOICE
    return NEAREST_CHOICE


@dataclass(frozen=True)
class StretchOption:
    name: str
    stretch: Stretch
    mode: ResizeMode


@dataclass(frozen=True)
class ScalingOption:
    name: str
    rule: Callable[[Size], ResamplerChoice]

    def choose(self, size: Size) -> ResamplerChoice:
        return self.rule(size)

    def hint_for(self, size: Size) -> ScalingHint:
        return self.rule(size).hint

    def resampler_for(self, size: Size) -> Image.Resampling:
        return self.rule(size).resampler


@dataclass(frozen=True)
class DitherOption:
    name: str
    dither: Optional[DitherStrategy]


@dataclass(frozen=True)
class AlgorithmOption:
    name: str
    algorithm: ColorAlgorithm


@dataclass(frozen=True)
class BackgroundColorOption:
    name: str
    pixel: RGBA


E = TypeVar("E")


class OptionCatalog(Generic[E]):
    """名前付き選択肢の固定カタログ"""

    def __init__(self, name: str, entries: Sequence[E]) -> None:
        if not entries:
            raise ValueError(f"catalog {name!r} must not be empty")
        self.name = name
        self._entries: Tuple[E, ...] = tuple(entries)

    @property
    def entries(self) -> Tuple[E, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[E]:
        return iter(self._entries)

    def validate_index(self, index: object) -> int:
        """保存されていたインデックスを検証する"""
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidSelectionIndexError(self.name, index, len(self._entries))
        if not 0 <= index < len(self._entries):
            raise InvalidSelectionIndexError(self.name, index, len(self._entries))
        return index

    def entry_at(self, index: int) -> E:
        return self._entries[self.validate_index(index)]

    def index_of(self, entry: E) -> int:
        try:
            return self._entries.index(entry)
        except ValueError:
            raise InvalidSelectionIndexError(self.name, entry, len(self._entries)) from None

    def index_by_name(self, name: str) -> int:
        """表示名 (大文字小文字・空白・ハイフンを無視) からインデックスを引く"""
        wanted = _normalize_name(name)
        for index, entry in enumerate(self._entries):
            if _normalize_name(getattr(entry, "name")) == wanted:
                return index
        raise InvalidSelectionIndexError(self.name, name, len(self._entries))

    def next_index(self, index: int, step: int = 1) -> int:
        count = len(self._entries)
        return ((index + step) % count + count) % count

    def names(self) -> list[str]:
        return [getattr(entry, "name") for entry in self._entries]


def _normalize_name(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch not in " -_")


STRETCH_OPTIONS: OptionCatalog[StretchOption] = OptionCatalog(
    "stretch_choice",
    [
        StretchOption("Uniform", Stretch.UNIFORM, ResizeMode.MAX),
        StretchOption("Stretch", Stretch.FILL, ResizeMode.STRETCH),
        StretchOption("Crop", Stretch.UNIFORM_TO_FILL, ResizeMode.CROP),
    ],
)

SCALE_OPTIONS: OptionCatalog[ScalingOption] = OptionCatalog(
    "scale_choice",
    [
        ScalingOption("Automatic", automatic_rule),
        ScalingOption("Pixel Art", lambda _size: NEAREST_CHOICE),
        ScalingOption("Bicubic", lambda _size: BICUBIC_CHOICE),
    ],
)

DITHER_OPTIONS: OptionCatalog[DitherOption] = OptionCatalog(
    "dither_choice",
    [
        DitherOption("None", None),
        DitherOption("Floyd Steinberg", DitherStrategy.FLOYD_STEINBERG),
        DitherOption("Burks", DitherStrategy.BURKS),
    ],
)

ALGORITHM_OPTIONS: OptionCatalog[AlgorithmOption] = OptionCatalog(
    "algorithm_choice",
    [
        AlgorithmOption("Good Fast", ColorAlgorithm.SIMPLE),
        AlgorithmOption("Euclidean", ColorAlgorithm.EUCLIDEAN),
        AlgorithmOption("CIEDE2000", ColorAlgorithm.CIEDE2000),
        AlgorithmOption("CIE76", ColorAlgorithm.CIE76),
        AlgorithmOption("CMC", ColorAlgorithm.CMC),
        AlgorithmOption("Oklab", ColorAlgorithm.OKLAB),
    ],
)

BACKGROUND_COLOR_OPTIONS: OptionCatalog[BackgroundColorOption] = OptionCatalog(
    "background_color_choice",
    [
        BackgroundColorOption("Transparent", (0, 0, 0, 0)),
        BackgroundColorOption("White", (255, 255, 255, 255)),
        BackgroundColorOption("Black", (0, 0, 0, 255)),
    ],
)
