from __future__ import annotations

import pytest
from PIL import Image

from tile_import.errors import InvalidSelectionIndexError
from tile_import.option_registry import (
    ALGORITHM_OPTIONS,
    BACKGROUND_COLOR_OPTIONS,
    DITHER_OPTIONS,
    SCALE_OPTIONS,
    STRETCH_OPTIONS,
    ColorAlgorithm,
    OptionCatalog,
    ResizeMode,
    ScalingHint,
    automatic_rule,
)


def test_catalog_order_is_stable() -> None:
    assert STRETCH_OPTIONS.names() == ["Uniform", "Stretch", "Crop"]
    assert SCALE_OPTIONS.names() == ["Automatic", "Pixel Art", "Bicubic"]
    assert DITHER_OPTIONS.names() == ["None", "Floyd Steinberg", "Burks"]
    assert ALGORITHM_OPTIONS.names() == ["Good Fast", "Euclidean", "CIEDE2000", "CIE76", "CMC", "Oklab"]
    assert BACKGROUND_COLOR_OPTIONS.names() == ["Transparent", "White", "Black"]


def test_stretch_entries_map_to_resize_modes() -> None:
    assert [entry.mode for entry in STRETCH_OPTIONS] == [ResizeMode.MAX, ResizeMode.STRETCH, ResizeMode.CROP]


def test_dither_none_has_no_strategy_and_algorithms_are_never_none() -> None:
    assert DITHER_OPTIONS.entry_at(0).dither is None
    assert all(entry.algorithm is not None for entry in ALGORITHM_OPTIONS)
    assert ALGORITHM_OPTIONS.entry_at(0).algorithm is ColorAlgorithm.SIMPLE


@pytest.mark.parametrize(
    ("size", "resampler", "hint"),
    [
        ((200, 200), Image.Resampling.BICUBIC, ScalingHint.SMOOTH),
        ((64, 200), Image.Resampling.NEAREST, ScalingHint.CRISP),
        ((200, 64), Image.Resampling.NEAREST, ScalingHint.CRISP),
        ((128, 129), Image.Resampling.NEAREST, ScalingHint.CRISP),
        ((129, 129), Image.Resampling.BICUBIC, ScalingHint.SMOOTH),
    ],
)
def test_automatic_rule(size, resampler, hint) -> None:
    choice = automatic_rule(size)
    assert choice.resampler == resampler
    assert choice.hint == hint


def test_fixed_scaling_options_ignore_size() -> None:
    pixel_art = SCALE_OPTIONS.entry_at(1)
    bicubic = SCALE_OPTIONS.entry_at(2)
    for size in ((8, 8), (4000, 3000)):
        assert pixel_art.resampler_for(size) == Image.Resampling.NEAREST
        assert pixel_art.hint_for(size) == ScalingHint.CRISP
        assert bicubic.resampler_for(size) == Image.Resampling.BICUBIC
        assert bicubic.hint_for(size) == ScalingHint.SMOOTH


@pytest.mark.parametrize("index", [-1, 3, 99, "1", 1.0, None, True])
def test_entry_at_rejects_out_of_range_or_non_int(index) -> None:
    with pytest.raises(InvalidSelectionIndexError) as excinfo:
        BACKGROUND_COLOR_OPTIONS.entry_at(index)
    assert excinfo.value.catalog == "background_color_choice"
    assert excinfo.value.length == 3


def test_index_of_roundtrips_entries() -> None:
    for index, entry in enumerate(ALGORITHM_OPTIONS):
        assert ALGORITHM_OPTIONS.index_of(entry) == index


def test_index_by_name_is_lenient() -> None:
    assert SCALE_OPTIONS.index_by_name("pixel-art") == 1
    assert DITHER_OPTIONS.index_by_name("floyd_steinberg") == 1
    assert ALGORITHM_OPTIONS.index_by_name("ciede2000") == 2
    with pytest.raises(InvalidSelectionIndexError):
        SCALE_OPTIONS.index_by_name("lanczos")


def test_next_index_wraps_at_both_ends() -> None:
    catalog = BACKGROUND_COLOR_OPTIONS
    index = 0
    for _ in range(3):
        index = catalog.next_index(index)
    assert index == 0
    assert catalog.next_index(0, -1) == 2
    assert catalog.next_index(2, 7) == 0


def test_empty_catalog_is_rejected() -> None:
    with pytest.raises(ValueError):
        OptionCatalog("empty", [])
