"""インポート設定 (選択インデックスとグリッドサイズ) の永続化ストア。"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

from loguru import logger

from .json_files import read_json_object, write_json_atomic

SCHEMA_VERSION = 1
SETTINGS_FILENAME = "import_settings.json"

SELECTION_KEYS = (
    "stretch_choice",
    "scale_choice",
    "dither_choice",
    "algorithm_choice",
    "background_color_choice",
)
GRID_KEYS = ("grid_width", "grid_height")
POLICY_KEYS = SELECTION_KEYS + GRID_KEYS


def default_policy_settings() -> dict[str, Any]:
    """インポート設定のデフォルト値を返す。"""
    settings: dict[str, Any] = {"schema_version": SCHEMA_VERSION}
    settings.update({key: 0 for key in SELECTION_KEYS})
    settings.update({key: 1 for key in GRID_KEYS})
    return settings


def default_settings_path(
    *,
    os_name: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """OSごとの標準設定ファイルの場所を返す。"""
    resolved_env = os.environ if env is None else env
    resolved_home = home or Path.home()

    if (os_name or os.name) == "nt":
        app_data = resolved_env.get("APPDATA")
        base = Path(app_data) / "TileImport" if app_data else resolved_home / ".tileimport"
    else:
        config_home = resolved_env.get("XDG_CONFIG_HOME")
        base = Path(config_home) if config_home else resolved_home / ".config"
        base = base / "tileimport"
    return base / SETTINGS_FILENAME


class PolicySettingsStore:
    """インポート設定のロード/保存を行う。

    ファイルには POLICY_KEYS と schema_version だけを書く。値の範囲チェックは
    ImportPolicy.from_settings の役割で、ここでは型も含めてそのまま返す。
    """

    def __init__(self, settings_path: Optional[Path] = None) -> None:
        self.settings_path = settings_path or default_settings_path()

    def load(self) -> dict[str, Any]:
        """設定を読み込む。ファイルが無い・壊れている場合はデフォルト値。"""
        settings = default_policy_settings()
        loaded = read_json_object(self.settings_path)
        if loaded is None:
            return settings

        version = loaded.get("schema_version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            logger.warning(
                f"設定ファイルのschema_versionが異なります ({version} != {SCHEMA_VERSION}): {self.settings_path}"
            )
        unknown = sorted(set(loaded) - set(POLICY_KEYS) - {"schema_version"})
        if unknown:
            logger.debug(f"未知の設定項目を無視: {', '.join(unknown)}")

        settings.update({key: loaded[key] for key in POLICY_KEYS if key in loaded})
        return settings

    def save(self, settings: Mapping[str, Any]) -> None:
        """POLICY_KEYS の値を保存する。渡されなかった項目はデフォルト値"""
        payload = default_policy_settings()
        payload.update({key: settings[key] for key in POLICY_KEYS if key in settings})
        write_json_atomic(self.settings_path, payload)
        logger.debug(f"インポート設定を保存: {self.settings_path}")
