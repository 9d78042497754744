#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
インポートキューのコマンドラインインターフェース

画像をキューに追加し、共通の変形と変換ポリシーを適用して一括確定し、
レンダラーに渡す設定を表示します。
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from loguru import logger

from .errors import InvalidConfigurationError, describe_error
from .import_policy import CATALOGS, ImportPolicy
from .policy_settings_store import PolicySettingsStore
from .preview_queue import PreviewQueue
from .runtime_logging import log_batch_outcomes, setup_logging, write_run_summary
from .settings_resolver import ConfirmedBatch, ResolveOutcome

_CATALOG_FLAGS = {
    "stretch": "stretch_choice",
    "scale": "scale_choice",
    "dither": "dither_choice",
    "algorithm": "algorithm_choice",
    "background": "background_color_choice",
}


def _parse_grid(value: str) -> Tuple[int, int]:
    try:
        width_text, height_text = value.lower().split("x", 1)
        width, height = int(width_text), int(height_text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"グリッドは WxH の形式で指定してください: {value}") from None
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"グリッドの幅と高さは1以上にしてください: {value}")
    return width, height


def _build_arg_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI use."""
    p = argparse.ArgumentParser(
        prog="tile-import",
        description="画像をキューに追加し、タイル変換用の設定を一括確定する",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("images", nargs="+", type=Path, help="入力画像")
    p.add_argument("--grid", type=_parse_grid, default=None, help="グリッドサイズ (例: 2x3)")
    for flag, key in _CATALOG_FLAGS.items():
        p.add_argument(
            f"--{flag}",
            default=None,
            help=f"選択肢: {', '.join(CATALOGS[key].names())}",
        )
    p.add_argument("--rotate", type=float, default=0.0, help="回転角 (度)")
    p.add_argument("--flip-h", action="store_true", help="左右反転")
    p.add_argument("--flip-v", action="store_true", help="上下反転")
    p.add_argument("--settings", type=Path, default=None, help="設定ファイルのパス")
    p.add_argument("--save-settings", action="store_true", help="指定した選択を設定ファイルに保存する")
    p.add_argument("--json", action="store_true", help="結果をJSONで出力する")
    p.add_argument("--log-file", type=Path, default=None, help="ログの保存先 (DEBUG 以上を記録)")
    p.add_argument("--summary", type=Path, default=None, help="結果summary JSONの保存先")
    p.add_argument("--verbose", "-v", action="count", default=0, help="詳細ログを増やす (重ね掛け可)")
    return p


def _apply_overrides(policy: ImportPolicy, args: argparse.Namespace) -> None:
    for flag, key in _CATALOG_FLAGS.items():
        name = getattr(args, flag)
        if name is not None:
            policy.select_by_name(key, name)
    if args.grid is not None:
        policy.grid_width, policy.grid_height = args.grid


def _apply_transforms(queue: PreviewQueue, args: argparse.Namespace) -> None:
    # 反転を先に適用し、回転は見た目の向きで指定できるようにする
    for _ in range(len(queue)):
        if args.flip_h:
            queue.flip_horizontal()
        if args.flip_v:
            queue.flip_vertical()
        if args.rotate:
            queue.rotate(args.rotate)
        queue.navigate(1)


def _format_outcome(outcome: ResolveOutcome) -> str:
    settings = outcome.settings
    if not outcome.success:
        return f"✗ {settings.source.label}: {describe_error(outcome.error)}"
    choice = outcome.resampler
    return (
        f"✓ {settings.source.label}: grid={settings.grid_width}x{settings.grid_height} "
        f"rotation={settings.transform.rotation:g} "
        f"scale=({settings.transform.scale_x},{settings.transform.scale_y}) "
        f"resize={settings.resize_mode.value} resampler={choice.resampler.name.lower()} "
        f"dither={settings.process.dither.value if settings.process.dither else 'none'} "
        f"algorithm={settings.process.algorithm.value}"
    )


def _outcome_to_dict(outcome: ResolveOutcome) -> dict[str, Any]:
    payload = outcome.settings.to_dict()
    payload["success"] = outcome.success
    if outcome.success:
        payload["resampler"] = outcome.resampler.resampler.name.lower()
        payload["scaling_hint"] = outcome.resampler.hint.value
    else:
        payload["error"] = describe_error(outcome.error)
    return payload


def _build_cli_summary(
    *,
    status: str,
    policy_settings: dict[str, Any],
    outcomes: Sequence[ResolveOutcome],
    elapsed_seconds: float,
    message: str,
) -> dict[str, Any]:
    failed = [o for o in outcomes if not o.success]
    return {
        "status": status,
        "message": message,
        "policy": dict(policy_settings),
        "total_images": len(outcomes),
        "resolved_count": len(outcomes) - len(failed),
        "failed_count": len(failed),
        "failed_images": [o.settings.source.label for o in failed],
        "images": [_outcome_to_dict(o) for o in outcomes],
        "elapsed_seconds": round(elapsed_seconds, 3),
    }


def run(argv: Optional[Sequence[str]] = None) -> int:
    """CLI を実行して終了コードを返す"""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    console_level = "WARNING" if args.json else "INFO"
    if args.verbose == 1:
        console_level = "DEBUG"
    elif args.verbose >= 2:
        console_level = "TRACE"

    setup_logging(console_level=console_level, log_file=args.log_file)

    started_at = time.monotonic()
    store = PolicySettingsStore(args.settings)
    try:
        policy = ImportPolicy.from_settings(store.load())
        _apply_overrides(policy, args)
    except InvalidConfigurationError as e:
        logger.error(describe_error(e))
        return 2

    if args.save_settings:
        store.save(policy.to_settings())

    queue = PreviewQueue(policy)
    batches: List[ConfirmedBatch] = []
    queue.bind("confirmed", batches.append)
    queue.bind("closed", lambda _value: logger.debug("インポートセッション終了"))

    queue.add(args.images)
    _apply_transforms(queue, args)
    queue.confirm_all()

    outcomes = [outcome for batch in batches for outcome in batch.materialize()]
    _, failed_count = log_batch_outcomes(outcomes)
    if failed_count:
        status = "partial" if failed_count < len(outcomes) else "failed"
        message = f"{failed_count} 件の画像が失敗しました"
    else:
        status = "success"
        message = "すべての画像の設定を確定しました"

    summary = _build_cli_summary(
        status=status,
        policy_settings=policy.to_settings(),
        outcomes=outcomes,
        elapsed_seconds=time.monotonic() - started_at,
        message=message,
    )
    if args.summary is not None:
        write_run_summary(args.summary, summary)

    if args.json:
        print(json.dumps(summary, ensure_ascii=False, indent=2))
    else:
        for outcome in outcomes:
            print(_format_outcome(outcome))
        if failed_count:
            logger.warning(message)
        else:
            logger.success(message)

    return 1 if failed_count else 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
