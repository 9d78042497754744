"""
変更通知を持つクラスの基底
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from loguru import logger

Callback = Callable[[Any], None]


class Observable:
    """名前ごとにコールバックを登録できるクラス

    呼び出しはすべて同じスレッドから行う前提なのでロックは持たない。
    """

    def __init__(self) -> None:
        self._observers: Dict[str, List[Callback]] = {}

    def bind(self, event_name: str, callback: Callback) -> None:
        """イベントを監視"""
        callbacks = self._observers.setdefault(event_name, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def unbind(self, event_name: str, callback: Callback) -> None:
        """監視を解除"""
        callbacks = self._observers.get(event_name)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)
            if not callbacks:
                del self._observers[event_name]

    def unbind_all(self, event_name: Optional[str] = None) -> None:
        """すべての監視を解除"""
        if event_name:
            self._observers.pop(event_name, None)
        else:
            self._observers.clear()

    def _notify(self, event_name: str, value: Any = None) -> None:
        # 通知中の bind / unbind に備えてコピーしてから呼ぶ
        for callback in list(self._observers.get(event_name, ())):
            try:
                callback(value)
            except Exception:
                logger.exception(f"通知コールバックでエラー: {event_name}")

    def _emit(self, event_name: str, value: Any = None) -> None:
        """コールバックの例外をそのまま呼び出し元に伝える通知"""
        for callback in list(self._observers.get(event_name, ())):
            callback(value)
