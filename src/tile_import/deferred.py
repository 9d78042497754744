"""遅延評価される値。

引数なしの計算とメモ化セルを組にしたもので、最初に要求されたときに
一度だけ計算する。失敗した場合もその例外を記憶し、再評価はしない。
"""

from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

_UNSET = object()


class Deferred(Generic[T]):
    __slots__ = ("_compute", "_value", "_error")

    def __init__(self, compute: Callable[[], T]) -> None:
        self._compute: Optional[Callable[[], T]] = compute
        self._value: object = _UNSET
        self._error: Optional[BaseException] = None

    @classmethod
    def of(cls, value: T) -> "Deferred[T]":
        """評価済みの値を包む。"""
        deferred = cls(lambda: value)
        deferred.get()
        return deferred

    @property
    def evaluated(self) -> bool:
        return self._compute is None

    def get(self) -> T:
        if self._compute is not None:
            compute = self._compute
            # 再入と再評価を防ぐため、計算前にセルを閉じる
            self._compute = None
            try:
                self._value = compute()
            except Exception as exc:
                self._error = exc
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]

    def __call__(self) -> T:
        return self.get()

    def __repr__(self) -> str:
        if self._compute is not None:
            state = "pending"
        elif self._error is not None:
            state = f"failed: {self._error!r}"
        else:
            state = f"value={self._value!r}"
        return f"Deferred({state})"
