"""
インポート待ち画像のキューと、その操作
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, Union

from loguru import logger

from .errors import DeferredEvaluationError, EmptyQueueError, ImageNotFoundError
from .import_policy import ImportPolicy
from .observable import Observable
from .option_registry import ScalingHint
from .pending_source import PendingSource, SourceReference
from .queued_image import QueuedImage
from .settings_resolver import ConfirmedBatch, SettingsResolver

SourceLike = Union[PendingSource, SourceReference]


class PreviewQueue(Observable):
    """複数画像のインポートを順に進めるキュー

    通知されるイベント:
        current_image: 現在の画像が変わった (値: QueuedImage または None)
        current_mode: 表示用の補間ヒントが変わった可能性がある (値: ScalingHint)
        had_multiple: 複数画像モードのフラグ (値: bool)
        confirmed: 確定された設定 (値: ConfirmedBatch)
        closed: キューが空になった (値: None)
    """

    def __init__(
        self,
        policy: Optional[ImportPolicy] = None,
        resolver: Optional[SettingsResolver] = None,
    ) -> None:
        super().__init__()
        self.policy = policy or ImportPolicy()
        self.resolver = resolver or SettingsResolver()
        self._images: List[QueuedImage] = []
        self._cursor = 0
        self._had_multiple = False
        self.policy.bind("scale_choice", lambda _entry: self._notify_current_mode())

    # 状態
    @property
    def images(self) -> Tuple[QueuedImage, ...]:
        return tuple(self._images)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def had_multiple(self) -> bool:
        return self._had_multiple

    @property
    def current(self) -> Optional[QueuedImage]:
        if not self._images:
            return None
        return self._images[self._cursor]

    def require_current(self) -> QueuedImage:
        current = self.current
        if current is None:
            raise EmptyQueueError("no image in the queue")
        return current

    def __len__(self) -> int:
        return len(self._images)

    @property
    def current_mode(self) -> ScalingHint:
        """現在の画像に対する補間ヒント。画像が無いときは CRISP"""
        current = self.current
        if current is None:
            return ScalingHint.CRISP
        try:
            return self.policy.scale.hint_for(current.source.size())
        except DeferredEvaluationError as e:
            logger.warning(f"補間ヒントを決められません ({current.label}): {e}")
            return ScalingHint.CRISP

    # 追加
    def add(self, sources: Iterable[SourceLike]) -> List[QueuedImage]:
        added = [QueuedImage(PendingSource.wrap(source)) for source in sources]
        self._images.extend(added)
        if self._cursor < 0:
            # 空になった後の再追加は先頭から
            self._cursor = 0
        logger.debug(f"{len(added)} 件追加 (合計 {len(self._images)} 件)")
        self._notify_current()
        had_multiple = len(self._images) > 1
        if had_multiple != self._had_multiple:
            self._had_multiple = had_multiple
            self._notify("had_multiple", had_multiple)
        return added

    # 移動
    def navigate(self, delta: int) -> None:
        count = len(self._images)
        if count == 0:
            logger.debug("キューが空のため移動しません")
            return
        self._cursor = ((self._cursor + delta) % count + count) % count
        self._notify_current()

    def jump_to(self, image: QueuedImage) -> None:
        if not self._images:
            logger.debug("キューが空のため移動しません")
            return
        for index, queued in enumerate(self._images):
            if queued is image:
                self._cursor = index
                self._notify_current()
                return
        raise ImageNotFoundError(repr(image))

    # 変形
    def rotate(self, delta: float) -> None:
        current = self.current
        if current is not None:
            current.transform.rotate(delta)

    def flip_horizontal(self) -> None:
        current = self.current
        if current is not None:
            current.transform.flip_horizontal()

    def flip_vertical(self) -> None:
        current = self.current
        if current is not None:
            current.transform.flip_vertical()

    # 破棄
    def discard_current(self) -> Optional[QueuedImage]:
        if not self._images:
            logger.warning("キューが空のため破棄できません")
            return None
        removed = self._images.pop(self._cursor)
        if self._cursor >= len(self._images):
            self._cursor -= 1
        logger.debug(f"破棄: {removed.label}")
        self._after_removal()
        return removed

    def discard_all(self) -> List[QueuedImage]:
        if not self._images:
            logger.warning("キューが空のため破棄できません")
            return []
        removed = list(self._images)
        self._images.clear()
        self._cursor = 0
        logger.debug(f"すべて破棄: {len(removed)} 件")
        self._after_removal()
        return removed

    # 確定
    def confirm_current(self) -> Optional[ConfirmedBatch]:
        current = self.current
        if current is None:
            logger.warning("キューが空のため確定できません")
            return None
        batch = self.resolver.resolve_batch([current], self.policy.selection())
        # 受け取り側が失敗した場合はキューから取り除かない
        self._emit("confirmed", batch)
        self.discard_current()
        return batch

    def confirm_all(self) -> Optional[ConfirmedBatch]:
        if not self._images:
            logger.warning("キューが空のため確定できません")
            return None
        batch = self.resolver.resolve_batch(self._images, self.policy.selection())
        # 受け取り側が失敗した場合はキューから取り除かない
        self._emit("confirmed", batch)
        self.discard_all()
        return batch

    # 内部
    def _after_removal(self) -> None:
        self._notify_current()
        if not self._images:
            logger.info("キューが空になりました")
            self._notify("closed", None)

    def _notify_current(self) -> None:
        self._notify("current_image", self.current)
        self._notify_current_mode()

    def _notify_current_mode(self) -> None:
        # current_mode の計算は画像サイズの読み込みを伴うので、監視者がいるときだけ行う
        if self._observers.get("current_mode"):
            self._notify("current_mode", self.current_mode)
