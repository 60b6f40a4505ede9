# core/signals.py

from typing import Optional

from PySide6.QtCore import QObject, Signal

from core.live_list import LiveList


class LiveListSignal(QObject):
    """
    Re-emits a LiveList's snapshots as a Qt signal.

    Snapshots arrive on the database worker thread; widgets connected to
    `changed` get them through a queued connection on their own thread.
    """
    changed = Signal(object)

    def __init__(self, live_list: LiveList, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._live = live_list
        self._unsubscribe = live_list.subscribe(self._on_snapshot)

    def _on_snapshot(self, scripts: list) -> None:
        self.changed.emit(scripts)

    def detach(self) -> None:
        """Stop listening; the LiveList stays usable for others."""
        self._unsubscribe()
