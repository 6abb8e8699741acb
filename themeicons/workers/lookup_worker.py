"""Workers that report lookup results through Qt signals."""

from __future__ import annotations

from threading import Event

from PySide6.QtCore import QObject, Signal

from themeicons.lookup import IconLookup, IconOptions, default_lookup


class LookupWorker(QObject):
    """Runs one lookup step off the GUI thread and announces the outcome.

    Usage:
        worker = IconLookupWorker("firefox", "/usr/share/pixmaps/default.png")
        thread = QThread()
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(on_icon)
        worker.finished.connect(thread.quit)
        thread.start()

    A cancelled worker emits ``cancelled`` instead of ``finished``. Lookups
    never raise for a missing icon, so there is no error signal.
    """

    started = Signal()
    finished = Signal(object)
    cancelled = Signal()

    def __init__(self, lookup: IconLookup | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._lookup = lookup
        self._cancel_event = Event()

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def _is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def lookup(self) -> IconLookup:
        return self._lookup or default_lookup()

    def run(self) -> None:
        self.started.emit()
        if self._is_cancelled:
            self.cancelled.emit()
            return
        result = self._compute()
        # cancel() may arrive while the lookup walks the disk
        if self._is_cancelled:
            self.cancelled.emit()
            return
        self.finished.emit(result)

    def _compute(self) -> object:
        raise NotImplementedError


class IconLookupWorker(LookupWorker):
    """Resolves one icon and emits its path, or the fallback."""

    def __init__(self, options: IconOptions, fallback: str, lookup: IconLookup | None = None) -> None:
        super().__init__(lookup)
        self._options = options
        self._fallback = fallback

    def _compute(self) -> str:
        return self.lookup.get_icon_sync(self._options, self._fallback)


class ThemesPathWorker(LookupWorker):
    """Emits the list of installed index.theme paths."""

    def _compute(self) -> list[str]:
        return self.lookup.finder.find_themes_path_sync()
