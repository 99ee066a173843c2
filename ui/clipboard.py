"""
System clipboard access for rich (HTML + plain text) results.

Write order:
1. One QMimeData entry carrying both the HTML and plain-text representations
2. Fallback: load the HTML into an off-screen QTextEdit, select all and copy
3. Otherwise raise ClipboardError telling the user to paste manually

On X11 the writing process owns the content, so ``hand_off`` keeps the event
loop alive long enough for a clipboard manager to take it.
"""
from __future__ import annotations

import sys
from typing import Optional, Protocol

from core.errors import ClipboardError
from core.logger import logger

MANUAL_COPY_HINT = "Could not copy. Select the preview and copy it manually."
MANUAL_PASTE_HINT = "Could not read the clipboard. Paste manually with Ctrl+V."


class ClipboardBackend(Protocol):
    def write_mime(self, html: str, text: str) -> None:
        ...

    def copy_via_selection(self, html: str) -> None:
        ...

    def read_text(self) -> str:
        ...

    def read_html(self) -> Optional[str]:
        ...

    def hand_off(self, msec: int) -> None:
        ...


class QtClipboardBackend:
    """Clipboard backend built on PyQt6."""

    def __init__(self) -> None:
        # Lazy import - PyQt6 is only needed when the clipboard is used
        from PyQt6 import QtCore, QtWidgets

        self._QtCore = QtCore
        self._QtWidgets = QtWidgets
        self._app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)

    def _clipboard(self):
        return self._QtWidgets.QApplication.clipboard()

    def write_mime(self, html: str, text: str) -> None:
        mime = self._QtCore.QMimeData()
        mime.setHtml(html)
        mime.setText(text)
        self._clipboard().setMimeData(mime)
        if not self._clipboard().mimeData().hasHtml():
            raise RuntimeError("clipboard did not accept the HTML representation")

    def copy_via_selection(self, html: str) -> None:
        editor = self._QtWidgets.QTextEdit()
        editor.setAttribute(self._QtCore.Qt.WidgetAttribute.WA_DontShowOnScreen, True)
        editor.setHtml(html)
        editor.selectAll()
        editor.copy()
        editor.deleteLater()

    def read_text(self) -> str:
        return self._clipboard().text()

    def read_html(self) -> Optional[str]:
        mime = self._clipboard().mimeData()
        if mime is not None and mime.hasHtml():
            return mime.html()
        return None

    def hand_off(self, msec: int) -> None:
        # X11 clipboard content lives in the owning process; keep the event
        # loop running so a clipboard manager can take it over
        if self._QtWidgets.QApplication.platformName() != "xcb" or msec <= 0:
            return
        self._QtCore.QTimer.singleShot(msec, self._app.quit)
        self._app.exec()


class ClipboardService:
    """Copy results to, and read input from, the system clipboard."""

    def __init__(self, backend: Optional[ClipboardBackend] = None) -> None:
        self._backend = backend

    @property
    def backend(self) -> ClipboardBackend:
        if self._backend is None:
            self._backend = QtClipboardBackend()
        return self._backend

    def copy_rich(self, html: str, plain_text: str) -> str:
        """Copy ``html`` with a plain-text alternative; returns a status message."""
        try:
            self.backend.write_mime(html, plain_text or "")
            logger.info("Copied rich HTML to clipboard (%d chars)", len(html))
            return "Copied to clipboard (ready for Word)"
        except Exception as exc:  # noqa: BLE001
            logger.warning("Rich clipboard write failed, using fallback: %s", exc)

        try:
            self.backend.copy_via_selection(html)
        except Exception as exc:  # noqa: BLE001
            logger.error("Clipboard fallback failed: %s", exc)
            raise ClipboardError(MANUAL_COPY_HINT) from exc
        logger.info("Copied HTML to clipboard via selection fallback")
        return "Copied (fallback)"

    def hand_off(self, msec: int) -> None:
        """Keep serving the clipboard for ``msec`` before the process exits."""
        try:
            self.backend.hand_off(msec)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Clipboard hand-off failed, content may not outlive the process: %s", exc)

    def paste_text(self) -> str:
        try:
            return self.backend.read_text()
        except Exception as exc:  # noqa: BLE001
            logger.error("Clipboard read failed: %s", exc)
            raise ClipboardError(MANUAL_PASTE_HINT) from exc

    def paste_html(self) -> str:
        """HTML representation when present (keeps MathML), else plain text."""
        try:
            html = self.backend.read_html()
        except Exception as exc:  # noqa: BLE001
            logger.error("Clipboard HTML read failed: %s", exc)
            raise ClipboardError("Could not read HTML. Use the plain paste instead.") from exc
        if html:
            return html
        return self.paste_text()
