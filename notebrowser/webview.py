"""QtWebEngine content view that routes every navigation through the session controller."""

from __future__ import annotations

import json
import logging

from PySide6.QtCore import QEventLoop, QTimer, QUrl
from PySide6.QtWebEngineCore import QWebEnginePage, QWebEngineSettings
from PySide6.QtWebEngineWidgets import QWebEngineView

from .session import LoadFinished, SessionController

logger = logging.getLogger("notebrowser.webview")

BODY_MARKUP_TIMEOUT_MS = 500


class NoteWebPage(QWebEnginePage):
    """Page whose navigation requests are decided by the session controller."""

    def __init__(self, view: "NoteWebView"):
        super().__init__(view)
        self._view = view

    def acceptNavigationRequest(self, url, nav_type, is_main_frame):  # noqa: N802
        controller = self._view.controller
        if controller is None or not is_main_frame:
            return super().acceptNavigationRequest(url, nav_type, is_main_frame)
        return controller.decide_navigation(url.toString(), is_main_frame)


class NoteWebView(QWebEngineView):
    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.controller: SessionController | None = None
        self._editable = False
        self.setPage(NoteWebPage(self))
        settings = self.settings()
        # Notes are local HTML; links may point at files next to them.
        settings.setAttribute(QWebEngineSettings.WebAttribute.LocalContentCanAccessFileUrls, True)
        self.loadFinished.connect(self._on_load_finished)

    def attach(self, controller: SessionController) -> None:
        self.controller = controller

    def inject(self, html: str, base_url: str) -> None:
        self.setHtml(html, QUrl(base_url))

    def set_editable(self, editable: bool) -> None:
        self._editable = editable
        self._apply_editable()

    def _apply_editable(self) -> None:
        value = "true" if self._editable else "false"
        self.page().runJavaScript(f"if (document.body) {{ document.body.contentEditable = {json.dumps(value)}; }}")

    def current_body_markup(self) -> str:
        """Read ``document.body.innerHTML``, waiting briefly for the page to answer."""
        loop = QEventLoop(self)
        completed = {"done": False, "markup": ""}

        def on_result(result) -> None:
            if completed["done"]:
                return
            completed["done"] = True
            completed["markup"] = result if isinstance(result, str) else ""
            if loop.isRunning():
                loop.quit()

        self.page().runJavaScript("document.body ? document.body.innerHTML : ''", on_result)
        if not completed["done"]:
            timeout_timer = QTimer(self)
            timeout_timer.setSingleShot(True)
            timeout_timer.timeout.connect(loop.quit)
            timeout_timer.start(BODY_MARKUP_TIMEOUT_MS)
            loop.exec()
            timeout_timer.stop()
        if not completed["done"]:
            completed["done"] = True
            logger.warning("body_markup_timeout", extra={"timeout_ms": BODY_MARKUP_TIMEOUT_MS})
            # Never hand an empty body to save.
            raise TimeoutError("note view did not return its content")
        return completed["markup"]

    def _on_load_finished(self, ok: bool) -> None:
        if ok:
            self._apply_editable()
        controller = self.controller
        if controller is None:
            return

        def on_note_id(result, ok=ok) -> None:
            controller.post(LoadFinished(note_id=str(result or ""), ok=ok))

        self.page().runJavaScript("document.body ? (document.body.dataset.noteId || '') : ''", on_note_id)
