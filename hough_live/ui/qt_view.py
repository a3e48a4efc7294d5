from __future__ import annotations

from collections import deque
from typing import Deque, Optional

import cv2
import numpy as np

from PySide6.QtCore import QEventLoop, QRectF, QSize, Qt, QTimer, Signal
from PySide6.QtGui import QCloseEvent, QImage, QKeyEvent, QPainter, QPixmap
from PySide6.QtWidgets import QApplication, QWidget

ESCAPE_KEY = 27


def _cv_to_qimage(bgr: np.ndarray) -> QImage:
    if bgr.ndim == 2:
        h, w = bgr.shape
        return QImage(bgr.data, w, h, w, QImage.Format_Grayscale8).copy()
    rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
    h, w = rgb.shape[:2]
    return QImage(rgb.data, w, h, 3 * w, QImage.Format_RGB888).copy()


def qt_key_to_code(key: int, text: str) -> Optional[int]:
    """Map a Qt key event to the 8-bit code cv2.waitKey would report."""
    if key == Qt.Key_Escape:
        return ESCAPE_KEY
    if text:
        return ord(text[0]) & 0xFF
    return None


class FrameView(QWidget):
    """Aspect-preserving frame viewer that queues key presses."""

    keyPressed = Signal(int)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._pix: Optional[QPixmap] = None
        self.keys: Deque[int] = deque()
        self.setMinimumSize(QSize(320, 240))
        self.setFocusPolicy(Qt.StrongFocus)

    def set_frame(self, bgr: np.ndarray) -> None:
        self._pix = QPixmap.fromImage(_cv_to_qimage(bgr))
        self.update()

    def _push(self, code: int) -> None:
        self.keys.append(code)
        self.keyPressed.emit(code)

    # ---- Events ----
    def keyPressEvent(self, ev: QKeyEvent) -> None:  # type: ignore[override]
        code = qt_key_to_code(ev.key(), ev.text())
        if code is None:
            super().keyPressEvent(ev)
            return
        self._push(code)

    def closeEvent(self, ev: QCloseEvent) -> None:  # type: ignore[override]
        # closing the window ends the session like ESC
        self._push(ESCAPE_KEY)
        super().closeEvent(ev)

    def paintEvent(self, ev) -> None:  # type: ignore[override]
        p = QPainter(self)
        p.fillRect(self.rect(), Qt.black)
        if not self._pix:
            p.setPen(Qt.white)
            p.drawText(self.rect(), Qt.AlignCenter, "Waiting for camera…")
            p.end()
            return
        w, h = self._pix.width(), self._pix.height()
        scale = min(self.width() / w, self.height() / h)
        x0 = (self.width() - w * scale) * 0.5
        y0 = (self.height() - h * scale) * 0.5
        p.drawPixmap(QRectF(x0, y0, w * scale, h * scale), self._pix, QRectF(0, 0, w, h))
        p.end()


class QtDisplay:
    """PySide6 window with the same show/poll_key/close surface as HighGuiDisplay."""

    def __init__(self, title: str, size: QSize = QSize(640, 480)) -> None:
        self._app = QApplication.instance() or QApplication([])
        self.view = FrameView()
        self.view.setWindowTitle(title)
        self.view.resize(size)
        self.view.show()

    def show(self, frame: np.ndarray) -> None:
        self.view.set_frame(frame)
        self._app.processEvents()

    def poll_key(self, delay_ms: int) -> Optional[int]:
        """Run the Qt event loop for up to `delay_ms` or until a key arrives."""
        if not self.view.keys:
            loop = QEventLoop()
            self.view.keyPressed.connect(loop.quit)
            QTimer.singleShot(max(1, int(delay_ms)), loop.quit)
            loop.exec()
            self.view.keyPressed.disconnect(loop.quit)
        return self.view.keys.popleft() if self.view.keys else None

    def close(self) -> None:
        self.view.hide()
        self.view.deleteLater()
        self._app.processEvents()
