# gui/connector_gutter.py
"""
Connector overlay between the original and modified panes.

ConnectorRenderer paints bezier-linked bands, one per change block, into an
off-screen QPixmap sized for the screen's device pixel ratio, then hands the
pixmap to ConnectorCanvas, which only blits it. Repaints are requested
imperatively (schedulePaint/paintNow) from scroll and resize notifications,
never from the viewer's state updates. At most one repaint is pending: a new
request cancels the previous one.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from PySide6.QtCore import QEvent, QObject, QPoint, QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPainterPath, QPaintEvent, QPen, QPixmap
from PySide6.QtWidgets import QAbstractScrollArea, QSizePolicy, QWidget

from core.connector_geometry import CONNECTOR_PALETTE, ConnectorShape, PaneViewport, Rgba, computeConnectorShapes
from core.frame_scheduler import FrameScheduler
from core.models import ChangeBlock

logger: logging.Logger = logging.getLogger(__name__)

GUTTER_WIDTH: int = 40


def _qcolor(rgba: Rgba) -> QColor:
	red, green, blue, alpha = rgba
	color = QColor(red, green, blue)
	color.setAlphaF(alpha)
	return color


class ConnectorCanvas(QWidget):
	"""The gutter widget. Shows whatever pixmap it was last given."""

	def __init__(self: 'ConnectorCanvas', parent: Optional[QWidget] = None) -> None:
		super().__init__(parent)
		self._pixmap: Optional[QPixmap] = None
		self.setFixedWidth(GUTTER_WIDTH)
		self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Expanding)
		self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
		self.setObjectName("connectorGutter")

	def pixmap(self: 'ConnectorCanvas') -> Optional[QPixmap]:
		return self._pixmap

	def setPixmap(self: 'ConnectorCanvas', pixmap: Optional[QPixmap]) -> None:
		self._pixmap = pixmap
		self.update()

	def paintEvent(self: 'ConnectorCanvas', event: QPaintEvent) -> None:
		if self._pixmap is None or self._pixmap.isNull():
			return
		painter = QPainter(self)
		painter.drawPixmap(0, 0, self._pixmap)
		painter.end()


def pane_viewport(pane: QAbstractScrollArea, canvas: QWidget) -> PaneViewport:
	"""Measures a pane's content area relative to the gutter's top edge."""
	viewport = pane.viewport()
	offsetY = viewport.mapToGlobal(QPoint(0, 0)).y() - canvas.mapToGlobal(QPoint(0, 0)).y()
	return PaneViewport(
		offsetY=float(offsetY),
		scrollTop=float(pane.verticalScrollBar().value()),
		viewHeight=float(viewport.height()),
	)


def build_connector_path(shape: ConnectorShape, width: float) -> QPainterPath:
	"""Band from the left edge to the right edge, control points on the midline."""
	cx = width * 0.5
	path = QPainterPath()
	path.moveTo(0.0, shape.leftTop)
	path.cubicTo(QPointF(cx, shape.leftTop), QPointF(cx, shape.rightTop), QPointF(width, shape.rightTop))
	path.lineTo(width, shape.rightBottom)
	path.cubicTo(QPointF(cx, shape.rightBottom), QPointF(cx, shape.leftBottom), QPointF(0.0, shape.leftBottom))
	path.closeSubpath()
	return path


class ConnectorRenderer(QObject):
	"""
	Owns the connector painting for one viewer.

	Args:
		canvas (ConnectorCanvas): The gutter widget to paint for.
		left_pane (QAbstractScrollArea): Original pane.
		right_pane (QAbstractScrollArea): Modified pane.
		scheduler (FrameScheduler): Used to coalesce repaints to one per frame.
		line_height (Callable[[], float]): Current line height in px.
	"""

	def __init__(
		self: 'ConnectorRenderer',
		canvas: ConnectorCanvas,
		left_pane: QAbstractScrollArea,
		right_pane: QAbstractScrollArea,
		scheduler: FrameScheduler,
		line_height: Callable[[], float],
		parent: Optional[QObject] = None
	) -> None:
		super().__init__(parent)
		self._canvas: Optional[ConnectorCanvas] = canvas
		self._left_pane = left_pane
		self._right_pane = right_pane
		self._scheduler = scheduler
		self._line_height = line_height
		self._blocks: Sequence[ChangeBlock] = ()
		self._pending_handle: Optional[int] = None
		self._suspended: bool = False
		canvas.installEventFilter(self)

	@property
	def has_pending_paint(self: 'ConnectorRenderer') -> bool:
		return self._pending_handle is not None

	def set_blocks(self: 'ConnectorRenderer', blocks: Sequence[ChangeBlock]) -> None:
		self._blocks = blocks
		self.schedulePaint()

	def set_suspended(self: 'ConnectorRenderer', suspended: bool) -> None:
		"""Stops painting while the gutter is hidden (modified-only mode)."""
		self._suspended = suspended
		if suspended:
			self._cancel_pending()
		else:
			self.schedulePaint()

	def eventFilter(self: 'ConnectorRenderer', watched: QObject, event: QEvent) -> bool:
		if watched is self._canvas and event.type() == QEvent.Type.Resize:
			self.schedulePaint()
		return False

	def schedulePaint(self: 'ConnectorRenderer') -> None:
		"""Requests a repaint on the next frame, replacing any pending request."""
		if self._canvas is None or self._suspended:
			return
		self._cancel_pending()
		self._pending_handle = self._scheduler.requestFrame(self._run_scheduled)

	def _run_scheduled(self: 'ConnectorRenderer') -> None:
		self._pending_handle = None
		self.paintNow()

	def _cancel_pending(self: 'ConnectorRenderer') -> None:
		self._scheduler.cancelFrame(self._pending_handle)
		self._pending_handle = None

	def current_shapes(self: 'ConnectorRenderer') -> Tuple[float, float, List[ConnectorShape]]:
		"""Returns (width, height, shapes) for the gutter as currently laid out."""
		canvas = self._canvas
		if canvas is None:
			return 0.0, 0.0, []
		left = pane_viewport(self._left_pane, canvas)
		right = pane_viewport(self._right_pane, canvas)
		shapes = computeConnectorShapes(self._blocks, self._line_height(), left, right)
		return float(canvas.width()), float(canvas.height()), shapes

	def paintNow(self: 'ConnectorRenderer') -> bool:
		"""
		Paints the connectors immediately.

		Returns:
			bool: False when nothing could be painted (no canvas, zero size,
			or no usable paint surface); the panes are unaffected.
		"""
		canvas = self._canvas
		if canvas is None or self._suspended:
			return False
		width, height = canvas.width(), canvas.height()
		if width <= 0 or height <= 0:
			return False

		dpr = canvas.devicePixelRatioF() or 1.0
		pixmap = QPixmap(round(width * dpr), round(height * dpr))
		if pixmap.isNull():
			logger.debug("Connector backing store unavailable; skipping paint.")
			return False
		pixmap.setDevicePixelRatio(dpr)
		pixmap.fill(Qt.GlobalColor.transparent)

		_, _, shapes = self.current_shapes()
		clip_top = pane_viewport(self._left_pane, canvas).offsetY

		painter = QPainter()
		if not painter.begin(pixmap):
			logger.debug("Could not open a painter on the connector backing store; skipping paint.")
			return False
		try:
			painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
			# Keep connectors below the pane headers
			painter.setClipRect(QRectF(0.0, clip_top, float(width), float(height) - clip_top))
			for shape in shapes:
				fill, stroke = CONNECTOR_PALETTE[shape.kind]
				painter.setBrush(_qcolor(fill))
				painter.setPen(QPen(_qcolor(stroke), 1.0))
				painter.drawPath(build_connector_path(shape, float(width)))
		finally:
			painter.end()

		canvas.setPixmap(pixmap)
		return True

	def dispose(self: 'ConnectorRenderer') -> None:
		"""Detaches the resize watcher and cancels any pending repaint."""
		self._cancel_pending()
		if self._canvas is not None:
			self._canvas.removeEventFilter(self)
			self._canvas.setPixmap(None)
			self._canvas = None
