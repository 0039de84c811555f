# --- START: tests/test_diff_viewer.py ---
import importlib.util
import os
import unittest

import sys
if '.' not in sys.path:
	sys.path.append('.') # Add project root if needed

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

HAS_QT: bool = importlib.util.find_spec("PySide6") is not None

if HAS_QT:
	from PySide6.QtCore import QSize
	from PySide6.QtGui import QResizeEvent
	from PySide6.QtTest import QTest
	from PySide6.QtWidgets import QApplication

	from core.config_manager import DiffViewSettings
	from core.diff_engine import clearDiffCache
	from core.frame_scheduler import ManualFrameScheduler
	from core.models import BlockKind, ChangeBlock
	from gui.connector_gutter import ConnectorCanvas, ConnectorRenderer
	from gui.diff_pane import DiffPane
	from gui.diff_viewer import DiffViewerWidget

ORIGINAL: str = "\n".join([f"line {i}" for i in range(80)])
MODIFIED: str = "\n".join([f"line {i}" for i in range(80) if i not in (10, 11)] + ["appended"])


def _pump(rounds: int = 5) -> None:
	for _ in range(rounds):
		QApplication.processEvents()
		QTest.qWait(10)


@unittest.skipUnless(HAS_QT, "PySide6 is not installed")
class TestDiffViewerWidget(unittest.TestCase):
	"""Offscreen checks of the viewer wiring: panes, navigation, sync and modes."""

	@classmethod
	def setUpClass(cls) -> None:
		cls.app = QApplication.instance() or QApplication([])

	def setUp(self: 'TestDiffViewerWidget') -> None:
		clearDiffCache()
		self.viewer = DiffViewerWidget(DiffViewSettings(jumpToFirstHunk=False))
		self.viewer.resize(900, 600)
		self.viewer.show()
		_pump()

	def tearDown(self: 'TestDiffViewerWidget') -> None:
		self.viewer.close()
		self.viewer.deleteLater()
		_pump(1)

	def test_setContent_populatesPanesAndStats(self: 'TestDiffViewerWidget') -> None:
		computed = []
		self.viewer.diffComputed.connect(lambda added, removed: computed.append((added, removed)))
		self.viewer.set_content(ORIGINAL, MODIFIED, "notes.txt", "text")
		result = self.viewer.result
		self.assertEqual([block.kind for block in result.changeBlocks], [BlockKind.REMOVED, BlockKind.ADDED])
		self.assertEqual(computed, [(1, 2)])
		self.assertEqual(self.viewer._addedStatLabel.text(), "+1")
		self.assertEqual(self.viewer._removedStatLabel.text(), "-2")
		self.assertIn("line 79", self.viewer._originalPane.toPlainText())
		self.assertIn("appended", self.viewer._modifiedPane.toPlainText())

	def test_unchangedInputsAreNotRecomputed(self: 'TestDiffViewerWidget') -> None:
		self.viewer.set_content(ORIGINAL, MODIFIED, "notes.txt", "text")
		first = self.viewer.result
		self.viewer.set_content(ORIGINAL, MODIFIED, "notes.txt", "text")
		self.assertIs(self.viewer.result, first)

	def test_navigationControls(self: 'TestDiffViewerWidget') -> None:
		self.viewer.set_content(ORIGINAL, MODIFIED, "notes.txt", "text")
		self.assertEqual(self.viewer.navigator.hunks, [10, 78])
		self.assertEqual(self.viewer._hunkCounterLabel.text(), "1 / 2")
		self.assertFalse(self.viewer._prevHunkButton.isEnabled())
		self.viewer.go_to_next_hunk()
		self.assertEqual(self.viewer._hunkCounterLabel.text(), "2 / 2")
		self.assertFalse(self.viewer._nextHunkButton.isEnabled())

	def test_noChangesHidesNavigation(self: 'TestDiffViewerWidget') -> None:
		self.viewer.set_content(ORIGINAL, ORIGINAL, "notes.txt", "text")
		self.assertFalse(self.viewer._navWidget.isVisible())

	def test_scrollingModifiedPaneDrivesOriginal(self: 'TestDiffViewerWidget') -> None:
		self.viewer.set_content(ORIGINAL, MODIFIED, "notes.txt", "text")
		_pump()
		lineHeight = self.viewer._originalPane.line_height
		self.assertGreater(lineHeight, 0)
		self.viewer._modifiedPane.verticalScrollBar().setValue(int(20 * lineHeight))
		originalTop = self.viewer._originalPane.verticalScrollBar().value()
		# Modified line 20 sits after the two removed lines: original line 22
		self.assertAlmostEqual(originalTop / lineHeight, 22, delta=1.0)
		self.assertEqual(self.viewer.synchronizer.driver.value, "right")
		_pump()
		self.assertTrue(self.viewer.synchronizer.isIdle)

	def test_tooLargeShowsNotice(self: 'TestDiffViewerWidget') -> None:
		viewer = DiffViewerWidget(DiffViewSettings(maxDiffCells=10))
		try:
			viewer.set_content(ORIGINAL, MODIFIED, "notes.txt", "text")
			self.assertFalse(viewer.result.hasChanges)
			self.assertIn("Diff too large", viewer._originalPane.toPlainText())
			self.assertIn("appended", viewer._modifiedPane.toPlainText())
		finally:
			viewer.dispose()
			viewer.deleteLater()

	def test_modifiedOnlyMarkdown(self: 'TestDiffViewerWidget') -> None:
		self.viewer.set_content("# Title", "# Title\n\nSome *text*", "README.md", "markdown")
		self.viewer.set_modified_only(True)
		self.assertFalse(self.viewer._originalPanel.isVisible())
		self.assertIs(self.viewer._modifiedStack.currentWidget(), self.viewer._markdownView)
		self.assertTrue(self.viewer._copyHtmlButton.isVisible())
		self.viewer.set_modified_only(False)
		self.assertIs(self.viewer._modifiedStack.currentWidget(), self.viewer._modifiedPane)
		self.assertFalse(self.viewer._copyHtmlButton.isVisible())

	def test_copyModifiedPlainText(self: 'TestDiffViewerWidget') -> None:
		finished = []
		self.viewer.copyFinished.connect(lambda action, ok: finished.append((action, ok)))
		self.viewer.set_content(ORIGINAL, MODIFIED, "notes.txt", "text")
		self.assertTrue(self.viewer.copy_modified())
		self.assertEqual(QApplication.clipboard().text(), MODIFIED)
		self.assertEqual(finished, [("copy", True)])

	def test_connectorPaintsAfterFrame(self: 'TestDiffViewerWidget') -> None:
		self.viewer.set_content(ORIGINAL, MODIFIED, "notes.txt", "text")
		self.assertTrue(self.viewer.connector.has_pending_paint)
		_pump()
		self.assertFalse(self.viewer.connector.has_pending_paint)
		_width, _height, shapes = self.viewer.connector.current_shapes()
		self.assertEqual([shape.kind for shape in shapes], [BlockKind.REMOVED])

	def test_paneHeadersArePlainLabels(self: 'TestDiffViewerWidget') -> None:
		self.assertEqual(self.viewer._originalPanel.header.text(), "Original")
		self.assertEqual(self.viewer._modifiedPanel.header.text(), "Modified")


@unittest.skipUnless(HAS_QT, "PySide6 is not installed")
class TestConnectorRenderer(unittest.TestCase):
	"""Repaint coalescing, backing store sizing and teardown of the connector gutter."""

	@classmethod
	def setUpClass(cls) -> None:
		cls.app = QApplication.instance() or QApplication([])

	def setUp(self: 'TestConnectorRenderer') -> None:
		self.left = DiffPane()
		self.right = DiffPane()
		self.canvas = ConnectorCanvas()
		self.canvas.resize(40, 300)
		self.scheduler = ManualFrameScheduler()
		self.renderer = ConnectorRenderer(self.canvas, self.left, self.right, self.scheduler, lambda: 20.0)
		self.renderer.set_blocks([ChangeBlock(1, 2, 1, 0, BlockKind.REMOVED)])

	def tearDown(self: 'TestConnectorRenderer') -> None:
		self.renderer.dispose()
		for widget in (self.canvas, self.left, self.right):
			widget.deleteLater()
		_pump(1)

	def test_secondRequestReplacesPendingOne(self: 'TestConnectorRenderer') -> None:
		self.assertEqual(self.scheduler.pendingCount, 1)
		self.renderer.schedulePaint()
		self.renderer.schedulePaint()
		self.assertEqual(self.scheduler.pendingCount, 1)
		self.assertEqual(self.scheduler.flush(), 1)
		self.assertFalse(self.renderer.has_pending_paint)
		self.assertIsNotNone(self.canvas.pixmap())

	def test_backingStoreScaledByDevicePixelRatio(self: 'TestConnectorRenderer') -> None:
		self.assertTrue(self.renderer.paintNow())
		dpr = self.canvas.devicePixelRatioF() or 1.0
		pixmap = self.canvas.pixmap()
		self.assertEqual(pixmap.width(), round(self.canvas.width() * dpr))
		self.assertEqual(pixmap.height(), round(self.canvas.height() * dpr))
		self.assertAlmostEqual(pixmap.devicePixelRatio(), dpr)

	def test_zeroSizeCanvasPaintsNothing(self: 'TestConnectorRenderer') -> None:
		self.canvas.resize(40, 0)
		self.assertEqual(self.canvas.height(), 0)
		self.assertFalse(self.renderer.paintNow())
		self.assertIsNone(self.canvas.pixmap())

	def test_resizeRequestsRepaint(self: 'TestConnectorRenderer') -> None:
		self.scheduler.flush()
		QApplication.sendEvent(self.canvas, QResizeEvent(QSize(40, 200), QSize(40, 300)))
		self.assertEqual(self.scheduler.pendingCount, 1)

	def test_disposeDetachesAndCancels(self: 'TestConnectorRenderer') -> None:
		self.assertTrue(self.renderer.has_pending_paint)
		self.renderer.dispose()
		self.assertEqual(self.scheduler.pendingCount, 0)
		self.assertFalse(self.renderer.has_pending_paint)

		self.renderer.schedulePaint()
		self.assertEqual(self.scheduler.pendingCount, 0)
		QApplication.sendEvent(self.canvas, QResizeEvent(QSize(40, 200), QSize(40, 300)))
		self.assertEqual(self.scheduler.pendingCount, 0)
		self.assertFalse(self.renderer.paintNow())
		self.assertEqual(self.renderer.current_shapes(), (0.0, 0.0, []))


if __name__ == '__main__':
	unittest.main()
# --- END: tests/test_diff_viewer.py ---
