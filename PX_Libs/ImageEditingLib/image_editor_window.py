import asyncio
import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from PyQt5.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QKeyEvent, QPainter, QPen, QPixmap
from PyQt5.QtWidgets import (
    QFileDialog,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSlider,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from PX_Libs.constants import (
    APP_NAME,
    CROP_HANDLE_TOLERANCE,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    FILTER_RANGES,
    MAX_DIMENSION,
    PREVIEW_MIN_SIZE,
    STANDARD_IMAGE_FILTER,
)
from PX_Libs.errors import PixelsError
from PX_Libs.EditSessionLib import shortcuts
from PX_Libs.EditSessionLib.crop_controller import BODY, handle_points, hit_test
from PX_Libs.EditSessionLib.editor_context import EditorContext
from PX_Libs.ImageEditingLib.image_codec import encode_png
from PX_Libs.ImageEditingLib.pixel_buffer import PixelBuffer
from PX_Libs.ImageEditingLib.presets import list_presets
from PX_Libs.ImageEditingLib.transform_engine import derive_resize_dimensions

logger = logging.getLogger(__name__)

# Slider label and integer steps per filter unit
SLIDERS: Dict[str, Tuple[str, int]] = {
    "brightness": ("Brightness", 1),
    "contrast": ("Contrast", 1),
    "saturation": ("Saturation", 1),
    "blur": ("Blur", 10),
    "hue": ("Hue", 1),
    "rotate": ("Rotate", 1),
    "opacity": ("Opacity", 1),
    "sharpen": ("Sharpen", 1),
}


class PreviewLabel(QLabel):
    """Preview area reporting pointer events in widget coordinates."""

    pointerPressed = pyqtSignal(float, float)
    pointerMoved = pyqtSignal(float, float)
    pointerReleased = pyqtSignal()

    def __init__(self, text: str = "") -> None:
        super().__init__(text)
        self.setMouseTracking(False)

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self.pointerPressed.emit(event.x(), event.y())

    def mouseMoveEvent(self, event) -> None:
        if event.buttons() & Qt.LeftButton:
            self.pointerMoved.emit(event.x(), event.y())

    def mouseReleaseEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self.pointerReleased.emit()


class PixelsEditorWindow(QMainWindow):
    def __init__(self, context: Optional[EditorContext] = None) -> None:
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)
        self.setAcceptDrops(True)

        self.context = context or EditorContext()
        self.sliders: Dict[str, QSlider] = {}
        self.preset_buttons: Dict[str, QPushButton] = {}
        self._rendered: Optional[PixelBuffer] = None
        self._syncing = False

        self._build_ui()
        self._connect_signals()
        self._sync_controls()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QHBoxLayout(central)
        controls_col = QVBoxLayout()

        self.btn_open = QPushButton("Open Image")
        self.btn_download = QPushButton("Download")
        self.btn_undo = QPushButton("Undo")
        self.btn_redo = QPushButton("Redo")
        self.btn_reset = QPushButton("Reset Filters")
        self.btn_flip_h = QPushButton("Flip Horizontal")
        self.btn_flip_v = QPushButton("Flip Vertical")
        self.btn_crop = QPushButton("Crop")
        self.btn_apply_crop = QPushButton("Apply Crop")
        self.btn_cancel_crop = QPushButton("Cancel Crop")
        self.btn_resize = QPushButton("Apply Resize")

        self.spin_width = QSpinBox()
        self.spin_height = QSpinBox()
        for spin in (self.spin_width, self.spin_height):
            spin.setRange(0, MAX_DIMENSION)
            spin.setSpecialValueText(" ")

        self.label_size = QLabel("No image")
        self.label_preview = PreviewLabel("Drop an image here or click Open Image")
        self.label_preview.setAlignment(Qt.AlignCenter)
        self.label_preview.setMinimumSize(PREVIEW_MIN_SIZE, PREVIEW_MIN_SIZE)
        self.label_preview.setStyleSheet("border: 1px solid #888;")

        file_row = QHBoxLayout()
        file_row.addWidget(self.btn_open)
        file_row.addWidget(self.btn_download)
        history_row = QHBoxLayout()
        history_row.addWidget(self.btn_undo)
        history_row.addWidget(self.btn_redo)
        controls_col.addLayout(file_row)
        controls_col.addLayout(history_row)
        controls_col.addWidget(self.label_size)

        slider_grid = QGridLayout()
        for row, (name, (label, steps)) in enumerate(SLIDERS.items()):
            low, high = FILTER_RANGES[name]
            slider = QSlider(Qt.Horizontal)
            slider.setRange(int(low * steps), int(high * steps))
            self.sliders[name] = slider
            slider_grid.addWidget(QLabel(label), row, 0)
            slider_grid.addWidget(slider, row, 1)
        controls_col.addLayout(slider_grid)

        flip_row = QHBoxLayout()
        flip_row.addWidget(self.btn_flip_h)
        flip_row.addWidget(self.btn_flip_v)
        controls_col.addLayout(flip_row)

        controls_col.addWidget(QLabel("Presets"))
        preset_row = QHBoxLayout()
        for name in list_presets():
            button = QPushButton(name.capitalize())
            button.setCheckable(True)
            self.preset_buttons[name] = button
            preset_row.addWidget(button)
        controls_col.addLayout(preset_row)

        controls_col.addWidget(QLabel("Resize (leave one blank to keep aspect)"))
        resize_row = QHBoxLayout()
        resize_row.addWidget(self.spin_width)
        resize_row.addWidget(QLabel("x"))
        resize_row.addWidget(self.spin_height)
        resize_row.addWidget(self.btn_resize)
        controls_col.addLayout(resize_row)

        crop_row = QHBoxLayout()
        crop_row.addWidget(self.btn_crop)
        crop_row.addWidget(self.btn_apply_crop)
        crop_row.addWidget(self.btn_cancel_crop)
        controls_col.addLayout(crop_row)

        controls_col.addWidget(self.btn_reset)
        controls_col.addStretch(1)

        root.addLayout(controls_col, stretch=1)
        root.addWidget(self.label_preview, stretch=2)

    def _connect_signals(self) -> None:
        self.btn_open.clicked.connect(self.open_image)
        self.btn_download.clicked.connect(self.download)
        self.btn_undo.clicked.connect(lambda: self._run(self.context.undo))
        self.btn_redo.clicked.connect(lambda: self._run(self.context.redo))
        self.btn_reset.clicked.connect(lambda: self._run(self.context.reset_filters))
        self.btn_flip_h.clicked.connect(lambda: self._run(self.context.flip_horizontal))
        self.btn_flip_v.clicked.connect(lambda: self._run(self.context.flip_vertical))
        self.btn_crop.clicked.connect(lambda: self._run(self.context.start_crop))
        self.btn_apply_crop.clicked.connect(lambda: self._run(self.context.apply_crop))
        self.btn_cancel_crop.clicked.connect(lambda: self._run(self.context.cancel_crop))
        self.btn_resize.clicked.connect(self.apply_resize)
        self.spin_width.valueChanged.connect(self.on_width_changed)

        for name, slider in self.sliders.items():
            slider.valueChanged.connect(lambda value, n=name: self.on_slider_moved(n, value))
            slider.sliderReleased.connect(lambda: self._run(self.context.commit_filters))

        for name, button in self.preset_buttons.items():
            button.clicked.connect(lambda _checked, n=name: self._run(lambda: self.context.apply_preset(n)))

        self.label_preview.pointerPressed.connect(self.on_pointer_pressed)
        self.label_preview.pointerMoved.connect(self.on_pointer_moved)
        self.label_preview.pointerReleased.connect(self.on_pointer_released)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _run(self, command: Callable[[], object]) -> None:
        """Run an editor command, then refresh; PixelsErrors become message boxes."""
        try:
            command()
        except PixelsError as e:
            self._show_warning("Pixels", str(e))
        self._sync_controls()
        self.refresh_preview()

    def open_image(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Open Image", "", STANDARD_IMAGE_FILTER)
        if file_path:
            self.load_path(Path(file_path))

    def load_path(self, path: Path) -> None:
        try:
            asyncio.run(self.context.open_image_file(path))
        except (PixelsError, OSError) as e:
            self._show_warning("Open Image", str(e))
            return

        self._sync_controls()
        self.refresh_preview()

    def download(self) -> None:
        try:
            result = self.context.download()
        except PixelsError as e:
            self._show_warning("Download", str(e))
            return

        folder = QFileDialog.getExistingDirectory(self, "Select Save Directory")
        if not folder:
            return

        try:
            saved = result.save(folder)
        except OSError as e:
            self._show_warning("Download", str(e))
            return
        self._show_info("Success", f"Image saved to {saved}")

    def apply_resize(self) -> None:
        width = self.spin_width.value() or None
        height = self.spin_height.value() or None
        self._run(lambda: self.context.apply_resize(width, height))

    def on_width_changed(self, width: int) -> None:
        if self._syncing or not self.context.has_image or not width:
            return

        buffer = self.context.buffer
        _, height = derive_resize_dimensions(buffer.width, buffer.height, width=width)
        self._syncing = True
        self.spin_height.setValue(height)
        self._syncing = False

    def on_slider_moved(self, name: str, position: int) -> None:
        if self._syncing:
            return

        _, steps = SLIDERS[name]
        self.context.set_filter(name, position / steps)
        # Keyboard steps and track clicks never emit sliderReleased
        if not self.sliders[name].isSliderDown():
            self._run(self.context.commit_filters)
            return
        self.refresh_preview()

    # ------------------------------------------------------------------
    # Crop pointer handling
    # ------------------------------------------------------------------

    def _display_geometry(self) -> Optional[Tuple[float, float, float]]:
        """(offset_x, offset_y, image pixels per display pixel) of the shown pixmap."""
        pixmap = self.label_preview.pixmap()
        if pixmap is None or pixmap.isNull() or self._rendered is None:
            return None

        offset_x = (self.label_preview.width() - pixmap.width()) / 2
        offset_y = (self.label_preview.height() - pixmap.height()) / 2
        return offset_x, offset_y, self._rendered.width / pixmap.width()

    def _to_image_coords(self, x: float, y: float) -> Optional[Tuple[float, float]]:
        geometry = self._display_geometry()
        if geometry is None:
            return None
        offset_x, offset_y, scale = geometry
        return (x - offset_x) * scale, (y - offset_y) * scale

    def on_pointer_pressed(self, x: float, y: float) -> None:
        if not self.context.is_cropping:
            return
        point = self._to_image_coords(x, y)
        geometry = self._display_geometry()
        if point is None or geometry is None:
            return

        target = hit_test(self.context.crop.rect, *point, tolerance=CROP_HANDLE_TOLERANCE * geometry[2])
        if target is None:
            return
        self.context.crop_pointer_down(*point, handle=None if target == BODY else target)

    def on_pointer_moved(self, x: float, y: float) -> None:
        point = self._to_image_coords(x, y)
        if point is None or not self.context.is_cropping:
            return
        self.context.crop_pointer_move(*point)
        self.refresh_preview(rerender=False)

    def on_pointer_released(self) -> None:
        if self.context.is_cropping:
            self.context.crop_pointer_up()

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key = event.key()
        if Qt.Key_A <= key <= Qt.Key_Z:
            name = chr(key).lower()
        elif key == Qt.Key_Escape:
            name = "Escape"
        elif key in (Qt.Key_Return, Qt.Key_Enter):
            name = "Enter"
        else:
            super().keyPressEvent(event)
            return

        modifiers = event.modifiers()
        command = shortcuts.resolve_shortcut(
            name,
            ctrl=bool(modifiers & Qt.ControlModifier),
            shift=bool(modifiers & Qt.ShiftModifier),
            meta=bool(modifiers & Qt.MetaModifier),
            cropping=self.context.is_cropping,
        )
        if command is None:
            super().keyPressEvent(event)
            return

        logger.debug(f"Shortcut resolved to '{command}'")
        if command == shortcuts.OPEN:
            self.open_image()
        elif command == shortcuts.DOWNLOAD:
            self.download()
        else:
            self._run(getattr(self.context, command))

    def dragEnterEvent(self, event) -> None:
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event) -> None:
        urls = [url for url in event.mimeData().urls() if url.isLocalFile()]
        if urls:
            self.load_path(Path(urls[0].toLocalFile()))

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self.refresh_preview(rerender=False)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def _sync_controls(self) -> None:
        """Move sliders, preset toggles and labels to the context's state without firing previews."""
        self._syncing = True
        filters = self.context.filters
        for name, slider in self.sliders.items():
            _, steps = SLIDERS[name]
            slider.setValue(int(round(getattr(filters, name) * steps)))

        active = self.context.active_preset
        for name, button in self.preset_buttons.items():
            button.setChecked(active is not None and active.value == name)

        if self.context.has_image:
            buffer = self.context.buffer
            self.label_size.setText(f"{buffer.width} x {buffer.height}")
            self.spin_width.setValue(0)
            self.spin_height.setValue(0)
        self._syncing = False

        cropping = self.context.is_cropping
        self.btn_apply_crop.setEnabled(cropping)
        self.btn_cancel_crop.setEnabled(cropping)
        self.btn_undo.setEnabled(self.context.history.can_undo)
        self.btn_redo.setEnabled(self.context.history.can_redo)

    def refresh_preview(self, rerender: bool = True) -> None:
        if not self.context.has_image:
            self._rendered = None
            self.label_preview.setText("Drop an image here or click Open Image")
            return

        if rerender or self._rendered is None:
            self._rendered = self.context.render()

        pixmap = QPixmap()
        if not pixmap.loadFromData(encode_png(self._rendered), "PNG"):
            self.label_preview.setText("Preview failed")
            return

        scaled = pixmap.scaled(
            self.label_preview.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        if self.context.is_cropping:
            self._paint_crop_overlay(scaled)
        self.label_preview.setPixmap(scaled)

    def _paint_crop_overlay(self, pixmap: QPixmap) -> None:
        rect = self.context.crop.rect
        ratio = pixmap.width() / self._rendered.width
        shown = QRectF(rect.x * ratio, rect.y * ratio, rect.width * ratio, rect.height * ratio)

        painter = QPainter(pixmap)
        shade = QColor(0, 0, 0, 128)
        full = QRectF(0, 0, pixmap.width(), pixmap.height())
        painter.fillRect(QRectF(full.left(), full.top(), full.width(), shown.top()), shade)
        painter.fillRect(QRectF(full.left(), shown.bottom(), full.width(), full.bottom() - shown.bottom()), shade)
        painter.fillRect(QRectF(full.left(), shown.top(), shown.left(), shown.height()), shade)
        painter.fillRect(QRectF(shown.right(), shown.top(), full.right() - shown.right(), shown.height()), shade)

        painter.setPen(QPen(QColor(255, 255, 255), 2))
        painter.drawRect(shown)
        painter.setBrush(QColor(255, 255, 255))
        for _, hx, hy in handle_points(rect):
            painter.drawEllipse(QPointF(hx * ratio, hy * ratio), 5, 5)
        painter.end()

    def _show_info(self, title: str, message: str) -> None:
        QMessageBox.information(self, title, message)

    def _show_warning(self, title: str, message: str) -> None:
        logger.warning(f"{title}: {message}")
        QMessageBox.warning(self, title, message)
