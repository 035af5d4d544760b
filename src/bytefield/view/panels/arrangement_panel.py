"""
Arrangement Control Panel
Sliders and selectors feeding the animation driver.
"""
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGroupBox, QFormLayout, QComboBox, QSlider,
    QLabel, QHBoxLayout, QPushButton, QCheckBox
)

from bytefield import config
from bytefield.model.arrangements import ShapeMode, ShapeParameters
from bytefield.view.widgets.instance_geometry import ObjectType

# Float sliders are integer QSliders scaled by this factor (one decimal place)
SLIDER_SCALE = 10


# ==========================================
# HELPER WIDGETS
# ==========================================

class LabeledSlider(QWidget):
    """Horizontal slider with a value readout, e.g. '1.0x'."""
    value_changed = Signal(float)

    def __init__(
        self,
        minimum: float,
        maximum: float,
        value: float,
        scale: int = SLIDER_SCALE,
        suffix: str = "",
        parent: Optional[QWidget] = None
    ) -> None:
        super().__init__(parent)
        self._scale = scale
        self._suffix = suffix

        self.slider = QSlider(Qt.Horizontal)
        self.slider.setRange(round(minimum * scale), round(maximum * scale))
        self.slider.setValue(round(value * scale))
        self.readout = QLabel()
        self.readout.setMinimumWidth(40)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.slider, 1)
        layout.addWidget(self.readout)

        self.slider.valueChanged.connect(self._on_slider)
        self._update_readout()

    def value(self) -> float:
        return self.slider.value() / self._scale

    def _update_readout(self) -> None:
        if self._scale == 1:
            self.readout.setText(f"{self.slider.value()}{self._suffix}")
        else:
            self.readout.setText(f"{self.value():.1f}{self._suffix}")

    def _on_slider(self, *_) -> None:
        self._update_readout()
        self.value_changed.emit(self.value())


# ==========================================
# PANEL
# ==========================================

class ArrangementControlPanel(QWidget):
    open_requested = Signal(bool)          # raw bytes?
    object_type_changed = Signal(object)   # ObjectType
    shape_changed = Signal(object)         # ShapeMode
    parameters_changed = Signal(object)    # ShapeParameters
    speed_changed = Signal(float)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        layout = QVBoxLayout(self)

        # --- Data source ---
        grp_data = QGroupBox("Data")
        data_layout = QVBoxLayout(grp_data)
        self.btn_open = QPushButton("Open File...")
        self.chk_raw_bytes = QCheckBox("Read as raw bytes")
        data_layout.addWidget(self.btn_open)
        data_layout.addWidget(self.chk_raw_bytes)
        layout.addWidget(grp_data)

        # --- Arrangement ---
        grp_shape = QGroupBox("Arrangement")
        form = QFormLayout(grp_shape)

        self.combo_object = QComboBox()
        for object_type in ObjectType:
            self.combo_object.addItem(object_type.label, object_type)

        self.combo_shape = QComboBox()
        for shape in ShapeMode:
            self.combo_shape.addItem(shape.label, shape)
        self.combo_shape.setCurrentIndex(self.combo_shape.findData(config.DEFAULT_SHAPE))

        self.sl_spacing = LabeledSlider(*config.SPACING_RANGE, config.DEFAULT_SPACING, suffix="x")
        self.sl_speed = LabeledSlider(*config.SPEED_RANGE, config.DEFAULT_SPEED, suffix="x")

        form.addRow("Object", self.combo_object)
        form.addRow("Shape", self.combo_shape)
        form.addRow("Spacing", self.sl_spacing)
        form.addRow("Speed", self.sl_speed)
        layout.addWidget(grp_shape)

        # --- Knot (only for the torus knot layout) ---
        self.grp_knot = QGroupBox("Torus Knot")
        knot_form = QFormLayout(self.grp_knot)
        self.sl_p = LabeledSlider(*config.KNOT_RANGE, config.DEFAULT_KNOT_P, scale=1)
        self.sl_q = LabeledSlider(*config.KNOT_RANGE, config.DEFAULT_KNOT_Q, scale=1)
        knot_form.addRow("p", self.sl_p)
        knot_form.addRow("q", self.sl_q)
        layout.addWidget(self.grp_knot)

        layout.addStretch()

        # --- SIGNAL CONNECTIONS ---
        self.btn_open.clicked.connect(lambda: self.open_requested.emit(self.chk_raw_bytes.isChecked()))
        self.combo_object.currentIndexChanged.connect(
            lambda _: self.object_type_changed.emit(self.combo_object.currentData())
        )
        self.combo_shape.currentIndexChanged.connect(self._on_shape_changed)
        self.sl_spacing.value_changed.connect(self._emit_parameters)
        self.sl_p.value_changed.connect(self._emit_parameters)
        self.sl_q.value_changed.connect(self._emit_parameters)
        self.sl_speed.value_changed.connect(self.speed_changed.emit)

        self._update_knot_visibility()

    def current_shape(self) -> ShapeMode:
        return self.combo_shape.currentData()

    def current_object_type(self) -> ObjectType:
        return self.combo_object.currentData()

    def current_parameters(self) -> ShapeParameters:
        """Snapshot of the sliders. Slider ranges keep every value valid."""
        return ShapeParameters(
            spacing=self.sl_spacing.value(),
            knot_p=int(self.sl_p.value()),
            knot_q=int(self.sl_q.value())
        )

    def current_speed(self) -> float:
        return self.sl_speed.value()

    def _on_shape_changed(self, *_) -> None:
        self._update_knot_visibility()
        self.shape_changed.emit(self.current_shape())

    def _update_knot_visibility(self) -> None:
        self.grp_knot.setVisible(self.current_shape() is ShapeMode.TORUS_KNOT_HELIX)

    def _emit_parameters(self, *_) -> None:
        self.parameters_changed.emit(self.current_parameters())
