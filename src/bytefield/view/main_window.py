"""
Main Application Window
=======================
The primary GUI container that holds the control panel, the 3D view and the
frame timer.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects the panel's signals to the animation driver and
   pushes the resulting instance buffer to the 3D view.
"""
import os
import time
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QSplitter, QFileDialog
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction

import logging

from bytefield import config
from bytefield.controller.animation import AnimationDriver
from bytefield.model.arrangements import ShapeMode, ShapeParameters
from bytefield.model.io import DataLoader, DataLoadError
from bytefield.model.state import EngineState
from bytefield.view.panels.arrangement_panel import ArrangementControlPanel
from bytefield.view.widgets.instance_geometry import ObjectType
from bytefield.view.widgets.plot_3d import PyVistaWidget

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, state: EngineState) -> None:
        super().__init__()
        self.state: EngineState = state
        self.driver = AnimationDriver(state)

        self.setWindowTitle(config.APP_NAME)
        self.resize(1400, 900)

        # --- SPLITTER (CONTENT AREA) ---
        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        # --- LEFT SIDE: Controls ---
        self.panel = ArrangementControlPanel()
        splitter.addWidget(self.panel)

        # --- RIGHT SIDE: 3D Visualization ---
        self.visualizer = PyVistaWidget(self.driver.buffer)
        self.driver.camera_provider = self.visualizer.camera_position
        splitter.addWidget(self.visualizer)
        splitter.setSizes([300, 1100])

        # Sync the state with the initial control values
        self.state.shape = self.panel.current_shape()
        self.state.params = self.panel.current_parameters()
        self.driver.set_speed(self.panel.current_speed())
        self.visualizer.set_object_type(self.panel.current_object_type())

        # --- SIGNAL CONNECTIONS ---
        self.panel.open_requested.connect(self.on_file_open)
        self.panel.object_type_changed.connect(self.on_object_type_changed)
        self.panel.shape_changed.connect(self.on_shape_changed)
        self.panel.parameters_changed.connect(self.on_parameters_changed)
        self.panel.speed_changed.connect(self.driver.set_speed)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        self.statusBar().showMessage("Open any text file to begin.")

        # --- FRAME TIMER ---
        self._last_frame: Optional[float] = None
        self._timer = QTimer(self)
        self._timer.setInterval(config.FRAME_INTERVAL_MS)
        self._timer.timeout.connect(self.on_frame)
        self._timer.start()

    def _create_actions(self) -> None:
        self.act_open = QAction("Open...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(lambda: self.on_file_open(self.panel.chk_raw_bytes.isChecked()))

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        file_menu.addAction(self.act_open)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

    # --- SLOTS ---

    def on_frame(self) -> None:
        """Timer slot: advance the clock by the real elapsed time and redraw."""
        now = time.perf_counter()
        delta = 0.0 if self._last_frame is None else now - self._last_frame
        self._last_frame = now

        self.driver.tick(delta)
        self.visualizer.sync()

    def on_file_open(self, raw_bytes: bool = False) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open Data File", "", "All Files (*)")
        if path:
            self.load_path(path, raw_bytes=raw_bytes)

    def load_path(self, path: str, raw_bytes: bool = False) -> bool:
        """Load a file into the engine. Returns False (and reports it) on failure."""
        name = os.path.basename(path)
        self.statusBar().showMessage(f"Loading {name}...")
        try:
            if raw_bytes:
                sequence = DataLoader.load_binary(path)
            else:
                sequence = DataLoader.load_file(path)
        except DataLoadError as e:
            logger.error(f"Load failed: {e}")
            self.statusBar().showMessage("Error reading file.")
            return False

        self.statusBar().showMessage(f"Rendering {len(sequence)} data points...")
        self.driver.load_data(sequence)
        self.visualizer.sync()
        self.setWindowTitle(f"{config.APP_NAME} - [{name}]")
        self.statusBar().showMessage(f"{len(sequence)} data points rendered.")
        return True

    def on_object_type_changed(self, object_type: ObjectType) -> None:
        self.visualizer.set_object_type(object_type)
        self.visualizer.sync()

    def on_shape_changed(self, shape: ShapeMode) -> None:
        self.driver.set_shape(shape)
        self.visualizer.sync()

    def on_parameters_changed(self, params: ShapeParameters) -> None:
        self.driver.set_parameters(params)
        self.visualizer.sync()

    def closeEvent(self, event) -> None:
        self._timer.stop()
        self.visualizer.plotter.close()
        super().closeEvent(event)
