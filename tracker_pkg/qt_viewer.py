import logging
import os

import numpy as np
from matplotlib import image as mpl_image
from PyQt5.QtCore import QObject, Qt, QThread, QTimer, pyqtSignal
from PyQt5.QtGui import QVector3D
from PyQt5.QtWidgets import (
    QCheckBox, QHBoxLayout, QLabel, QLineEdit, QListWidget, QListWidgetItem,
    QMainWindow, QPushButton, QTextEdit, QVBoxLayout, QWidget,
)
import pyqtgraph as pg
import pyqtgraph.opengl as gl

from .celestial import BodyKind, make_earth
from .config import Settings
from .constants import (
    FRAME_INTERVAL_MS, GRATICULE_STEP, STAR_COUNT, STAR_SHELL_RADIUS,
)
from .errors import TLEFetchError
from .interaction import Interaction, OrbitCamera, RenderLoop
from .projection import from_view_axes, sample_equirectangular, to_angle, to_cartesian, to_view_axes
from .registry import SceneRegistry
from .sync import SatelliteSync
from .tle_manager import TLEManager

logger = logging.getLogger(__name__)

pg.setConfigOptions(antialias=True)


def load_texture(path):
    """RGB uint8 array for an image file, or None if it is missing or unreadable."""
    if not path or not os.path.exists(path):
        return None
    try:
        data = mpl_image.imread(path)
    except (OSError, ValueError) as e:
        logger.warning("Could not read texture %s: %s", path, e)
        return None
    array = np.asarray(data)
    if array.dtype != np.uint8:
        array = (np.clip(array, 0.0, 1.0) * 255).astype(np.uint8)
    if array.ndim == 2:
        array = np.stack([array, array, array], axis=-1)
    return array[..., :3]


class GLMeshFactory:
    """
    Builds pyqtgraph GL spheres for body specs. Positions arrive in y-up
    scene coordinates and are mapped onto the z-up GL axes.
    """
    def __init__(self, texture=None):
        self.texture = texture

    def create(self, spec):
        md = gl.MeshData.sphere(rows=spec.segments, cols=spec.segments, radius=spec.radius)

        if spec.kind is BodyKind.PRIMARY and self.texture is not None:
            md.setVertexColors(self._texture_colors(md.vertexes()))
            return gl.GLMeshItem(meshdata=md, smooth=True, shader='shaded', glOptions='opaque')

        return gl.GLMeshItem(meshdata=md, smooth=True, color=spec.color, shader='shaded', glOptions='opaque')

    def _texture_colors(self, vertexes):
        angles = [to_angle(*from_view_axes(v)) for v in vertexes]
        lons = [a[0] for a in angles]
        lats = [a[1] for a in angles]
        rgb = sample_equirectangular(self.texture, lons, lats) / 255.0
        return np.hstack([rgb, np.ones((len(rgb), 1))])

    def place(self, item, position):
        item.resetTransform()
        item.translate(*to_view_axes(position))


def make_stars(count=STAR_COUNT, radius=STAR_SHELL_RADIUS, rng=None):
    rng = rng or np.random.default_rng()
    directions = rng.normal(size=(count, 3))
    directions /= np.linalg.norm(directions, axis=1, keepdims=True)
    distances = rng.uniform(radius, radius * 1.5, size=(count, 1))
    return gl.GLScatterPlotItem(pos=directions * distances, size=2, color=(1.0, 1.0, 1.0, 0.8), pxMode=True)


def make_graticule(radius, step=GRATICULE_STEP):
    """Latitude and longitude lines drawn just above the surface."""
    items = []
    r = radius * 1.002
    sweep = np.linspace(-180, 180, 181)
    for lat in range(-90 + step, 90, step):
        pts = [to_view_axes(to_cartesian(lon, lat, r)) for lon in sweep]
        items.append(gl.GLLinePlotItem(pos=np.array(pts), color=(1, 1, 1, 0.25), width=1, antialias=True))
    for lon in range(-180, 180, step):
        pts = [to_view_axes(to_cartesian(lon, lat, r)) for lat in np.linspace(-90, 90, 91)]
        items.append(gl.GLLinePlotItem(pos=np.array(pts), color=(1, 1, 1, 0.25), width=1, antialias=True))
    return items


class FetchWorker(QThread):
    """
    Background thread for one TLE lookup. Results are delivered on the GUI
    thread through queued signals.
    """
    resolved = pyqtSignal(object)
    failed = pyqtSignal(object)

    def __init__(self, manager, sat_id):
        super().__init__()
        self.manager = manager
        self.sat_id = sat_id

    def run(self):
        try:
            record = self.manager.lookup(self.sat_id)
        except TLEFetchError as e:
            self.failed.emit(e)
            return
        except Exception as e:
            logger.exception("[FetchWorker] Unexpected error for %s", self.sat_id)
            self.failed.emit(e)
            return
        self.resolved.emit(record)


class ThreadedFetcher:
    """One FetchWorker per request; workers are kept alive until finished."""
    def __init__(self, manager):
        self.manager = manager
        self._workers = set()

    def fetch(self, sat_id, on_resolved, on_failed):
        worker = FetchWorker(self.manager, sat_id)
        worker.resolved.connect(on_resolved)
        worker.failed.connect(on_failed)
        worker.finished.connect(lambda: self._release(worker))
        self._workers.add(worker)
        worker.start()

    def _release(self, worker):
        self._workers.discard(worker)
        worker.deleteLater()

    def wait_all(self, msecs=5000):
        for worker in list(self._workers):
            worker.wait(msecs)


class LogEmitter(QObject):
    message = pyqtSignal(str)


class QtLogHandler(logging.Handler):
    """Forwards log records to a widget through a signal (safe from any thread)."""
    def __init__(self, level=logging.INFO):
        super().__init__(level)
        self.emitter = LogEmitter()
        self.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    def emit(self, record):
        self.emitter.message.emit(self.format(record))


class GlobeView(gl.GLViewWidget):
    pointer_moved = pyqtSignal(float, float)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setMouseTracking(True)

    def mouseMoveEvent(self, ev):
        pos = ev.localPos()
        self.pointer_moved.emit(pos.x(), pos.y())
        # dragging orbits/pans the camera
        if ev.buttons():
            super().mouseMoveEvent(ev)

    def push_camera(self, camera: OrbitCamera):
        center = np.array(to_view_axes(camera.target), dtype=float)
        offset = np.array(to_view_axes(camera.position), dtype=float) - center
        distance = float(np.linalg.norm(offset))
        if distance == 0.0:
            return
        elevation = float(np.degrees(np.arcsin(np.clip(offset[2] / distance, -1.0, 1.0))))
        azimuth = float(np.degrees(np.arctan2(offset[1], offset[0])))
        self.opts['fov'] = camera.fov
        self.setCameraPosition(pos=QVector3D(*center), distance=distance,
                               elevation=elevation, azimuth=azimuth)

    def pull_camera(self, camera: OrbitCamera):
        """Pick up mouse orbiting/zooming done directly on the widget."""
        p = self.cameraPosition()
        camera.position = from_view_axes((p.x(), p.y(), p.z()))


class GlobeWindow(QMainWindow):
    """
    Main window: the globe on the left, controls, hover readout and the
    log on the right. Also acts as the SatelliteSync listener.
    """
    def __init__(self, settings: Settings = None):
        super().__init__()
        self.settings = settings or Settings()
        self.setWindowTitle("Satellite Globe Tracker")
        self.resize(1280, 800)

        # Scene
        self.view = GlobeView()
        self.factory = GLMeshFactory(load_texture(self.settings.earth_texture))
        self.registry = SceneRegistry(self.view)
        self.earth = make_earth(self.factory)
        self.registry.register(self.earth)
        self.view.addItem(make_stars())
        if self.factory.texture is None:
            for line in make_graticule(self.earth.radius):
                self.view.addItem(line)

        self.camera = OrbitCamera()
        self.camera.look_at(self.earth.position)
        self.interaction = Interaction(self.registry, self.camera)
        self.render_loop = RenderLoop(self.interaction)
        self.view.push_camera(self.camera)

        # Data
        self.manager = TLEManager(self.settings.tle_api_url, self.settings.http_timeout)
        self.fetcher = ThreadedFetcher(self.manager)
        self.sync = SatelliteSync(self.registry, self.fetcher, self.factory,
                                  active_ids=self.settings.satellite_ids, listener=self)
        self.list_items = {}                                    # {sat_id: QListWidgetItem}

        self._build_ui()

        self.log_handler = QtLogHandler()
        self.log_handler.emitter.message.connect(self.update_log)
        logging.getLogger().addHandler(self.log_handler)

        self.timer = QTimer(self)
        self.timer.timeout.connect(self.animate)

    def _build_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QHBoxLayout(central_widget)
        layout.addWidget(self.view, stretch=4)

        side = QVBoxLayout()
        layout.addLayout(side, stretch=1)

        self.hover_label = QLabel("")
        self.coordinates_label = QLabel("")
        side.addWidget(self.hover_label)
        side.addWidget(self.coordinates_label)

        search_row = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("NORAD ID")
        self.search_button = QPushButton("Add")
        search_row.addWidget(self.search_input)
        search_row.addWidget(self.search_button)
        side.addLayout(search_row)

        self.active_list = QListWidget()
        side.addWidget(QLabel("Active satellites"))
        side.addWidget(self.active_list)

        zoom_row = QHBoxLayout()
        self.zoom_in_button = QPushButton("+")
        self.zoom_out_button = QPushButton("-")
        zoom_row.addWidget(self.zoom_in_button)
        zoom_row.addWidget(self.zoom_out_button)
        side.addLayout(zoom_row)

        toggle_row = QHBoxLayout()
        self.toggle = QCheckBox()
        self.toggle.setChecked(self.interaction.rotating)
        self.switch_text = QLabel(self.interaction.rotation_label())
        toggle_row.addWidget(self.toggle)
        toggle_row.addWidget(self.switch_text)
        side.addLayout(toggle_row)

        self.log_text = QTextEdit()
        self.log_text.setReadOnly(True)
        self.log_text.setStyleSheet("background-color: black; color: lime; font-family: Monospace;")
        side.addWidget(self.log_text, stretch=1)

        self.search_button.clicked.connect(self.on_search)
        self.search_input.returnPressed.connect(self.on_search)
        self.zoom_in_button.clicked.connect(self.on_zoom_in)
        self.zoom_out_button.clicked.connect(self.on_zoom_out)
        self.toggle.stateChanged.connect(self.on_toggle)
        self.view.pointer_moved.connect(self.on_pointer_moved)

    def start(self):
        self.sync.reconcile()
        self.timer.start(FRAME_INTERVAL_MS)

    # -- UI handlers --

    def on_search(self):
        if self.sync.add(self.search_input.text()):
            self.search_input.clear()

    def on_zoom_in(self):
        self.interaction.zoom_in()
        self.view.push_camera(self.camera)

    def on_zoom_out(self):
        self.interaction.zoom_out()
        self.view.push_camera(self.camera)

    def on_toggle(self, state):
        self.switch_text.setText(self.interaction.set_rotating(state == Qt.Checked))

    def on_pointer_moved(self, x, y):
        if self.interaction.pointer_moved(x, y, self.view.width(), self.view.height()):
            self.hover_label.setText(self.interaction.hover_name)
            self.coordinates_label.setText(self.interaction.hover_text)

    def animate(self):
        self.view.pull_camera(self.camera)
        self.render_loop.step()
        self.view.push_camera(self.camera)
        self.view.update()

    def update_log(self, message):
        self.log_text.append(message)
        sb = self.log_text.verticalScrollBar()
        sb.setValue(sb.maximum())

    # -- SatelliteSync listener --

    def satellite_added(self, sat_id, record):
        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(4, 0, 4, 0)
        row_layout.addWidget(QLabel(f"{sat_id} ({record.name})"))
        close_button = QPushButton("x")
        close_button.setFixedWidth(24)
        close_button.clicked.connect(lambda: self.sync.remove(sat_id))
        row_layout.addWidget(close_button)

        item = QListWidgetItem(self.active_list)
        item.setSizeHint(row.sizeHint())
        self.active_list.setItemWidget(item, row)
        self.list_items[sat_id] = item

    def satellite_removed(self, sat_id):
        item = self.list_items.pop(sat_id, None)
        if item is not None:
            self.active_list.takeItem(self.active_list.row(item))

    def satellite_failed(self, sat_id, error):
        self.update_log(f"Satellite {sat_id} not added")

    def closeEvent(self, event):
        self.timer.stop()
        logging.getLogger().removeHandler(self.log_handler)
        self.fetcher.wait_all()
        super().closeEvent(event)
