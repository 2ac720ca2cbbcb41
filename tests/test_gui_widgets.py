import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for GUI tests.", exc_type=ImportError)
pytest.importorskip("PySide6.QtTest", reason="QtTest backend requires system libraries.", exc_type=ImportError)
pytest.importorskip("pytestqt", reason="pytest-qt is required for GUI tests.")

from PySide6.QtCore import Qt
from matplotlib.backend_bases import MouseEvent

from polymeasure_core.geometry.measurement import last_segment_measurement
from polymeasure_core.interaction.modes import Drawing, Editing, Idle

from apps.PolyMeasure.app.controllers.hover_probe import HoverProbe
from apps.PolyMeasure.app.controllers.shortcuts import install_finish_cancel_shortcuts
from apps.PolyMeasure.app.state.feature_registry import FeatureRegistry
from apps.PolyMeasure.app.state.interaction_manager import InteractionManager
from apps.PolyMeasure.app.state.measurement_state import MeasurementState
from apps.PolyMeasure.widgets.control_panel import ControlPanel
from apps.PolyMeasure.widgets.map_canvas import MapCanvas

LINE = [(0.0, 0.0), (0.0, 1000.0), (1000.0, 1000.0)]


@pytest.fixture
def ui(qtbot):
    registry = FeatureRegistry()
    measurements = MeasurementState()
    canvas = MapCanvas(registry)
    qtbot.addWidget(canvas)
    manager = InteractionManager(canvas.surface, registry, measurements)
    panel = ControlPanel(manager, measurements)
    panel.connect_registry(registry)
    qtbot.addWidget(panel)
    canvas.resize(600, 600)
    panel.show()
    canvas.show()
    qtbot.waitExposed(canvas)
    canvas.update_plot()
    canvas.canvas.draw()
    return registry, measurements, canvas, manager, panel


def _mouse(canvas, name, pixel, button=1):
    event = MouseEvent(name, canvas.canvas, pixel[0], pixel[1], button=button)
    canvas.canvas.callbacks.process(name, event)


def _draw(manager, registry, coords):
    manager.start_drawing()
    capability = manager.surface.handles()[-1].capability
    for coord in coords:
        capability.add_vertex(coord)
    manager.finish_drawing()
    return registry.features()[-1]


def test_canvas_map_view_round_trip(ui):
    _, _, canvas, _, _ = ui
    pixel = canvas.pixel_from_coordinate((250.0, -400.0))

    assert pixel is not None
    assert canvas.coordinate_from_pixel(pixel) == pytest.approx((250.0, -400.0), abs=1e-6)
    assert canvas.pixel_from_coordinate((1e9, 1e9)) is None


def test_canvas_hit_test_finds_features(ui):
    registry, _, canvas, manager, _ = ui
    feature = _draw(manager, registry, LINE)
    pixel = canvas.pixel_from_coordinate((500.0, 1000.0))

    assert canvas.features_at_pixel(pixel, 5.0) == [feature]
    assert canvas.features_at_pixel((pixel[0], pixel[1] + 50), 5.0) == []


def test_canvas_hit_test_with_endpoints_off_screen(ui):
    registry, _, canvas, _, _ = ui
    feature = registry.add([(-4000.0, 0.0), (4000.0, 0.0)])
    canvas.ax.set_xlim(-500.0, 500.0)
    canvas.ax.set_ylim(-500.0, 500.0)
    canvas.canvas.draw()

    assert canvas.pixel_from_coordinate((-4000.0, 0.0)) is None
    assert canvas.pixel_from_coordinate((4000.0, 0.0)) is None

    pixel = canvas.pixel_from_coordinate((100.0, 0.0))
    assert canvas.features_at_pixel(pixel, 5.0) == [feature]


def test_vertex_drag_released_outside_map(ui):
    registry, _, canvas, manager, _ = ui
    feature = _draw(manager, registry, LINE)
    manager.toggle_edit_mode()
    manager.select(feature)

    _mouse(canvas, "button_press_event", canvas.pixel_from_coordinate(LINE[-1]))
    _mouse(canvas, "motion_notify_event", canvas.pixel_from_coordinate((1000.0, 3000.0)))
    _mouse(canvas, "button_release_event", (-50.0, -50.0))

    end = feature.coordinates[-1]
    assert end[1] == pytest.approx(3000.0, abs=50.0)
    expected = last_segment_measurement(feature.coordinates)
    assert manager.measurement.distance_meters == pytest.approx(expected.distance_meters)
    assert manager.measurement.azimuth_degrees == pytest.approx(expected.azimuth_degrees)
    assert manager.measurement.azimuth_degrees == pytest.approx(26.57, abs=1.0)

    # the drag is over: a later move leaves the vertex alone
    _mouse(canvas, "motion_notify_event", canvas.pixel_from_coordinate((0.0, 3000.0)))
    assert feature.coordinates[-1] == end


def test_buttons_follow_mode(ui, qtbot):
    registry, _, _, manager, panel = ui

    assert panel.start_drawing_btn.isEnabled()
    assert not panel.edit_mode_btn.isEnabled()

    qtbot.mouseClick(panel.start_drawing_btn, Qt.MouseButton.LeftButton)
    assert isinstance(manager.mode, Drawing)
    assert not panel.start_drawing_btn.isEnabled()
    assert panel.finish_btn.isEnabled()

    capability = manager.surface.handles()[-1].capability
    for coord in LINE:
        capability.add_vertex(coord)
    qtbot.mouseClick(panel.finish_btn, Qt.MouseButton.LeftButton)

    assert registry.count() == 1
    assert panel.edit_mode_btn.isEnabled()
    assert panel.distance_value.text() == "1.00 km"
    assert panel.azimuth_value.text() == "90.00°"


def test_numeric_input_applies_on_return(ui, qtbot):
    registry, measurements, _, manager, panel = ui
    feature = _draw(manager, registry, LINE)
    manager.toggle_edit_mode()
    manager.select(feature)

    assert panel.numeric_group.isVisible()
    assert panel.distance_input.text() == "1.00"

    panel.distance_input.clear()
    qtbot.keyClicks(panel.distance_input, "2")
    panel.angle_input.clear()
    qtbot.keyClicks(panel.angle_input, "180")
    qtbot.keyPress(panel.distance_input, Qt.Key.Key_Return)

    assert manager.measurement.distance_meters == pytest.approx(2000.0, rel=1e-6)
    assert manager.measurement.azimuth_degrees == pytest.approx(180.0, abs=1e-6)
    assert measurements.input_angle == "180.00"


def test_unit_buttons_toggle_labels(ui, qtbot):
    registry, measurements, _, manager, panel = ui
    _draw(manager, registry, LINE)

    qtbot.mouseClick(panel.distance_unit_btn, Qt.MouseButton.LeftButton)
    qtbot.mouseClick(panel.azimuth_unit_btn, Qt.MouseButton.LeftButton)

    assert panel.distance_value.text() == "0.62 mi"
    assert panel.azimuth_value.text() == "1.5708 rad"
    assert panel.distance_unit_btn.text() == "mi"


def test_enter_needs_map_focus_escape_does_not(ui, qtbot, monkeypatch):
    registry, _, canvas, manager, panel = ui
    install_finish_cancel_shortcuts(panel.distance_input, manager, focus_widget=canvas.canvas)

    manager.start_drawing()
    capability = manager.surface.handles()[-1].capability
    for coord in LINE:
        capability.add_vertex(coord)

    monkeypatch.setattr(canvas.canvas, "hasFocus", lambda: False)
    qtbot.keyPress(panel.distance_input, Qt.Key.Key_Return)
    assert isinstance(manager.mode, Drawing)

    monkeypatch.setattr(canvas.canvas, "hasFocus", lambda: True)
    qtbot.keyPress(panel.distance_input, Qt.Key.Key_Return)
    assert isinstance(manager.mode, Idle)
    assert registry.count() == 1

    monkeypatch.setattr(canvas.canvas, "hasFocus", lambda: False)
    manager.start_drawing()
    qtbot.keyPress(panel.distance_input, Qt.Key.Key_Escape)
    assert isinstance(manager.mode, Idle)
    assert registry.count() == 1


def test_escape_clears_selection(ui, qtbot):
    registry, _, canvas, manager, _ = ui
    install_finish_cancel_shortcuts(canvas.canvas, manager, focus_widget=canvas.canvas)
    feature = _draw(manager, registry, LINE)
    manager.toggle_edit_mode()
    manager.select(feature)

    qtbot.keyPress(canvas.canvas, Qt.Key.Key_Escape)

    assert manager.mode == Editing(None)


def test_hover_probe_on_canvas(ui):
    registry, measurements, canvas, manager, panel = ui
    _draw(manager, registry, LINE)
    probe = HoverProbe(canvas, registry, manager, measurements)
    vertex = canvas.pixel_from_coordinate(LINE[1])

    probe.probe(vertex)

    assert manager.hovered_angle_degrees == pytest.approx(90.0)
    assert panel.hover_value.text() == "90.0°"
