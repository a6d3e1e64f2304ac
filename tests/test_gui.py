from pathlib import Path

import pytest

from apogeo.controller import Dashboard, Mode
from apogeo.data import DataPoint, summarize, total_impulse
from apogeo.gui import STATS_TITLE, STATUS_TITLE, plot_series, stats_lines

POINTS = [
    DataPoint(0.5, 1.0, 2.0, 3.0),
    DataPoint(1.5, 4.0, 5.0, 6.0),
    DataPoint(2.5, 7.0, 8.0, 9.0),
]


class FakeRecorder:
    def __init__(self, port_name, baud_rate, file_path, points=()):
        self.port_name = port_name
        self.baud_rate = baud_rate
        self.file_path = file_path
        self.points = list(points)
        self.started = False
        self.stopped = False

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def join(self, timeout=None):
        pass

    def snapshot(self):
        return list(self.points)

    def last_message(self):
        return "1 | 2 | 3"


def _live_dashboard(points):
    dashboard = Dashboard(
        port_lister=lambda: [],
        recorder_factory=lambda port, baud, path: FakeRecorder(port, baud, path, points),
    )
    dashboard.start_monitoring()
    return dashboard


def _csv_dashboard(tmp_path: Path) -> Dashboard:
    csv_file = tmp_path / "datos.csv"
    csv_file.write_text(
        "Tiempo,Empuje,Temperatura Ambiente,Temperatura Tobera\n"
        "00:00:00:000,10,20,30\n"
        "00:00:01:000,20,21,31\n",
        encoding="utf-8",
    )
    dashboard = Dashboard(port_lister=lambda: [])
    dashboard.csv_file_path = str(csv_file)
    dashboard.load_csv()
    return dashboard


def test_plot_series_csv_uses_sample_times():
    series = plot_series(POINTS, csv_mode=True)
    assert series.x == [0.5, 1.5, 2.5]
    assert series.thrust == [1.0, 4.0, 7.0]
    assert series.temp_ambient == [2.0, 5.0, 8.0]
    assert series.temp_nozzle == [3.0, 6.0, 9.0]


def test_plot_series_live_uses_sample_indices():
    series = plot_series(POINTS, csv_mode=False)
    assert series.x == [0.0, 1.0, 2.0]
    assert series.thrust == [1.0, 4.0, 7.0]


@pytest.mark.parametrize("csv_mode", [True, False])
def test_plot_series_lengths_match(csv_mode):
    series = plot_series(POINTS, csv_mode)
    assert {len(values) for values in series} == {len(POINTS)}


@pytest.mark.parametrize("csv_mode", [True, False])
def test_plot_series_empty(csv_mode):
    series = plot_series([], csv_mode)
    assert series == ([], [], [], [])


def test_stats_lines_configuration_shows_status_and_waiting():
    dashboard = Dashboard(port_lister=lambda: [])
    lines = stats_lines(dashboard)
    assert lines[0] == STATUS_TITLE
    assert "🔗 Puerto: COM9" in lines
    assert "⚡ Baud Rate: 115200" in lines
    assert "📁 Archivo: datos.csv" in lines
    assert "⏳ Esperando datos..." in lines


def test_stats_lines_csv_mode_shows_analysis(tmp_path):
    dashboard = _csv_dashboard(tmp_path)
    assert dashboard.mode is Mode.CSV_VIEWER
    lines = stats_lines(dashboard)
    assert lines[0] == STATS_TITLE
    assert "📊 Empuje máximo: 20.00 N" in lines
    assert "🚀 Impulso total: 15.00 N⋅s" in lines
    assert "📋 Muestras totales: 2" in lines


def test_stats_lines_csv_mode_agrees_with_summary(tmp_path):
    dashboard = _csv_dashboard(tmp_path)
    points = dashboard.points()
    summary = summarize(points, total_impulse(points))
    lines = stats_lines(dashboard)
    assert f"📈 Empuje promedio: {summary.avg_thrust:.2f} N" in lines
    assert f"⏱️ Duración: {summary.duration:.2f} s" in lines
    assert f"⚡ Impulso específico: {summary.specific_impulse:.2f} s" in lines


def test_stats_lines_live_shows_last_point():
    dashboard = _live_dashboard(POINTS)
    assert dashboard.mode is Mode.LIVE_MONITORING
    lines = stats_lines(dashboard)
    assert lines[0] == STATUS_TITLE
    assert "📊 Muestras actuales: 3" in lines
    assert "🚀 Último empuje: 7.00 N" in lines
    assert "🌡️ Temp. ambiente: 8.0°C" in lines
    assert "🔥 Temp. tobera: 9.0°C" in lines
    assert "⏳ Esperando datos..." not in lines


def test_stats_lines_live_without_points_waits():
    dashboard = _live_dashboard([])
    lines = stats_lines(dashboard)
    assert lines[-3:] == [
        "⏳ Esperando datos...",
        "🔌 Verificar conexión serial",
        "📡 Iniciando captura de datos...",
    ]


def test_stats_lines_after_back_to_configuration_clears_analysis(tmp_path):
    dashboard = _csv_dashboard(tmp_path)
    dashboard.back_to_configuration()
    lines = stats_lines(dashboard)
    assert lines[0] == STATUS_TITLE
    assert "⏳ Esperando datos..." in lines