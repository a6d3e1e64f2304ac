"""State and actions of the dashboard, independent of any widget toolkit."""

from __future__ import annotations

import enum
import time
from pathlib import Path
from typing import Any, Callable

from apogeo import data
from apogeo.acquisition import WAITING_MESSAGE, Recorder
from apogeo.data import CsvLoadError, DataPoint, SUMMARY_FILE, format_elapsed
from apogeo.serial_link import available_ports

BAUD_RATES = (9600, 19200, 38400, 57600, 115200, 230400)
DEFAULT_PORT = "COM9"
DEFAULT_BAUD_RATE = 115200
DEFAULT_FILE = "datos.csv"
MISSING_FIELDS_MESSAGE = "Por favor, complete todos los campos"


class Mode(enum.Enum):
    CONFIGURATION = "configuration"
    LIVE_MONITORING = "live_monitoring"
    CSV_VIEWER = "csv_viewer"


class Dashboard:
    """What the dashboard shows and what its buttons do."""

    def __init__(
        self,
        port_lister: Callable[[], list[str]] | None = None,
        recorder_factory: Callable[[str, int, str], Any] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._port_lister = port_lister or available_ports
        self._clock = clock or time.monotonic
        self._recorder_factory = recorder_factory or self._default_recorder
        self._start = self._clock()
        self._recorder: Any = None
        self._csv_points: list[DataPoint] = []

        self.port_name = DEFAULT_PORT
        self.baud_rate = DEFAULT_BAUD_RATE
        self.file_path = DEFAULT_FILE
        self.available_ports = list(self._port_lister())
        self.csv_file_path = DEFAULT_FILE
        self.csv_data_loaded = False
        self.total_impulse = 0.0
        self.mode = Mode.CONFIGURATION
        self.show_csv_panel = False
        self.show_serial_panel = False
        self.error_message = ""

    def _default_recorder(self, port_name: str, baud_rate: int, file_path: str) -> Recorder:
        return Recorder(port_name, baud_rate, file_path, clock=self._clock)

    def open_csv_panel(self) -> None:
        self.show_csv_panel = True
        self.show_serial_panel = False
        self.error_message = ""

    def open_serial_panel(self) -> None:
        self.show_serial_panel = True
        self.show_csv_panel = False
        self.error_message = ""

    def cancel_panel(self) -> None:
        self.show_csv_panel = False
        self.show_serial_panel = False
        self.error_message = ""

    def refresh_ports(self) -> None:
        self.available_ports = list(self._port_lister())

    def load_csv(self) -> None:
        """Load the CSV file; on failure the reason goes to ``error_message``."""
        try:
            points = data.load_csv(self.csv_file_path)
        except CsvLoadError as exc:
            self.error_message = f"Error: {exc}"
            return
        self.total_impulse = data.total_impulse(points)
        self._csv_points = points
        self.csv_data_loaded = True
        self.mode = Mode.CSV_VIEWER
        self.show_csv_panel = False
        self.error_message = ""

    def start_monitoring(self) -> None:
        """Start live recording if the port and file are set."""
        if not self.port_name or not self.file_path:
            self.error_message = MISSING_FIELDS_MESSAGE
            return
        self.mode = Mode.LIVE_MONITORING
        self.show_serial_panel = False
        self._start = self._clock()
        self._recorder = self._recorder_factory(
            self.port_name, self.baud_rate, self.file_path
        )
        self._recorder.start()
        self.error_message = ""

    def stop(self) -> None:
        if self._recorder is not None:
            self._recorder.stop()

    def back_to_configuration(self) -> None:
        if self.mode is not Mode.CSV_VIEWER and self._recorder is not None:
            self._recorder.stop()
            self._recorder.join()
        self._recorder = None
        self.csv_data_loaded = False
        self.mode = Mode.CONFIGURATION
        self.show_csv_panel = False
        self.show_serial_panel = False
        self._csv_points = []
        self.total_impulse = 0.0
        self.error_message = ""

    def points(self) -> list[DataPoint]:
        """Return the samples to plot in the current mode."""
        if self.mode is Mode.CSV_VIEWER:
            return list(self._csv_points)
        if self._recorder is not None:
            return self._recorder.snapshot()
        return []

    def last_message(self) -> str:
        if self._recorder is not None:
            return self._recorder.last_message()
        return WAITING_MESSAGE

    def elapsed_text(self) -> str:
        return format_elapsed(max(self._clock() - self._start, 0.0))

    def export_summary(self, path: str | Path = SUMMARY_FILE) -> Path | None:
        """Write the summary report; return its path, or None if nothing was written."""
        try:
            return data.export_summary(
                self.points(), self.total_impulse, self.csv_file_path, path
            )
        except OSError:
            return None