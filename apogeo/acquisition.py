"""Background recording of live readings from a serial port."""

from __future__ import annotations

import math
import os
import threading
import time
from collections import deque
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, TextIO

import serial

from apogeo.data import CSV_HEADER, DataPoint, format_timestamp, parse_reading

READ_TIMEOUT = 0.1
READ_SIZE = 64
MAX_LIVE_POINTS = 100
WAITING_MESSAGE = "Esperando datos..."
CONNECTED_MESSAGE = "Conexión exitosa, esperando datos..."


def _open_port(port_name: str, baud_rate: int) -> Any:
    return serial.Serial(port_name, baud_rate, timeout=READ_TIMEOUT)


def _format_number(value: float) -> str:
    """Format a float in the shortest plain decimal form, without exponent."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class Recorder:
    """Reads ``thrust,ambient,nozzle`` readings, logs them to CSV and keeps the latest."""

    def __init__(
        self,
        port_name: str,
        baud_rate: int,
        file_path: str | Path,
        opener: Callable[[str, int], Any] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.port_name = port_name
        self.baud_rate = baud_rate
        self.file_path = Path(file_path)
        self._opener = opener or _open_port
        self._clock = clock or time.monotonic
        self._origin = self._clock()
        self._lock = threading.Lock()
        self._stop_requested = threading.Event()
        self._points: deque[DataPoint] = deque(maxlen=MAX_LIVE_POINTS)
        self._message = WAITING_MESSAGE
        self._log: TextIO | None = None
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start reading in a background thread."""
        if self._thread is not None:
            raise RuntimeError("recorder already started")
        self._origin = self._clock()
        self._thread = threading.Thread(
            target=self._run, name=f"recorder-{self.port_name}", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Ask the reading thread to finish."""
        self._stop_requested.set()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the reading thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def snapshot(self) -> list[DataPoint]:
        """Return a copy of the most recent samples, oldest first."""
        with self._lock:
            return list(self._points)

    def last_message(self) -> str:
        """Return the latest status or reading text."""
        with self._lock:
            return self._message

    def handle_chunk(self, chunk: bytes, elapsed: float) -> DataPoint | None:
        """Process one read from the port; return the new sample, if any."""
        if not chunk:
            return None
        reading = parse_reading(chunk.decode("utf-8", errors="replace"))
        if reading is None:
            return None
        thrust, ambient, nozzle = reading
        if self._log is not None:
            self._log.write(
                f"{format_timestamp(elapsed)},{_format_number(thrust)},"
                f"{_format_number(ambient)},{_format_number(nozzle)}\n"
            )
            self._log.flush()
        point = DataPoint(elapsed, thrust, ambient, nozzle)
        with self._lock:
            self._message = (
                f"{_format_number(thrust)} | {_format_number(ambient)} | "
                f"{_format_number(nozzle)}"
            )
            self._points.append(point)
        return point

    def _set_message(self, message: str) -> None:
        with self._lock:
            self._message = message

    def _run(self) -> None:
        try:
            port = self._opener(self.port_name, self.baud_rate)
        except (OSError, ValueError) as exc:
            self._set_message(f"Error al abrir el puerto: {exc}")
            return
        try:
            try:
                log = open(self.file_path, "a", encoding="utf-8", newline="")
            except OSError as exc:
                self._set_message(f"Error al abrir el archivo: {exc}")
                return
            with log:
                if os.fstat(log.fileno()).st_size == 0:
                    log.write(f"{CSV_HEADER}\n")
                    log.flush()
                self._set_message(CONNECTED_MESSAGE)
                self._log = log
                try:
                    self._read_loop(port)
                finally:
                    self._log = None
        finally:
            port.close()

    def _read_loop(self, port: Any) -> None:
        while not self._stop_requested.is_set():
            try:
                chunk = port.read(READ_SIZE)
            except OSError:
                continue
            if chunk:
                self.handle_chunk(chunk, max(self._clock() - self._origin, 0.0))