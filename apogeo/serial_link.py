"""Line-oriented access to a serial port."""

from __future__ import annotations

import argparse
import sys
import time
from typing import Any, Callable

import serial
from serial.tools import list_ports

READ_TIMEOUT = 0.1
DEFAULT_BAUD_RATE = 9600


def _open_port(port_name: str, baud_rate: int) -> Any:
    return serial.Serial(port_name, baud_rate, timeout=READ_TIMEOUT)


def available_ports() -> list[str]:
    """Return the device names of the serial ports present, or an empty list."""
    try:
        return [port.device for port in list_ports.comports()]
    except OSError:
        return []


class SerialLink:
    """A serial connection that hands out one trimmed text line at a time."""

    def __init__(
        self,
        baud_rate: int,
        opener: Callable[[str, int], Any] | None = None,
    ) -> None:
        self.baud_rate = baud_rate
        self._opener = opener or _open_port
        self._port: Any = None

    def connect(self, port_name: str) -> None:
        """Open the named port; raises OSError if it cannot be opened."""
        self._port = self._opener(port_name, self.baud_rate)

    def is_connected(self) -> bool:
        return self._port is not None

    def read_line(self) -> str | None:
        """Return the next complete line, trimmed, or None if none arrived."""
        if self._port is None:
            return None
        try:
            data = self._port.readline()
        except OSError:
            return None
        if not data.endswith(b"\n"):
            return None
        try:
            return data.decode("utf-8").strip()
        except UnicodeDecodeError:
            return None

    def disconnect(self) -> None:
        port, self._port = self._port, None
        if port is not None:
            port.close()


def main(argv: list[str] | None = None) -> int:
    """Print lines received on the first available serial port."""
    parser = argparse.ArgumentParser(
        prog="apogeo-serial",
        description="Show the lines arriving on the first serial port found.",
    )
    parser.add_argument("--baud-rate", type=int, default=DEFAULT_BAUD_RATE)
    args = parser.parse_args(argv)

    link = SerialLink(args.baud_rate)
    ports = available_ports()
    if not ports:
        print("No se encontraron puertos seriales disponibles.", file=sys.stderr)
        return 1

    port_name = ports[0]
    try:
        link.connect(port_name)
    except OSError as exc:
        print(f"Error al conectar al puerto {port_name}: {exc}", file=sys.stderr)
        return 1
    print(f"Conectado al puerto: {port_name}")

    try:
        while True:
            message = link.read_line()
            if message is None:
                print("Esperando datos...")
            else:
                print(f"Último mensaje recibido: {message}")
            time.sleep(1)
    except KeyboardInterrupt:
        return 0
    finally:
        link.disconnect()