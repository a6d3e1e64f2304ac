"""Thrust-stand samples: parsing, CSV loading, impulse and summaries."""

from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import pairwise
from pathlib import Path
from typing import Iterable, Sequence

STANDARD_GRAVITY = 9.81
CSV_HEADER = "Tiempo,Empuje,Temperatura Ambiente,Temperatura Tobera"
SUMMARY_FILE = "resumen_analisis.txt"

_NANOS_PER_SECOND = 1_000_000_000
_NANOS_PER_MILLI = 1_000_000


@dataclass(frozen=True)
class DataPoint:
    """One sample: time in seconds, thrust and the two temperatures."""

    time: float
    thrust: float
    temp_ambient: float
    temp_nozzle: float


class CsvLoadError(Exception):
    """Raised when a CSV file cannot be read or holds no usable rows."""


def _parse_float(text: str) -> float | None:
    """Parse a plain decimal number, rejecting padding and digit separators."""
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def parse_time_to_seconds(text: str) -> float | None:
    """Convert an ``HH:MM:SS:mmm`` stamp to seconds, or None if malformed."""
    parts = text.split(":")
    if len(parts) != 4:
        return None
    values = [_parse_float(part) for part in parts]
    if any(value is None for value in values):
        return None
    hours, minutes, seconds, millis = values
    return hours * 3600.0 + minutes * 60.0 + seconds + millis / 1000.0


def _split_seconds(seconds: float) -> tuple[int, int]:
    if seconds < 0:
        raise ValueError("elapsed time cannot be negative")
    return divmod(round(seconds * _NANOS_PER_SECOND), _NANOS_PER_SECOND)


def format_timestamp(seconds: float) -> str:
    """Format elapsed seconds as ``HH:MM:SS:mmm``."""
    whole, nanos = _split_seconds(seconds)
    return (
        f"{whole // 3600:02}:{whole % 3600 // 60:02}:"
        f"{whole % 60:02}:{nanos // _NANOS_PER_MILLI:03}"
    )


def format_elapsed(seconds: float) -> str:
    """Format elapsed seconds as ``HH:MM:SS``."""
    whole, _ = _split_seconds(seconds)
    return f"{whole // 3600:02}:{whole % 3600 // 60:02}:{whole % 60:02}"


def parse_reading(text: str) -> tuple[float, float, float] | None:
    """Parse a ``thrust,ambient,nozzle`` reading, or None if malformed."""
    parts = text.strip().split(",")
    if len(parts) != 3:
        return None
    values = [_parse_float(part.strip()) for part in parts]
    if any(value is None for value in values):
        return None
    thrust, ambient, nozzle = values
    return thrust, ambient, nozzle


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def _parse_row(line: str) -> DataPoint | None:
    parts = line.split(",")
    if len(parts) < 4:
        return None
    time = parse_time_to_seconds(parts[0].strip())
    values = [_parse_float(part.strip()) for part in parts[1:4]]
    if time is None or any(value is None for value in values):
        return None
    thrust, ambient, nozzle = values
    return DataPoint(time, thrust, ambient, nozzle)


def load_csv(path: str | Path) -> list[DataPoint]:
    """Read samples from a CSV file written by the recorder."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise CsvLoadError(f"Error al abrir el archivo: {exc}") from exc
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CsvLoadError(f"Error al leer línea: {exc}") from exc

    lines = _lines(text)
    if lines and ("Tiempo" in lines[0] or "Empuje" in lines[0]):
        lines = lines[1:]

    points = [point for point in map(_parse_row, lines) if point is not None]
    if not points:
        raise CsvLoadError("No se encontraron datos válidos en el archivo CSV")
    return points


def total_impulse(points: Sequence[DataPoint]) -> float:
    """Integrate thrust over time with the trapezoidal rule."""
    return sum(
        ((after.thrust + before.thrust) / 2.0 * (after.time - before.time)
         for before, after in pairwise(points)),
        0.0,
    )


@dataclass(frozen=True)
class Summary:
    """Statistics of a recorded burn."""

    max_thrust: float
    avg_thrust: float
    duration: float
    total_impulse: float
    samples: int

    @property
    def specific_impulse(self) -> float:
        return self.total_impulse / STANDARD_GRAVITY

    def render(self, source: str) -> str:
        """Return the text of the summary report for the given source file."""
        lines = [
            "=== RESUMEN DEL ANÁLISIS ===",
            f"Archivo analizado: {source}",
            "",
            "ESTADÍSTICAS DE EMPUJE:",
            f"Empuje máximo: {self.max_thrust:.2f} N",
            f"Empuje promedio: {self.avg_thrust:.2f} N",
            "",
            "IMPULSO:",
            f"Impulso total: {self.total_impulse:.2f} N⋅s",
            f"Impulso específico: {self.specific_impulse:.2f} s",
            "",
            "DURACIÓN:",
            f"Duración total: {self.duration:.2f} s",
            f"Muestras totales: {self.samples}",
        ]
        return "".join(f"{line}\n" for line in lines)


def summarize(points: Iterable[DataPoint], impulse: float) -> Summary:
    """Compute the summary statistics of a non-empty series."""
    points = list(points)
    if not points:
        raise ValueError("cannot summarize an empty series")
    thrusts = [point.thrust for point in points]
    max_thrust = max(
        (value for value in thrusts if not math.isnan(value)),
        default=-math.inf,
    )
    return Summary(
        max_thrust=max_thrust,
        avg_thrust=sum(thrusts) / len(thrusts),
        duration=points[-1].time - points[0].time,
        total_impulse=impulse,
        samples=len(points),
    )


def export_summary(
    points: Iterable[DataPoint],
    impulse: float,
    source: str,
    path: str | Path = SUMMARY_FILE,
) -> Path | None:
    """Write the summary report; return its path, or None if there is no data."""
    points = list(points)
    if not points:
        return None
    target = Path(path)
    target.write_text(
        summarize(points, impulse).render(source), encoding="utf-8", newline=""
    )
    return target