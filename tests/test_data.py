import math

import pytest

from apogeo.data import (
    CSV_HEADER,
    CsvLoadError,
    DataPoint,
    Summary,
    export_summary,
    format_elapsed,
    format_timestamp,
    load_csv,
    parse_reading,
    parse_time_to_seconds,
    summarize,
    total_impulse,
)


def _point(time, thrust, ambient=20.0, nozzle=30.0):
    return DataPoint(time, thrust, ambient, nozzle)


def test_format_timestamp_zero():
    assert format_timestamp(0) == "00:00:00:000"


@pytest.mark.parametrize("seconds", [0.0, 1.5, 59.999, 61.25, 3600.0, 7384.042])
def test_timestamp_round_trip(seconds):
    assert parse_time_to_seconds(format_timestamp(seconds)) == pytest.approx(seconds)


@pytest.mark.parametrize("seconds", [0.0, 59.9, 3599.0, 3661.5, 90000.0])
def test_elapsed_is_timestamp_without_millis(seconds):
    assert format_elapsed(seconds) == format_timestamp(seconds).rsplit(":", 1)[0]


def test_negative_time_rejected():
    with pytest.raises(ValueError):
        format_timestamp(-1.0)
    with pytest.raises(ValueError):
        format_elapsed(-0.5)


@pytest.mark.parametrize("text", ["1:2:3", "1:2:3:4:5", "a:b:c:d", "", "1: 2:3:4", "1_0:0:0:0"])
def test_parse_time_rejects_malformed(text):
    assert parse_time_to_seconds(text) is None


def test_parse_reading_trims_and_parses():
    assert parse_reading("  1.5, 20 ,300\r\n") == (1.5, 20.0, 300.0)


@pytest.mark.parametrize("text", ["1,2", "1,2,3,4", "1,x,3", "", ",,"])
def test_parse_reading_rejects_malformed(text):
    assert parse_reading(text) is None


def test_load_csv_skips_header_and_bad_rows(tmp_path):
    path = tmp_path / "datos.csv"
    rows = [
        CSV_HEADER,
        f"{format_timestamp(0.5)},1.5,20,300",
        "garbage line",
        f"{format_timestamp(1.25)},x,20,300",
        f"{format_timestamp(2.0)}, 4 , 21 , 310 ",
    ]
    path.write_text("\r\n".join(rows) + "\r\n", encoding="utf-8")
    points = load_csv(path)
    assert points == [
        DataPoint(pytest.approx(0.5), 1.5, 20.0, 300.0),
        DataPoint(pytest.approx(2.0), 4.0, 21.0, 310.0),
    ]


def test_load_csv_first_line_can_be_data(tmp_path):
    path = tmp_path / "datos.csv"
    path.write_text(f"{format_timestamp(3.0)},2,3,4", encoding="utf-8")
    points = load_csv(path)
    assert [p.thrust for p in points] == [2.0]


def test_load_csv_missing_file(tmp_path):
    with pytest.raises(CsvLoadError, match="Error al abrir el archivo"):
        load_csv(tmp_path / "missing.csv")


def test_load_csv_without_valid_rows(tmp_path):
    path = tmp_path / "datos.csv"
    path.write_text(CSV_HEADER + "\nnothing,here\n", encoding="utf-8")
    with pytest.raises(CsvLoadError, match="No se encontraron datos válidos en el archivo CSV"):
        load_csv(path)


def test_load_csv_invalid_utf8(tmp_path):
    path = tmp_path / "datos.csv"
    path.write_bytes(b"\xff\xfe\x00bad")
    with pytest.raises(CsvLoadError, match="Error al leer"):
        load_csv(path)


def test_total_impulse_needs_two_points():
    assert total_impulse([]) == 0.0
    assert total_impulse([_point(1.0, 50.0)]) == 0.0


def test_total_impulse_constant_thrust():
    thrust = 12.5
    times = [0.0, 0.5, 1.5, 4.0]
    points = [_point(t, thrust) for t in times]
    assert total_impulse(points) == pytest.approx(thrust * (times[-1] - times[0]))


def test_total_impulse_is_additive():
    points = [_point(t, thrust) for t, thrust in [(0, 0), (1, 10), (2, 30), (3, 5), (4, 0)]]
    whole = total_impulse(points)
    assert whole == pytest.approx(total_impulse(points[:3]) + total_impulse(points[2:]))


def test_summarize_statistics():
    points = [_point(1.0, 1.0), _point(2.0, 3.0), _point(3.5, 2.0)]
    summary = summarize(points, 7.0)
    assert summary.max_thrust == 3.0
    assert summary.avg_thrust == pytest.approx(2.0)
    assert summary.duration == pytest.approx(3.5 - 1.0)
    assert summary.samples == len(points)
    assert summary.specific_impulse == pytest.approx(7.0 / 9.81)


def test_summarize_max_ignores_nan():
    points = [_point(0.0, math.nan), _point(1.0, 4.0)]
    assert summarize(points, 0.0).max_thrust == 4.0


def test_summarize_empty_raises():
    with pytest.raises(ValueError):
        summarize([], 0.0)


def test_render_layout():
    summary = Summary(max_thrust=3.0, avg_thrust=2.0, duration=2.5, total_impulse=9.81, samples=3)
    lines = summary.render("datos.csv").splitlines()
    assert lines[0] == "=== RESUMEN DEL ANÁLISIS ==="
    assert lines[1] == "Archivo analizado: datos.csv"
    assert "Empuje máximo: 3.00 N" in lines
    assert "Impulso específico: 1.00 s" in lines
    assert lines[-1] == "Muestras totales: 3"


def test_export_summary_writes_rendered_text(tmp_path):
    points = [_point(0.0, 1.0), _point(1.0, 2.0)]
    impulse = total_impulse(points)
    target = export_summary(points, impulse, "datos.csv", tmp_path / "resumen.txt")
    assert target == tmp_path / "resumen.txt"
    expected = summarize(points, impulse).render("datos.csv")
    assert target.read_text(encoding="utf-8") == expected


def test_export_summary_empty_writes_nothing(tmp_path):
    target = tmp_path / "resumen.txt"
    assert export_summary([], 0.0, "datos.csv", target) is None
    assert not target.exists()