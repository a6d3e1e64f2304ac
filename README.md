# apogeo

A small dashboard for rocket motor static tests. It records thrust, ambient
temperature and nozzle temperature from a serial device and logs each reading
to a CSV file. It plots the data as it arrives. It can also load a CSV file
recorded earlier and work out maximum and average thrust, test duration and
total impulse, then export a text summary.

The window uses Tk (`tkinter`) and matplotlib. The serial port is accessed
through pyserial.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Starting the dashboard

```
apogeo
```

The window opens on the configuration screen. If a file `assets/logo.png`
exists relative to the working directory, it is shown above the title. The
screen offers two modes.

- **Cargar archivo CSV** loads a file recorded earlier. The default file is
  `datos.csv`. The viewer plots thrust and the two temperatures against time
  in seconds. It also shows the statistics: maximum thrust, average thrust,
  duration, total impulse, total impulse divided by 9.81 and the number of
  samples. **Exportar resumen** writes this summary to `resumen_analisis.txt`
  in the working directory. If the file cannot be loaded, the reason appears
  in red on the configuration screen.
- **Monitoreo en vivo** opens a serial port. The defaults are `COM9` at
  115200 baud with the output file `datos.csv`. You can choose the port from
  the detected ports, and 🔄 scans for them again. The baud rate is one of
  9600, 19200, 38400, 57600, 115200 or 230400. Each read from the port that
  holds a reading `thrust,ambient,nozzle` is appended to the CSV file with an
  elapsed-time stamp `HH:MM:SS:mmm`. The header is written first if the file
  is empty. The plots show the last 100 samples against their sample index,
  and a clock shows the elapsed time. **Detener** stops reading. **Volver a
  configuración** stops reading and returns to the first screen.

A recorded CSV file has this header:

```
Tiempo,Empuje,Temperatura Ambiente,Temperatura Tobera
```

When a file is loaded, a first line that contains `Tiempo` or `Empuje` is
skipped. Rows that cannot be parsed are ignored.

## Checking a serial port

```
apogeo-serial [--baud-rate 9600]
```

This connects to the first serial port found, at 9600 baud unless
`--baud-rate` says otherwise. Once per second it reads a line and prints it.
If no complete line arrived, it prints `Esperando datos...` instead. Stop it
with Ctrl+C. The command exits with status 1 when no port is found or the port
cannot be opened.

## Using the library

```python
from apogeo.data import load_csv, total_impulse, summarize, export_summary

points = load_csv("datos.csv")
impulse = total_impulse(points)
print(summarize(points, impulse).render("datos.csv"))
export_summary(points, impulse, "datos.csv", "resumen_analisis.txt")
```

- `apogeo.data`:
  - `DataPoint` is one sample.
  - `total_impulse` integrates thrust over time with the trapezoidal rule.
  - `load_csv` raises `CsvLoadError` if the file cannot be read or holds no
    valid rows.
  - `export_summary` returns `None` and writes nothing when there are no
    points.
  - `parse_time_to_seconds`, `format_timestamp`, `format_elapsed` and
    `parse_reading` handle the time stamps and the reading lines.
- `apogeo.acquisition.Recorder` reads a serial port in a background thread
  (`start`, `stop`, `join`). It logs readings to CSV and keeps the latest 100.
  `snapshot` returns those samples and `last_message` returns the latest
  status text.
- `apogeo.serial_link`:
  - `available_ports` lists the serial devices present.
  - `SerialLink` hands out one trimmed line at a time through `read_line`.
- `apogeo.controller.Dashboard` holds the dashboard's state and actions
  without any widgets. `apogeo.gui.DashboardWindow` displays it in Tk.