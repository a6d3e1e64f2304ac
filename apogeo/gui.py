"""Desktop window of the dashboard: configuration panels, live plots and statistics."""

from __future__ import annotations

import argparse
import math
import tkinter as tk
from tkinter import ttk
from typing import NamedTuple, Sequence

from apogeo.controller import BAUD_RATES, Dashboard, Mode
from apogeo.data import DataPoint, summarize

WINDOW_TITLE = "Apogeo"
WINDOW_SIZE = "500x600"
LOGO_PATH = "assets/logo.png"
LOGO_WIDTH = 150
REFRESH_MS = 100

STATS_TITLE = "Estadísticas del Análisis"
STATUS_TITLE = "Estado del Sistema"


class Series(NamedTuple):
    """Plot data: shared x values and one y series per quantity."""

    x: list[float]
    thrust: list[float]
    temp_ambient: list[float]
    temp_nozzle: list[float]


def plot_series(points: Sequence[DataPoint], csv_mode: bool) -> Series:
    """Return the plot data: time on the x axis for CSV data, sample index when live."""
    if csv_mode:
        xs = [point.time for point in points]
    else:
        xs = [float(index) for index, _ in enumerate(points)]
    return Series(
        x=xs,
        thrust=[point.thrust for point in points],
        temp_ambient=[point.temp_ambient for point in points],
        temp_nozzle=[point.temp_nozzle for point in points],
    )


def stats_lines(dashboard: Dashboard) -> list[str]:
    """Return the statistics panel: its title first, then one line per figure."""
    points = dashboard.points()
    if dashboard.mode is Mode.CSV_VIEWER and points:
        summary = summarize(points, dashboard.total_impulse)
        return [
            STATS_TITLE,
            f"📊 Empuje máximo: {summary.max_thrust:.2f} N",
            f"📈 Empuje promedio: {summary.avg_thrust:.2f} N",
            f"⏱️ Duración: {summary.duration:.2f} s",
            f"🚀 Impulso total: {summary.total_impulse:.2f} N⋅s",
            f"⚡ Impulso específico: {summary.specific_impulse:.2f} s",
            f"📋 Muestras totales: {summary.samples}",
        ]

    lines = [
        STATUS_TITLE,
        f"🔗 Puerto: {dashboard.port_name}",
        f"⚡ Baud Rate: {dashboard.baud_rate}",
        f"📁 Archivo: {dashboard.file_path}",
    ]
    if points:
        last = points[-1]
        lines += [
            f"📊 Muestras actuales: {len(points)}",
            f"🚀 Último empuje: {last.thrust:.2f} N",
            f"🌡️ Temp. ambiente: {last.temp_ambient:.1f}°C",
            f"🔥 Temp. tobera: {last.temp_nozzle:.1f}°C",
        ]
    else:
        lines += [
            "⏳ Esperando datos...",
            "🔌 Verificar conexión serial",
            "📡 Iniciando captura de datos...",
        ]
    return lines


def _load_logo() -> tk.PhotoImage | None:
    try:
        image = tk.PhotoImage(file=LOGO_PATH)
    except tk.TclError:
        return None
    factor = max(1, math.ceil(image.width() / LOGO_WIDTH))
    return image.subsample(factor, factor) if factor > 1 else image


class DashboardWindow:
    """Tk front end that shows a :class:`Dashboard` and forwards button presses to it."""

    def __init__(self, root: tk.Misc, dashboard: Dashboard) -> None:
        self.root = root
        self.dashboard = dashboard
        self._logo = _load_logo()

        self._csv_path_var = tk.StringVar(root, value=dashboard.csv_file_path)
        self._port_var = tk.StringVar(root, value=dashboard.port_name)
        self._baud_var = tk.StringVar(root, value=str(dashboard.baud_rate))
        self._file_var = tk.StringVar(root, value=dashboard.file_path)

        self._frame: ttk.Frame | None = None
        self._view_key: tuple | None = None
        self._error_label: ttk.Label | None = None
        self._port_box: ttk.Combobox | None = None
        self._clock_label: ttk.Label | None = None
        self._info_label: ttk.Label | None = None
        self._stats_title: ttk.Label | None = None
        self._stats_body: ttk.Label | None = None
        self._canvas = None
        self._axes: list = []
        self._lines: list = []
        self._last_series: Series | None = None

        if isinstance(root, (tk.Tk, tk.Toplevel)):
            root.protocol("WM_DELETE_WINDOW", self._on_close)
        self.refresh()
        self._after_id = root.after(REFRESH_MS, self._tick)

    # -- refresh -----------------------------------------------------------

    def refresh(self) -> None:
        """Bring the widgets in line with the dashboard state."""
        dashboard = self.dashboard
        key = (dashboard.mode, dashboard.show_csv_panel, dashboard.show_serial_panel)
        if key != self._view_key:
            self._rebuild(key)
        if dashboard.mode is Mode.CONFIGURATION:
            if self._error_label is not None:
                self._error_label.configure(text=dashboard.error_message)
        else:
            self._update_monitoring()

    def _tick(self) -> None:
        self.refresh()
        self._after_id = self.root.after(REFRESH_MS, self._tick)

    def _rebuild(self, key: tuple) -> None:
        if self._frame is not None:
            self._frame.destroy()
        self._error_label = None
        self._port_box = None
        self._clock_label = None
        self._info_label = None
        self._stats_title = None
        self._stats_body = None
        self._canvas = None
        self._axes = []
        self._lines = []
        self._last_series = None

        self._frame = ttk.Frame(self.root, padding=10)
        self._frame.pack(fill=tk.BOTH, expand=True)
        if self.dashboard.mode is Mode.CONFIGURATION:
            self._build_configuration(self._frame)
        else:
            self._build_monitoring(self._frame)
        self._view_key = key

    # -- configuration view ------------------------------------------------

    def _build_configuration(self, parent: ttk.Frame) -> None:
        if self._logo is not None:
            tk.Label(parent, image=self._logo).pack(pady=(20, 10))
        ttk.Label(
            parent, text="Dashboard de Análisis", font=("TkDefaultFont", 18, "bold")
        ).pack(pady=(20, 30))
        self._error_label = ttk.Label(parent, foreground="red")
        self._error_label.pack(pady=(0, 10))

        ttk.Button(
            parent, text="📊 Cargar archivo CSV", width=30, command=self._on_open_csv
        ).pack(ipady=15)
        ttk.Button(
            parent, text="📡 Monitoreo en vivo", width=30, command=self._on_open_serial
        ).pack(ipady=15, pady=(15, 0))

        if self.dashboard.show_csv_panel:
            self._build_csv_panel(parent)
        if self.dashboard.show_serial_panel:
            self._build_serial_panel(parent)

    def _build_csv_panel(self, parent: ttk.Frame) -> None:
        ttk.Separator(parent).pack(fill=tk.X, pady=20)
        ttk.Label(
            parent, text="Cargar datos desde CSV", font=("TkDefaultFont", 14, "bold")
        ).pack(pady=(0, 20))

        row = ttk.Frame(parent)
        row.pack()
        ttk.Label(row, text="Archivo:").pack(side=tk.LEFT)
        ttk.Entry(row, textvariable=self._csv_path_var, width=30).pack(side=tk.LEFT)

        buttons = ttk.Frame(parent)
        buttons.pack(pady=15)
        ttk.Button(buttons, text="Cargar", width=14, command=self._on_load_csv).pack(
            side=tk.LEFT, ipady=6, padx=4
        )
        ttk.Button(buttons, text="Cancelar", width=14, command=self._on_cancel).pack(
            side=tk.LEFT, ipady=6, padx=4
        )

    def _build_serial_panel(self, parent: ttk.Frame) -> None:
        ttk.Separator(parent).pack(fill=tk.X, pady=20)
        ttk.Label(
            parent, text="Configuración Serial", font=("TkDefaultFont", 14, "bold")
        ).pack(pady=(0, 20))

        port_row = ttk.Frame(parent)
        port_row.pack(pady=5)
        ttk.Label(port_row, text="Puerto:").pack(side=tk.LEFT)
        self._port_box = ttk.Combobox(
            port_row,
            textvariable=self._port_var,
            values=self.dashboard.available_ports,
            state="readonly",
            width=20,
        )
        self._port_box.pack(side=tk.LEFT)
        ttk.Button(port_row, text="🔄", width=3, command=self._on_refresh_ports).pack(
            side=tk.LEFT, padx=4
        )

        baud_row = ttk.Frame(parent)
        baud_row.pack(pady=5)
        ttk.Label(baud_row, text="Velocidad:").pack(side=tk.LEFT)
        ttk.Combobox(
            baud_row,
            textvariable=self._baud_var,
            values=[str(rate) for rate in BAUD_RATES],
            state="readonly",
            width=20,
        ).pack(side=tk.LEFT)

        file_row = ttk.Frame(parent)
        file_row.pack(pady=5)
        ttk.Label(file_row, text="Archivo:").pack(side=tk.LEFT)
        ttk.Entry(file_row, textvariable=self._file_var, width=24).pack(side=tk.LEFT)

        buttons = ttk.Frame(parent)
        buttons.pack(pady=20)
        ttk.Button(buttons, text="Iniciar", width=14, command=self._on_start).pack(
            side=tk.LEFT, ipady=6, padx=4
        )
        ttk.Button(buttons, text="Cancelar", width=14, command=self._on_cancel).pack(
            side=tk.LEFT, ipady=6, padx=4
        )

    # -- monitoring view ---------------------------------------------------

    def _build_monitoring(self, parent: ttk.Frame) -> None:
        from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
        from matplotlib.figure import Figure

        csv_mode = self.dashboard.mode is Mode.CSV_VIEWER

        header = ttk.Frame(parent)
        header.pack(fill=tk.X)
        heading = "Análisis de datos CSV" if csv_mode else "Datos en tiempo real"
        ttk.Label(header, text=heading, font=("TkDefaultFont", 16, "bold")).pack(
            side=tk.LEFT
        )
        if not csv_mode:
            clock = ttk.LabelFrame(header, padding=5)
            clock.pack(side=tk.RIGHT)
            ttk.Label(
                clock,
                text="⏱️ TIEMPO TRANSCURRIDO",
                foreground="gray",
                font=("TkDefaultFont", 9),
            ).pack()
            self._clock_label = ttk.Label(
                clock, foreground="#0096ff", font=("TkDefaultFont", 20, "bold")
            )
            self._clock_label.pack()

        self._info_label = ttk.Label(parent)
        self._info_label.pack(fill=tk.X, pady=(5, 0))

        buttons = ttk.Frame(parent)
        buttons.pack(fill=tk.X, pady=5)
        if not csv_mode:
            ttk.Button(buttons, text="Detener", command=self._on_stop).pack(side=tk.LEFT)
        ttk.Button(
            buttons, text="Volver a configuración", command=self._on_back
        ).pack(side=tk.LEFT, padx=4)
        if csv_mode:
            ttk.Button(
                buttons, text="Exportar resumen", command=self._on_export
            ).pack(side=tk.LEFT)

        ttk.Separator(parent).pack(fill=tk.X, pady=5)

        figure = Figure(figsize=(8, 5), tight_layout=True)
        grid = figure.add_gridspec(2, 2)
        x_label = "Tiempo (s)" if csv_mode else "Muestras"
        panels = [
            (grid[:, 0], "Empuje", "Empuje (N)"),
            (grid[0, 1], "Temperatura Ambiente", "Temperatura (°C)"),
            (grid[1, 1], "Temperatura Tobera", "Temperatura (°C)"),
        ]
        for spec, title, y_label in panels:
            axes = figure.add_subplot(spec)
            axes.set_title(title, fontweight="bold")
            axes.set_xlabel(x_label)
            axes.set_ylabel(y_label)
            axes.grid(True, alpha=0.3)
            (line,) = axes.plot([], [])
            self._axes.append(axes)
            self._lines.append(line)

        self._canvas = FigureCanvasTkAgg(figure, master=parent)
        self._canvas.get_tk_widget().pack(fill=tk.BOTH, expand=True)

        ttk.Separator(parent).pack(fill=tk.X, pady=5)
        stats = ttk.LabelFrame(parent, padding=8)
        stats.pack(fill=tk.X)
        self._stats_title = ttk.Label(stats, font=("TkDefaultFont", 12, "bold"))
        self._stats_title.pack()
        self._stats_body = ttk.Label(stats, justify=tk.LEFT)
        self._stats_body.pack(pady=(10, 0))

    def _update_monitoring(self) -> None:
        dashboard = self.dashboard
        csv_mode = dashboard.mode is Mode.CSV_VIEWER

        if self._clock_label is not None:
            self._clock_label.configure(text=dashboard.elapsed_text())
        if self._info_label is not None:
            if csv_mode:
                info = (
                    f"Archivo: {dashboard.csv_file_path}    "
                    f"Impulso total: {dashboard.total_impulse:.2f} N⋅s"
                )
            else:
                info = f"Últimos datos: {dashboard.last_message()}"
            self._info_label.configure(text=info)

        points = dashboard.points()
        series = plot_series(points, csv_mode)
        if series != self._last_series and self._canvas is not None:
            for axes, line, ys in zip(
                self._axes,
                self._lines,
                (series.thrust, series.temp_ambient, series.temp_nozzle),
            ):
                line.set_data(series.x, ys)
                axes.relim()
                axes.autoscale_view()
            self._canvas.draw_idle()
            self._last_series = series

        if self._stats_title is not None and self._stats_body is not None:
            title, *body = stats_lines(dashboard)
            self._stats_title.configure(text=title)
            self._stats_body.configure(text="\n".join(body))

    # -- actions -----------------------------------------------------------

    def _pull_fields(self) -> None:
        dashboard = self.dashboard
        dashboard.csv_file_path = self._csv_path_var.get()
        dashboard.port_name = self._port_var.get()
        dashboard.file_path = self._file_var.get()
        try:
            dashboard.baud_rate = int(self._baud_var.get())
        except ValueError:
            self._baud_var.set(str(dashboard.baud_rate))

    def _on_open_csv(self) -> None:
        self.dashboard.open_csv_panel()
        self.refresh()

    def _on_open_serial(self) -> None:
        self.dashboard.open_serial_panel()
        self.refresh()

    def _on_cancel(self) -> None:
        self.dashboard.cancel_panel()
        self.refresh()

    def _on_refresh_ports(self) -> None:
        self.dashboard.refresh_ports()
        if self._port_box is not None:
            self._port_box.configure(values=self.dashboard.available_ports)

    def _on_load_csv(self) -> None:
        self._pull_fields()
        self.dashboard.load_csv()
        self.refresh()

    def _on_start(self) -> None:
        self._pull_fields()
        self.dashboard.start_monitoring()
        self.refresh()

    def _on_stop(self) -> None:
        self.dashboard.stop()

    def _on_back(self) -> None:
        self.dashboard.back_to_configuration()
        self.refresh()

    def _on_export(self) -> None:
        self.dashboard.export_summary()

    def _on_close(self) -> None:
        self.root.after_cancel(self._after_id)
        self.dashboard.stop()
        self.root.destroy()


def main(argv: list[str] | None = None) -> int:
    """Open the dashboard window and run until it is closed."""
    parser = argparse.ArgumentParser(
        prog="apogeo", description="Thrust-stand dashboard: live recording and CSV analysis."
    )
    parser.parse_args(argv)

    root = tk.Tk()
    root.title(WINDOW_TITLE)
    root.geometry(WINDOW_SIZE)
    dashboard = Dashboard()
    DashboardWindow(root, dashboard)
    try:
        root.mainloop()
    finally:
        dashboard.stop()
    return 0