from __future__ import annotations

import logging
import tkinter as tk
from tkinter import messagebox, ttk

import matplotlib.pyplot as plt
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.colors import ListedColormap
from matplotlib.patches import Patch

from palletizer_engine.geometry import GridGeometry
from palletizer_engine.models import GridCell
from palletizer_engine.sequencer import EmptySelectionError, RunSnapshot
from palletizer_engine.session import PalletizerSession
from palletizer_engine.settings import Settings
from palletizer_console.core.layer_view import STATUS_COLORS, STATUS_NAMES, status_matrix

from .tk_scheduler import TkScheduler

logger = logging.getLogger(__name__)


class TabPalletizer(ttk.Frame):
    """Layer selection, box position selection and the simulated run."""

    def __init__(self, parent, geometry: GridGeometry, settings: Settings):
        super().__init__(parent)
        self.session = PalletizerSession.from_geometry(
            TkScheduler(self),
            geometry,
            item_duration_ms=settings.item_duration_ms,
            lock_navigation_during_run=settings.lock_navigation_during_run,
        )
        self.session.sequencer.add_listener(self._on_run_update)
        self.session.navigator.add_listener(lambda _old, _new: self.refresh())

        self.layer_var = tk.StringVar(value=str(self.session.current_layer))
        self.layer_label_var = tk.StringVar(value="")
        self.banner_var = tk.StringVar(value="")
        self.progress_var = tk.DoubleVar(value=0.0)
        self.progress_text_var = tk.StringVar(value="0%")
        self.selected_var = tk.StringVar(value="0")
        self.completed_var = tk.StringVar(value="0")
        self.remaining_var = tk.StringVar(value="0")
        self.grid_info_var = tk.StringVar(value="")

        self.build_ui()
        self.refresh()

    def build_ui(self) -> None:
        self.columnconfigure(1, weight=1)
        self.rowconfigure(1, weight=1)

        ttk.Label(self, textvariable=self.banner_var, foreground="#1d4ed8").grid(
            row=0, column=0, columnspan=2, sticky="w", padx=10, pady=(8, 0)
        )

        left = ttk.Frame(self)
        left.grid(row=1, column=0, sticky="nsew", padx=10, pady=10)

        layer_frame = ttk.LabelFrame(left, text="Layer Selection")
        layer_frame.pack(fill=tk.X, pady=(0, 8))
        row = ttk.Frame(layer_frame)
        row.pack(fill=tk.X, padx=4, pady=4)
        self.dec_btn = ttk.Button(row, text="-", width=3, command=self.previous_layer)
        self.dec_btn.pack(side=tk.LEFT)
        entry = ttk.Entry(row, textvariable=self.layer_var, width=6, justify="center")
        entry.pack(side=tk.LEFT, padx=4)
        entry.bind("<Return>", self._on_layer_entry)
        entry.bind("<FocusOut>", self._on_layer_entry)
        self.inc_btn = ttk.Button(row, text="+", width=3, command=self.next_layer)
        self.inc_btn.pack(side=tk.LEFT)
        ttk.Label(layer_frame, textvariable=self.layer_label_var).pack(anchor="w", padx=4)
        self.layer_bar = ttk.Progressbar(layer_frame, maximum=100.0)
        self.layer_bar.pack(fill=tk.X, padx=4, pady=(2, 6))

        control = ttk.LabelFrame(left, text="Process Control")
        control.pack(fill=tk.X, pady=(0, 8))
        buttons = ttk.Frame(control)
        buttons.pack(fill=tk.X, padx=4, pady=4)
        self.start_btn = ttk.Button(buttons, text="Start", command=self.start_or_toggle_pause)
        self.start_btn.pack(side=tk.LEFT, expand=True, fill=tk.X, padx=2)
        self.stop_btn = ttk.Button(buttons, text="Stop", command=self.stop)
        self.stop_btn.pack(side=tk.LEFT, expand=True, fill=tk.X, padx=2)

        progress_row = ttk.Frame(control)
        progress_row.pack(fill=tk.X, padx=4)
        ttk.Label(progress_row, text="Progress").pack(side=tk.LEFT)
        ttk.Label(progress_row, textvariable=self.progress_text_var).pack(side=tk.RIGHT)
        ttk.Progressbar(control, variable=self.progress_var, maximum=100.0).pack(
            fill=tk.X, padx=4, pady=(0, 4)
        )

        nav = ttk.Frame(control)
        nav.pack(fill=tk.X, padx=4, pady=(0, 6))
        self.prev_btn = ttk.Button(nav, text="Previous", command=self.previous_layer)
        self.prev_btn.pack(side=tk.LEFT, expand=True, fill=tk.X, padx=2)
        self.next_btn = ttk.Button(nav, text="Next", command=self.next_layer)
        self.next_btn.pack(side=tk.LEFT, expand=True, fill=tk.X, padx=2)

        stats = ttk.LabelFrame(left, text="Layer Statistics")
        stats.pack(fill=tk.X)
        stats.columnconfigure(1, weight=1)
        for idx, (label, var) in enumerate(
            (
                ("Selected Boxes", self.selected_var),
                ("Completed", self.completed_var),
                ("Remaining", self.remaining_var),
                ("Current Layer", self.layer_label_var),
            )
        ):
            ttk.Label(stats, text=label).grid(row=idx, column=0, sticky="w", padx=4, pady=1)
            ttk.Label(stats, textvariable=var).grid(row=idx, column=1, sticky="e", padx=4, pady=1)

        right = ttk.LabelFrame(self, text="Box Positions")
        right.grid(row=1, column=1, sticky="nsew", padx=10, pady=10)
        right.columnconfigure(0, weight=1)
        right.rowconfigure(1, weight=1)

        header = ttk.Frame(right)
        header.grid(row=0, column=0, sticky="ew", padx=4, pady=4)
        ttk.Label(header, textvariable=self.grid_info_var).pack(side=tk.LEFT)
        self.clear_btn = ttk.Button(header, text="Clear All", command=self.clear_selection)
        self.clear_btn.pack(side=tk.RIGHT)

        self.grid_fig = plt.Figure(figsize=(6, 4.5))
        self.grid_ax = self.grid_fig.add_subplot(111)
        self.grid_canvas = FigureCanvasTkAgg(self.grid_fig, master=right)
        self.grid_canvas.get_tk_widget().grid(row=1, column=0, sticky="nsew")
        self.grid_canvas.mpl_connect("button_press_event", self._on_canvas_click)

    # -- commands ----------------------------------------------------------

    def apply_geometry(self, geometry: GridGeometry) -> None:
        if (geometry.rows, geometry.cols, geometry.max_layers) == (
            self.session.rows,
            self.session.cols,
            self.session.max_layers,
        ):
            return
        self.session.apply_geometry(geometry)
        self.refresh()

    def start_or_toggle_pause(self) -> None:
        seq = self.session.sequencer
        if seq.is_paused:
            seq.resume()
        elif seq.is_running:
            seq.pause()
        else:
            try:
                self.session.start()
            except EmptySelectionError as exc:
                messagebox.showwarning("Palletizer", str(exc))
                return
        self.refresh()

    def stop(self) -> None:
        self.session.sequencer.stop()
        self.refresh()

    def next_layer(self) -> None:
        self.session.next_layer()
        self.refresh()

    def previous_layer(self) -> None:
        self.session.previous_layer()
        self.refresh()

    def _on_layer_entry(self, _event=None) -> None:
        try:
            layer = int(self.layer_var.get())
        except ValueError:
            self.layer_var.set(str(self.session.current_layer))
            return
        self.session.go_to_layer(layer)
        self.refresh()

    def clear_selection(self) -> None:
        self.session.clear_selection()
        self.refresh()

    def _on_canvas_click(self, event) -> None:
        if event.inaxes is not self.grid_ax or event.xdata is None or event.ydata is None:
            return
        col = int(event.xdata)
        row = int(event.ydata)
        if not (0 <= row < self.session.rows and 0 <= col < self.session.cols):
            return
        self.session.click(row, col)
        self.refresh()

    def _on_run_update(self, _snapshot: RunSnapshot) -> None:
        try:
            self.refresh()
        except Exception:
            logger.exception("Failed to refresh palletizer view")

    # -- rendering ---------------------------------------------------------

    def refresh(self) -> None:
        session = self.session
        seq = session.sequencer
        stats = session.statistics()

        self.banner_var.set(session.status_text())
        self.layer_var.set(str(session.current_layer))
        self.layer_label_var.set(stats.layer_label)
        self.layer_bar["value"] = session.navigator.fraction() * 100
        self.selected_var.set(str(stats.selected))
        self.completed_var.set(str(stats.completed))
        self.remaining_var.set(str(stats.remaining))
        self.progress_var.set(seq.progress_percent)
        self.progress_text_var.set(f"{round(seq.progress_percent)}%")
        self.grid_info_var.set(
            f"Grid: {session.rows} x {session.cols}   Selected: {stats.selected} boxes"
        )

        if seq.is_paused:
            self.start_btn.configure(text="Resume", state="normal")
        elif seq.is_running:
            self.start_btn.configure(text="Pause", state="normal")
        else:
            self.start_btn.configure(
                text="Start", state="normal" if stats.selected else "disabled"
            )
        self.stop_btn.configure(state="normal" if seq.is_running else "disabled")

        locked = seq.is_running and session.lock_navigation_during_run
        prev_state = "disabled" if locked or session.navigator.at_first else "normal"
        next_state = "disabled" if locked or session.navigator.at_last else "normal"
        self.prev_btn.configure(state=prev_state)
        self.dec_btn.configure(state=prev_state)
        self.next_btn.configure(state=next_state)
        self.inc_btn.configure(state=next_state)
        self.clear_btn.configure(
            state="normal" if stats.selected and not seq.is_running else "disabled"
        )

        self.draw_grid()

    def draw_grid(self) -> None:
        ax = self.grid_ax
        ax.clear()
        rows, cols = self.session.rows, self.session.cols
        if rows == 0 or cols == 0:
            ax.axis("off")
            ax.text(
                0.5,
                0.5,
                "Configure box and pallet dimensions first",
                ha="center",
                va="center",
                transform=ax.transAxes,
            )
            self.grid_canvas.draw()
            return

        matrix = status_matrix(self.session)
        cmap = ListedColormap(list(STATUS_COLORS))
        ax.imshow(
            matrix,
            cmap=cmap,
            vmin=0,
            vmax=len(STATUS_COLORS) - 1,
            extent=(0, cols, rows, 0),
        )
        for r in range(rows):
            for c in range(cols):
                ax.text(
                    c + 0.5, r + 0.5, GridCell(r, c).label(), ha="center", va="center", fontsize=8
                )
        ax.set_xticks(range(cols + 1))
        ax.set_yticks(range(rows + 1))
        ax.set_xticklabels([])
        ax.set_yticklabels([])
        ax.grid(color="gray", linewidth=0.8)
        ax.legend(
            handles=[
                Patch(facecolor=color, edgecolor="gray", label=name)
                for name, color in zip(STATUS_NAMES, STATUS_COLORS)
            ],
            loc="upper center",
            bbox_to_anchor=(0.5, -0.02),
            ncol=len(STATUS_NAMES),
            fontsize=8,
        )
        self.grid_canvas.draw()
