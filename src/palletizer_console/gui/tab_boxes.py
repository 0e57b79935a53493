from __future__ import annotations

import logging
import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from typing import Callable, Dict

import matplotlib.pyplot as plt
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.patches import Rectangle

from palletizer_engine.config_format import MalformedConfigError, export_filename
from palletizer_engine.geometry import GridGeometry, format_efficiency, format_layout_summary
from palletizer_engine.models import DIMENSION_FIELDS
from palletizer_engine.patterns import (
    category_grid,
    display_color,
    display_for,
    pattern_choices,
)
from palletizer_console.core.config_editor import ConfigEditor
from palletizer_console.core.config_io import get_config_dir, read_config_data, save_config

from .input_parsing import parse_dim

logger = logging.getLogger(__name__)

SAVE_STATUS_TEXT = {
    "idle": "",
    "saving": "Saving...",
    "saved": "Saved",
}


class TabBoxes(ttk.Frame):
    """Box and pallet configuration with a top-down pattern preview."""

    def __init__(
        self,
        parent,
        editor: ConfigEditor,
        on_geometry_change: Callable[[GridGeometry], None] | None = None,
    ):
        super().__init__(parent)
        self.editor = editor
        self.on_geometry_change = on_geometry_change
        self.is_editing = False
        self.box_vars: Dict[str, tk.StringVar] = {}
        self.pallet_vars: Dict[str, tk.StringVar] = {}
        self.entries: list[ttk.Entry] = []
        self.pattern_labels = dict(pattern_choices())
        self.pattern_var = tk.StringVar(value=display_for(editor.pattern))
        self.summary_var = tk.StringVar(value="")
        self.max_layers_var = tk.StringVar(value="")
        self.efficiency_var = tk.StringVar(value="")
        self.status_var = tk.StringVar(value="")
        self.save_status_var = tk.StringVar(value="")
        self._syncing = False

        self.build_ui()
        self.editor.add_listener(self.refresh)
        self.refresh()

    def build_ui(self) -> None:
        self.columnconfigure(1, weight=1)
        self.rowconfigure(0, weight=1)

        form = ttk.LabelFrame(self, text="Dimensions Configuration")
        form.grid(row=0, column=0, sticky="nsew", padx=10, pady=10)

        row = 0
        for title, target, setter in (
            ("Box Dimensions", self.box_vars, self.editor.set_box_field),
            ("Pallet Dimensions", self.pallet_vars, self.editor.set_pallet_field),
        ):
            ttk.Label(form, text=title, font=("TkDefaultFont", 10, "bold")).grid(
                row=row, column=0, columnspan=2, sticky="w", pady=(6, 2)
            )
            row += 1
            for name in DIMENSION_FIELDS:
                ttk.Label(form, text=f"{name.capitalize()} (mm):").grid(
                    row=row, column=0, sticky="e", pady=2
                )
                var = tk.StringVar()
                target[name] = var
                entry = ttk.Entry(form, textvariable=var, width=12, state="disabled")
                entry.grid(row=row, column=1, sticky="w", pady=2)
                self.entries.append(entry)
                label = f"{title.split()[0]} {name}"
                var.trace_add(
                    "write",
                    lambda *_args, n=name, v=var, s=setter, lbl=label: self._on_field_edit(
                        n, v, s, lbl
                    ),
                )
                row += 1

        ttk.Label(form, textvariable=self.max_layers_var).grid(
            row=row, column=0, columnspan=2, sticky="w", pady=(6, 0)
        )
        row += 1

        btn_frame = ttk.Frame(form)
        btn_frame.grid(row=row, column=0, columnspan=2, pady=6)
        self.edit_btn = ttk.Button(btn_frame, text="Edit", command=self.toggle_edit)
        self.edit_btn.pack(side=tk.LEFT, padx=2)
        ttk.Button(btn_frame, text="Save", command=self.save).pack(side=tk.LEFT, padx=2)
        ttk.Button(btn_frame, text="Reset", command=self.reset).pack(side=tk.LEFT, padx=2)
        row += 1

        io_frame = ttk.Frame(form)
        io_frame.grid(row=row, column=0, columnspan=2, pady=2)
        ttk.Button(io_frame, text="Import", command=self.import_dialog).pack(side=tk.LEFT, padx=2)
        ttk.Button(io_frame, text="Export", command=self.export_dialog).pack(side=tk.LEFT, padx=2)
        row += 1

        ttk.Label(form, textvariable=self.save_status_var).grid(
            row=row, column=0, columnspan=2, sticky="w"
        )
        row += 1
        ttk.Label(form, textvariable=self.status_var, foreground="#b91c1c", wraplength=220).grid(
            row=row, column=0, columnspan=2, sticky="w"
        )

        preview = ttk.LabelFrame(self, text="Pattern Visualizer")
        preview.grid(row=0, column=1, sticky="nsew", padx=10, pady=10)
        preview.columnconfigure(0, weight=1)
        preview.rowconfigure(2, weight=1)

        ttk.Combobox(
            preview,
            textvariable=self.pattern_var,
            values=list(self.pattern_labels.values()),
            state="readonly",
            width=28,
        ).grid(row=0, column=0, sticky="w", padx=4, pady=4)
        self.pattern_var.trace_add("write", self._on_pattern_selected)

        info = ttk.Frame(preview)
        info.grid(row=1, column=0, sticky="ew", padx=4)
        ttk.Label(info, textvariable=self.summary_var).pack(side=tk.LEFT)
        ttk.Label(info, textvariable=self.efficiency_var).pack(side=tk.RIGHT)

        self.preview_fig = plt.Figure(figsize=(5, 4))
        self.preview_ax = self.preview_fig.add_subplot(111)
        self.preview_canvas = FigureCanvasTkAgg(self.preview_fig, master=preview)
        self.preview_canvas.get_tk_widget().grid(row=2, column=0, sticky="nsew")

    # -- editing -----------------------------------------------------------

    def _on_field_edit(self, name: str, var: tk.StringVar, setter, label: str) -> None:
        if self._syncing:
            return
        self.status_var.set("")
        value = parse_dim(var, field=label, on_error=self._flag_invalid)
        setter(name, value)

    def _flag_invalid(self, field: str) -> None:
        self.status_var.set(f"Invalid value in {field}; using 0.")

    def _on_pattern_selected(self, *_args) -> None:
        if self._syncing:
            return
        label = self.pattern_var.get()
        for value, text in self.pattern_labels.items():
            if text == label and value != self.editor.pattern:
                self.editor.set_pattern(value)
                return

    def toggle_edit(self) -> None:
        self.is_editing = not self.is_editing
        state = "normal" if self.is_editing else "disabled"
        for entry in self.entries:
            entry.configure(state=state)
        self.edit_btn.configure(text="Cancel" if self.is_editing else "Edit")

    def save(self) -> None:
        self.editor.save()
        if self.is_editing:
            self.toggle_edit()

    def reset(self) -> None:
        self.editor.reset()

    # -- import / export ---------------------------------------------------

    def export_dialog(self) -> None:
        config = self.editor.export_config()
        path = filedialog.asksaveasfilename(
            initialdir=get_config_dir(),
            initialfile=export_filename(),
            defaultextension=".json",
            filetypes=[("JSON", "*.json")],
        )
        if not path:
            return
        try:
            saved = save_config(path, config)
        except OSError:
            logger.exception("Failed to export configuration")
            messagebox.showerror("Export", "Could not write the configuration file.")
            return
        self.status_var.set(f"Exported to {saved}")

    def import_dialog(self) -> None:
        path = filedialog.askopenfilename(
            initialdir=get_config_dir(), filetypes=[("JSON", "*.json")]
        )
        if not path:
            return
        try:
            self.editor.import_config(read_config_data(path))
        except (OSError, MalformedConfigError) as exc:
            logger.warning("Rejected configuration %s: %s", path, exc)
            messagebox.showerror("Import", "Invalid configuration file")
            return
        self.status_var.set(f"Imported {path}")

    # -- rendering ---------------------------------------------------------

    def refresh(self) -> None:
        self._syncing = True
        try:
            for target, dims in (
                (self.box_vars, self.editor.box),
                (self.pallet_vars, self.editor.pallet),
            ):
                for name, var in target.items():
                    current = parse_dim(var, on_error=lambda _f: None)
                    value = getattr(dims, name)
                    if current != value:
                        var.set(f"{value:g}")
            self.pattern_var.set(display_for(self.editor.pattern))
        finally:
            self._syncing = False

        geometry = self.editor.geometry()
        self.summary_var.set(f"Pallet Layout: {format_layout_summary(geometry)}")
        self.efficiency_var.set(f"Efficiency: {format_efficiency(geometry)}")
        self.max_layers_var.set(
            f"Boxes per layer: {geometry.boxes_per_layer}   Max layers: {geometry.max_layers}"
        )
        self.save_status_var.set(
            SAVE_STATUS_TEXT[self.editor.save_status]
            or ("Unsaved changes" if self.editor.has_unsaved_changes else "")
        )
        self.draw_pattern(geometry)
        if self.on_geometry_change is not None:
            try:
                self.on_geometry_change(geometry)
            except Exception:
                logger.exception("Geometry change callback failed")

    def _draw_empty_preview(self, message: str) -> None:
        self.preview_ax.clear()
        self.preview_ax.axis("off")
        self.preview_ax.text(
            0.5,
            0.5,
            message,
            ha="center",
            va="center",
            wrap=True,
            transform=self.preview_ax.transAxes,
        )
        self.preview_canvas.draw()

    def draw_pattern(self, geometry: GridGeometry) -> None:
        if geometry.is_empty:
            self._draw_empty_preview(
                "Please configure box and pallet dimensions to see the pattern visualization."
            )
            return

        pattern = self.editor.pattern
        box, pallet = self.editor.box, self.editor.pallet
        ax = self.preview_ax
        ax.clear()
        ax.set_title("Pallet View (Top-Down)")
        ax.set_aspect("equal")
        ax.add_patch(
            Rectangle((0, 0), pallet.length, pallet.width, fill=False, linestyle="--", edgecolor="gray")
        )
        for r, row in enumerate(category_grid(pattern, geometry.rows, geometry.cols)):
            for c, category in enumerate(row):
                color = display_color(pattern, category)
                ax.add_patch(
                    Rectangle(
                        (c * box.length, r * box.width),
                        box.length,
                        box.width,
                        facecolor=color,
                        edgecolor="white",
                    )
                )
        ax.set_xlim(0, pallet.length)
        ax.set_ylim(pallet.width, 0)
        ax.set_xlabel(display_for(pattern))
        ax.set_xticks([])
        ax.set_yticks([])
        self.preview_canvas.draw()
