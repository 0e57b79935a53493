from __future__ import annotations

import tkinter as tk
from tkinter import messagebox, ttk

from palletizer_console.core.machine_status import (
    STATUS_COLORS,
    STATUS_LABELS,
    MachineStatus,
    NotConnectedError,
)


class TabDashboard(ttk.Frame):
    """Static status toggles; nothing here talks to a machine."""

    def __init__(self, parent, status: MachineStatus | None = None):
        super().__init__(parent)
        self.status = status or MachineStatus()
        self.indicator_vars: dict[str, tk.StringVar] = {}
        self.indicator_dots: dict[str, tk.Canvas] = {}
        self.build_ui()
        self.refresh()

    def build_ui(self) -> None:
        status_frame = ttk.LabelFrame(self, text="System Status")
        status_frame.pack(fill=tk.X, padx=10, pady=10)
        for idx, (label, _) in enumerate(self.status.indicators()):
            dot = tk.Canvas(status_frame, width=14, height=14, highlightthickness=0)
            dot.grid(row=idx, column=0, padx=(6, 4), pady=3)
            ttk.Label(status_frame, text=f"{label}:").grid(row=idx, column=1, sticky="w")
            var = tk.StringVar()
            ttk.Label(status_frame, textvariable=var).grid(row=idx, column=2, sticky="w", padx=6)
            self.indicator_vars[label] = var
            self.indicator_dots[label] = dot

        controls = ttk.LabelFrame(self, text="System Controls")
        controls.pack(fill=tk.X, padx=10, pady=(0, 10))
        self.connect_btn = ttk.Button(controls, text="Connect", command=self.toggle_connection)
        self.connect_btn.pack(side=tk.LEFT, padx=4, pady=6)
        self.enable_btn = ttk.Button(controls, text="Enable", command=self.toggle_enabled)
        self.enable_btn.pack(side=tk.LEFT, padx=4, pady=6)
        ttk.Button(controls, text="Clear", command=self.clear_alarm).pack(side=tk.LEFT, padx=4)
        ttk.Button(controls, text="Alarm", command=self.toggle_alarm).pack(side=tk.LEFT, padx=4)

    def toggle_connection(self) -> None:
        self.status.toggle_connection()
        self.refresh()

    def toggle_enabled(self) -> None:
        try:
            self.status.toggle_enabled()
        except NotConnectedError as exc:
            messagebox.showwarning("Dashboard", str(exc))
            return
        self.refresh()

    def toggle_alarm(self) -> None:
        self.status.toggle_alarm()
        self.refresh()

    def clear_alarm(self) -> None:
        self.status.clear_alarm()
        self.refresh()

    def refresh(self) -> None:
        for label, state in self.status.indicators():
            self.indicator_vars[label].set(STATUS_LABELS[state])
            dot = self.indicator_dots[label]
            dot.delete("all")
            dot.create_oval(2, 2, 12, 12, fill=STATUS_COLORS[state], outline="")
        connected = self.status.connection == "connected"
        self.connect_btn.configure(text="Disconnect" if connected else "Connect")
        self.enable_btn.configure(text="Disable" if self.status.enabled else "Enable")
