import logging
import os
import tkinter as tk
from importlib import metadata
from tkinter import ttk

import matplotlib


def _get_app_version() -> str:
    try:
        return metadata.version("palletizer-console")
    except metadata.PackageNotFoundError:
        return "dev"


def _configure_logging(default_level: str) -> None:
    level = os.getenv("PALLETIZER_LOG_LEVEL", default_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    matplotlib.use("TkAgg")

    from palletizer_engine.settings import load_settings
    from palletizer_console.core.config_editor import ConfigEditor
    from palletizer_console.gui.tab_boxes import TabBoxes
    from palletizer_console.gui.tab_dashboard import TabDashboard
    from palletizer_console.gui.tab_palletizer import TabPalletizer
    from palletizer_console.gui.tk_scheduler import TkScheduler

    settings = load_settings()
    _configure_logging(settings.log_level)

    root = tk.Tk()
    root.title(f"Palletizer Console v{_get_app_version()}")
    screen_w = root.winfo_screenwidth()
    screen_h = root.winfo_screenheight()
    width = min(int(screen_w * 0.9), 1600)
    height = min(int(screen_h * 0.9), 1000)
    root.geometry(f"{width}x{height}")
    root.minsize(1000, 700)

    style = ttk.Style()
    style.configure("TLabel", padding=(2, 1))
    style.configure("TEntry", padding=(2, 1))
    style.configure("TButton", padding=(6, 3))

    notebook = ttk.Notebook(root)
    notebook.pack(fill=tk.BOTH, expand=True)

    editor = ConfigEditor(TkScheduler(root), settings)
    dashboard = TabDashboard(notebook)
    palletizer = TabPalletizer(notebook, editor.geometry(), settings)
    boxes = TabBoxes(notebook, editor, on_geometry_change=palletizer.apply_geometry)

    notebook.add(dashboard, text="Dashboard")
    notebook.add(boxes, text="Boxes")
    notebook.add(palletizer, text="Palletizer")

    root.mainloop()


if __name__ == "__main__":
    main()
