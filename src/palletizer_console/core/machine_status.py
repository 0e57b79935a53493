from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Tuple

ConnectionStatus = Literal["connected", "disconnected"]
AlarmStatus = Literal["idle", "warning", "error"]
IndicatorStatus = Literal["connected", "disconnected", "warning", "error", "idle"]


class NotConnectedError(RuntimeError):
    """Raised when the system is enabled without a connection."""


@dataclass
class MachineStatus:
    """Dashboard status toggles. No machine is contacted."""

    connection: ConnectionStatus = "disconnected"
    enabled: bool = False
    alarm: AlarmStatus = "idle"

    def toggle_connection(self) -> ConnectionStatus:
        if self.connection == "connected":
            self.connection = "disconnected"
            self.enabled = False
        else:
            self.connection = "connected"
        return self.connection

    def toggle_enabled(self) -> bool:
        if self.connection != "connected":
            raise NotConnectedError("Please connect to the system first")
        self.enabled = not self.enabled
        return self.enabled

    def toggle_alarm(self) -> AlarmStatus:
        self.alarm = "idle" if self.alarm == "error" else "error"
        return self.alarm

    def clear_alarm(self) -> None:
        self.alarm = "idle"

    def indicators(self) -> List[Tuple[str, IndicatorStatus]]:
        return [
            ("Connection", self.connection),
            ("System", "connected" if self.enabled else "idle"),
            ("Alarms", self.alarm),
        ]


STATUS_COLORS = {
    "connected": "#16a34a",
    "disconnected": "#9ca3af",
    "warning": "#ca8a04",
    "error": "#dc2626",
    "idle": "#2563eb",
}

STATUS_LABELS = {
    "connected": "Connected",
    "disconnected": "Disconnected",
    "warning": "Warning",
    "error": "Error",
    "idle": "Idle",
}
