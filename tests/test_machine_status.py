import pytest

from palletizer_console.core.machine_status import MachineStatus, NotConnectedError


def test_enable_requires_connection():
    status = MachineStatus()

    with pytest.raises(NotConnectedError):
        status.toggle_enabled()
    assert status.enabled is False


def test_connect_enable_and_disconnect():
    status = MachineStatus()

    assert status.toggle_connection() == "connected"
    assert status.toggle_enabled() is True
    assert status.indicators() == [
        ("Connection", "connected"),
        ("System", "connected"),
        ("Alarms", "idle"),
    ]
    assert status.toggle_connection() == "disconnected"
    assert status.enabled is False


def test_alarm_toggle_and_clear():
    status = MachineStatus()

    assert status.toggle_alarm() == "error"
    assert status.toggle_alarm() == "idle"
    status.alarm = "warning"
    status.clear_alarm()
    assert status.alarm == "idle"
