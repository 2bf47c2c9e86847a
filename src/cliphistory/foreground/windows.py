import psutil
import win32gui
import win32process

from cliphistory.exceptions import ResolverFailure
from cliphistory.foreground.base import ForegroundResolver


class WindowsResolver(ForegroundResolver):

    def current_foreground_app_name(self) -> str:
        hwnd = win32gui.GetForegroundWindow()
        if not hwnd:
            raise ResolverFailure("No foreground window")
        _, pid = win32process.GetWindowThreadProcessId(hwnd)
        try:
            name = psutil.Process(pid).name()
        except psutil.Error as exc:
            raise ResolverFailure(f"Could not inspect process {pid}", exc)
        # "notepad.exe" -> "notepad"
        return name[:-4] if name.lower().endswith(".exe") else name
