import psutil

from cliphistory.exceptions import ResolverFailure
from cliphistory.foreground.base import ForegroundResolver

_FRONTMOST_SCRIPT = (
    'tell application "System Events" to get name of first application process '
    'whose frontmost is true'
)


class MacOSResolver(ForegroundResolver):

    def current_foreground_app_name(self) -> str:
        name = self._run_command(["osascript", "-e", _FRONTMOST_SCRIPT])
        if not name:
            raise ResolverFailure("osascript returned no application name")
        return name


class X11Resolver(ForegroundResolver):
    """Uses ``xdotool`` for the focused window's pid and ``psutil`` for its name."""

    def current_foreground_app_name(self) -> str:
        output = self._run_command(["xdotool", "getactivewindow", "getwindowpid"])
        try:
            pid = int(output)
        except ValueError as exc:
            raise ResolverFailure(f"Unexpected xdotool output: {output!r}", exc)
        try:
            return psutil.Process(pid).name()
        except psutil.Error as exc:
            raise ResolverFailure(f"Could not inspect process {pid}", exc)
