import os
import shutil
import subprocess
from typing import List, Optional

from cliphistory.clipboard.base import TextClipboard
from cliphistory.exceptions import ClipboardInitFailure


class LinuxClipboard(TextClipboard):
    _TEXT_TARGETS = {
        "text/plain",
        "text/plain;charset=utf-8",
        "text/plain;charset=utf8",
        "utf8_string",
        "string",
    }

    def __init__(self) -> None:
        self._wayland = bool(os.environ.get("WAYLAND_DISPLAY")) and bool(
            shutil.which("wl-paste") and shutil.which("wl-copy"))
        if not self._wayland and not shutil.which("xclip"):
            raise ClipboardInitFailure(
                "No clipboard tool found (install wl-clipboard or xclip)")

    def _get_text(self) -> Optional[str]:
        if self._wayland:
            types = self._parse_type_list(
                self._run_command(["wl-paste", "--list-types"], timeout=1.5))
            if not self._has_text_target(types):
                return None
            data = self._run_command(["wl-paste", "--no-newline"], timeout=1.5)
        else:
            types = self._parse_type_list(
                self._run_command(
                    ["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"],
                    timeout=1.5,
                )
            )
            if not self._has_text_target(types):
                return None
            data = self._run_command(
                ["xclip", "-selection", "clipboard", "-o"], timeout=1.5)

        if data is None:
            return None
        return data.decode("utf-8", errors="replace")

    def _set_text(self, text: str) -> bool:
        if self._wayland:
            command = ["wl-copy"]
        else:
            command = ["xclip", "-selection", "clipboard"]
        subprocess.run(
            command,
            input=text.encode("utf-8"),
            check=True,
            timeout=2.0,
        )
        return True

    def _has_text_target(self, types: List[str]) -> bool:
        return any(target.lower() in self._TEXT_TARGETS for target in types)

    def _parse_type_list(self, data: Optional[bytes]) -> List[str]:
        if not data:
            return []
        text = data.decode("utf-8", errors="ignore")
        return [line.strip() for line in text.splitlines() if line.strip()]

    def _run_command(self, command: List[str], timeout: float) -> Optional[bytes]:
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                timeout=timeout,
            )
            return result.stdout
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
            return None
