import logging
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from cliphistory.exceptions import ResolverFailure

logger = logging.getLogger(__name__)


class ForegroundResolver(ABC):
    """Names the application that currently owns input focus."""

    def __init__(self, timeout: float = 0.5) -> None:
        self.timeout = timeout

    @abstractmethod
    def current_foreground_app_name(self) -> str:
        """Return the application name or raise ``ResolverFailure``."""

    def _run_command(self, command: List[str]) -> str:
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                timeout=self.timeout,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as exc:
            raise ResolverFailure(f"{command[0]} failed", exc)
        return result.stdout.decode("utf-8", errors="ignore").strip()


class NullResolver(ForegroundResolver):
    """Resolver for platforms without foreground application lookup."""

    def current_foreground_app_name(self) -> str:
        return ""


def resolve_source(resolver: Optional[ForegroundResolver]) -> str:
    """Best-effort source label; any failure degrades to an empty string."""
    if resolver is None:
        return ""
    try:
        return resolver.current_foreground_app_name() or ""
    except ResolverFailure as exc:
        logger.debug("Foreground app lookup failed: %s", exc)
    except Exception:
        logger.exception("Foreground resolver raised unexpectedly")
    return ""
