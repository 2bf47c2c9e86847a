import logging
import os
import platform
import shutil
from typing import Type

from cliphistory.foreground.base import ForegroundResolver, NullResolver

logger = logging.getLogger(__name__)


def get_foreground_resolver_class() -> Type[ForegroundResolver]:
    system = platform.system()

    try:
        if system == "Darwin":
            from cliphistory.foreground.posix import MacOSResolver
            return MacOSResolver
        elif system == "Linux":
            # xdotool cannot see Wayland-native windows
            if os.environ.get("DISPLAY") and shutil.which("xdotool"):
                from cliphistory.foreground.posix import X11Resolver
                return X11Resolver
        elif system == "Windows":
            from cliphistory.foreground.windows import WindowsResolver
            return WindowsResolver
    except ImportError:
        logger.warning("Foreground app lookup unavailable on %s", system, exc_info=True)

    return NullResolver


def get_foreground_resolver(timeout: float = 0.5) -> ForegroundResolver:
    resolver_class = get_foreground_resolver_class()
    logger.debug("Using %s for source labels", resolver_class.__name__)
    return resolver_class(timeout=timeout)
