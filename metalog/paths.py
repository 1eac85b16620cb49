"""paths.py - Default log file location.

A LogWriter built without a target writes to::

    <app-data>/MetaLog/<component>.log

where ``<app-data>`` is ``%APPDATA%`` on Windows and ``$XDG_DATA_HOME`` (or
``~/.local/share``) elsewhere, and ``<component>`` is the name of the running
script.
"""

import os
import sys
from typing import Optional

APP_DIR_NAME = "MetaLog"
DEFAULT_COMPONENT = "MetaLog"


def app_data_dir() -> str:
    """Return the per-user application data directory for this platform."""
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return appdata
        return os.path.join(os.path.expanduser("~"), "AppData", "Roaming")
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return xdg
    return os.path.join(os.path.expanduser("~"), ".local", "share")


def metalog_dir() -> str:
    """Return ``<app-data>/MetaLog``, creating it if it does not exist."""
    path = os.path.join(app_data_dir(), APP_DIR_NAME)
    os.makedirs(path, exist_ok=True)
    return path


def component_name() -> str:
    """Name of the running program, used as the default log file stem."""
    script = sys.argv[0] if sys.argv else ""
    stem = os.path.splitext(os.path.basename(script))[0]
    return stem or DEFAULT_COMPONENT


def recommended_log_file(component: Optional[str] = None) -> str:
    """Return the recommended log file path for ``component``.

    Args:
        component: Log file stem. Defaults to ``component_name()``.

    Returns:
        ``<app-data>/MetaLog/<component>.log``. The directory is created if
        needed; the file itself is not.
    """
    return os.path.join(metalog_dir(), f"{component or component_name()}.log")
