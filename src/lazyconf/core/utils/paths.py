"""
Path resolution for lazyconf storage locations.

Every configuration root owns one base directory below the user's home (or
the application-data directory on Windows-family hosts)::

    <home-or-appdata>/.<configuration_root>/
        config/<basename>.yml
        data/<basename>/
        log/<basename>/

Set LAZYCONF_HOME to relocate the home part (tests, containers, portable
installs). Directories are never created on import.
"""

import os
import platform
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

DEFAULT_CONFIGURATION_ROOT = "lazyconf"
DOCUMENT_SUFFIX = ".yml"
HOME_ENV_VAR = "LAZYCONF_HOME"

_SEGMENT_SPLIT = re.compile(r"::|\.")


def _is_windows_family() -> bool:
    return (
        platform.system() == "Windows"
        or sys.platform == "win32"
        or sys.platform.startswith("cygwin")
    )


def user_home_or_appdata() -> Path:
    """Return the directory that holds per-user configuration roots."""
    override = os.getenv(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    if _is_windows_family():
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata)
    return Path.home()


def get_base_dir(configuration_root: str = DEFAULT_CONFIGURATION_ROOT) -> Path:
    return user_home_or_appdata() / f".{configuration_root}"


def get_config_dir(configuration_root: str = DEFAULT_CONFIGURATION_ROOT) -> Path:
    return get_base_dir(configuration_root) / "config"


def get_data_dir(configuration_root: str = DEFAULT_CONFIGURATION_ROOT) -> Path:
    return get_base_dir(configuration_root) / "data"


def get_log_dir(configuration_root: str = DEFAULT_CONFIGURATION_ROOT) -> Path:
    return get_base_dir(configuration_root) / "log"


def owner_identity(owner: Any) -> str:
    """
    Render an owner as a stable identity string.

    Strings are used verbatim, classes become ``module.QualName`` and modules
    their dotted name. Any other object is identified by its class.

    Example:
        >>> owner_identity("acme.scanner.Worker")
        'acme.scanner.Worker'
    """
    if isinstance(owner, str):
        return owner
    if isinstance(owner, ModuleType):
        return owner.__name__
    if not isinstance(owner, type):
        owner = type(owner)
    return f"{owner.__module__}.{owner.__qualname__}"


def owner_basename(identity: str, namespace: str | None = None) -> str:
    """
    Derive the storage basename for an owner identity.

    The identity is split on ``.`` or ``::``, a leading segment equal to
    ``namespace`` is dropped, and the remaining segments are lowercased and
    joined with underscores.

    Example:
        >>> owner_basename("FIDIUS::Foo::Bar", "fidius")
        'foo_bar'
        >>> owner_basename("acme.scanner.Worker")
        'acme_scanner_worker'
    """
    segments = [segment for segment in _SEGMENT_SPLIT.split(identity) if segment]
    if not segments:
        raise ValueError(f"Cannot derive a basename from owner identity {identity!r}")
    if namespace and len(segments) > 1 and segments[0].lower() == namespace.lower():
        segments = segments[1:]
    return "_".join(segment.lower() for segment in segments)


def config_file_path(
    basename: str, configuration_root: str = DEFAULT_CONFIGURATION_ROOT
) -> Path:
    """Return ``<base>/config/<basename>.yml``; nothing is created."""
    return get_config_dir(configuration_root) / f"{basename}{DOCUMENT_SUFFIX}"
