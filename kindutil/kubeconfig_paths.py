"""Resolution of the kubeconfig file paths, following kubectl's rules."""

from __future__ import annotations

import os
import posixpath
import stat
import sys
from collections.abc import Callable, Iterable

KUBECONFIG_ENV = "KUBECONFIG"

GetEnv = Callable[[str], "str | None"]


def _default_getenv(name: str) -> str:
    return os.environ.get(name, "")


def _env(getenv: GetEnv | None, name: str) -> str:
    return ((getenv or _default_getenv)(name)) or ""


def _current_os() -> str:
    return "windows" if os.name == "nt" else sys.platform


def paths(explicit_path: str, getenv: GetEnv | None = None) -> list[str]:
    """Return the kubeconfig paths to consider.

    An explicit path wins; otherwise the entries of $KUBECONFIG; otherwise
    $HOME/.kube/config.
    """
    if explicit_path:
        return [explicit_path]

    raw = _env(getenv, KUBECONFIG_ENV)
    found = discard_empty_and_duplicates(raw.split(os.pathsep) if raw else [])
    if found:
        return found

    return [posixpath.join(home_dir(_current_os(), getenv), ".kube", "config")]


def path_for_merge(explicit_path: str, getenv: GetEnv | None = None) -> str:
    """Return the file kubectl would merge into."""
    candidates = paths(explicit_path, getenv)
    if len(candidates) == 1:
        return candidates[0]
    return next((p for p in candidates if file_exists(p)), candidates[-1])


def file_exists(filename: str) -> bool:
    """Return True if filename exists and is not a directory."""
    try:
        info = os.stat(filename)
    except OSError:
        return False
    return not stat.S_ISDIR(info.st_mode)


def discard_empty_and_duplicates(paths: Iterable[str]) -> list[str]:
    """Drop empty entries and repeats, keeping first occurrences in order."""
    return list(dict.fromkeys(p for p in paths if p))


def home_dir(goos: str, getenv: GetEnv | None = None) -> str:
    """Return the user's home directory.

    On Windows the first of HOME, HOMEDRIVE+HOMEPATH, USERPROFILE holding a
    .kube/config wins; then the first of HOME, USERPROFILE, HOMEDRIVE+HOMEPATH
    that is a writable directory; then the first that exists; then the first
    that is set.
    """
    if goos != "windows":
        return _env(getenv, "HOME")

    home = _env(getenv, "HOME")
    home_drive, home_path = _env(getenv, "HOMEDRIVE"), _env(getenv, "HOMEPATH")
    home_drive_home_path = home_drive + home_path if home_drive and home_path else ""
    user_profile = _env(getenv, "USERPROFILE")

    for candidate in (home, home_drive_home_path, user_profile):
        if candidate and os.path.exists(os.path.join(candidate, ".kube", "config")):
            return candidate

    first_set = ""
    first_existing = ""
    for candidate in (home, user_profile, home_drive_home_path):
        if not candidate:
            continue
        first_set = first_set or candidate
        try:
            info = os.stat(candidate)
        except OSError:
            continue
        first_existing = first_existing or candidate
        if stat.S_ISDIR(info.st_mode) and stat.S_IMODE(info.st_mode) & 0o200:
            return candidate

    return first_existing or first_set