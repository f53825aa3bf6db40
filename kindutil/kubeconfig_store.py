"""Locking, writing, merging and removing kind entries in kubeconfig files."""

from __future__ import annotations

import contextlib
import os
from collections.abc import Iterator
from pathlib import Path

from kindutil.kubeconfig import (
    Config,
    KubeconfigError,
    check_kubeadm_expectations,
    encode,
    kind_cluster_key,
    read,
)
from kindutil.kubeconfig_paths import path_for_merge, paths


def lock_name(filename: str | os.PathLike) -> str:
    """Return the lock file name used for filename."""
    return os.fspath(filename) + ".lock"


def lock_file(filename: str | os.PathLike) -> None:
    """Create the lock file for filename, failing if it already exists.

    The parent directory is created first when it is missing.
    """
    directory = os.path.dirname(os.fspath(filename))
    if directory and not os.path.exists(directory):
        os.makedirs(directory, mode=0o755, exist_ok=True)
    fd = os.open(lock_name(filename), os.O_CREAT | os.O_EXCL, 0)
    os.close(fd)


def unlock_file(filename: str | os.PathLike) -> None:
    """Remove the lock file for filename."""
    os.remove(lock_name(filename))


@contextlib.contextmanager
def locked(filename: str | os.PathLike) -> Iterator[None]:
    """Hold the lock for filename for the duration of the block."""
    try:
        lock_file(filename)
    except OSError as exc:
        raise KubeconfigError(f"failed to lock config file: {exc}") from exc
    try:
        yield
    finally:
        with contextlib.suppress(OSError):
            unlock_file(filename)


def write(cfg: Config, config_path: str | os.PathLike) -> None:
    """Encode cfg and write it to config_path, creating directories as needed."""
    encoded = encode(cfg).encode("utf-8")
    path = Path(config_path)
    directory = path.parent
    if not directory.exists():
        try:
            directory.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise KubeconfigError(f"failed to create directory for KUBECONFIG: {exc}") from exc
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as handle:
            handle.write(encoded)
    except OSError as exc:
        raise KubeconfigError(f"failed to write KUBECONFIG: {exc}") from exc


def _replace_or_append(entries: list, entry) -> None:
    matched = False
    for index, current in enumerate(entries):
        if current.name == entry.name:
            entries[index] = entry
            matched = True
    if not matched:
        entries.append(entry)


def merge(existing: Config, kind: Config) -> None:
    """Merge the kind config's single entries into existing, in place."""
    check_kubeadm_expectations(kind)

    _replace_or_append(existing.clusters, kind.clusters[0])
    _replace_or_append(existing.users, kind.users[0])
    _replace_or_append(existing.contexts, kind.contexts[0])

    existing.current_context = kind.current_context

    # some clients depend on apiVersion and kind being present
    if not existing.other_fields:
        existing.other_fields = kind.other_fields


def write_merged(kind_config: Config, explicit_config_path: str = "") -> None:
    """Merge kind_config into the kubeconfig kubectl would merge into and save it.

    The current context is set to the kind config's current context.
    """
    config_path = path_for_merge(explicit_config_path)
    with locked(config_path):
        try:
            existing = read(config_path)
        except (OSError, KubeconfigError) as exc:
            raise KubeconfigError(f"failed to get kubeconfig to merge: {exc}") from exc
        merge(existing, kind_config)
        write(existing, config_path)


def remove(cfg: Config, kind_cluster_name: str) -> bool:
    """Drop the kind cluster's entries from cfg; return whether anything changed."""
    key = kind_cluster_key(kind_cluster_name)
    before = (len(cfg.clusters), len(cfg.users), len(cfg.contexts))

    cfg.clusters = [c for c in cfg.clusters if c.name != key]
    cfg.users = [u for u in cfg.users if u.name != key]
    cfg.contexts = [c for c in cfg.contexts if c.name != key]
    mutated = before != (len(cfg.clusters), len(cfg.users), len(cfg.contexts))

    if cfg.current_context == key:
        cfg.current_context = ""
        mutated = True
    return mutated


def remove_kind(kind_cluster_name: str, explicit_path: str = "") -> None:
    """Remove the kind cluster from every kubeconfig file kubectl would consider."""
    for config_path in paths(explicit_path):
        with locked(config_path):
            try:
                existing = read(config_path)
            except (OSError, KubeconfigError) as exc:
                raise KubeconfigError(
                    f"failed to read kubeconfig to remove KIND entry: {exc}"
                ) from exc
            if remove(existing, kind_cluster_name):
                write(existing, config_path)