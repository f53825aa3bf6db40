"""Helpers shared by node providers: naming, proxies, ports, images and logs."""

from __future__ import annotations

import functools
import os
import re
import socket
from collections import Counter
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import IO, Any

API_SERVER_INTERNAL_PORT = 6443
"""Port the control plane listens on inside the node network."""

HTTP_PROXY = "HTTP_PROXY"
HTTPS_PROXY = "HTTPS_PROXY"
NO_PROXY = "NO_PROXY"

_PROXY_VARIABLES = (HTTP_PROXY, HTTPS_PROXY, NO_PROXY)


def make_node_namer(cluster_name: str) -> Callable[[str], str]:
    """Return a function naming nodes from their role and the cluster name.

    The first node of a role is ``<cluster>-<role>``; later ones get a
    counter suffix starting at 2.
    """
    counter: Counter[str] = Counter()

    def name_node(role: str) -> str:
        counter[role] += 1
        count = counter[role]
        suffix = str(count) if count > 1 else ""
        return f"{cluster_name}-{role}{suffix}"

    return name_node


def get_proxy_envs(
    service_subnet: str,
    pod_subnet: str,
    getenv: Callable[[str], str | None] | None = None,
) -> dict[str, str]:
    """Return the proxy environment variables to pass to nodes.

    Each variable is looked up in upper case, then lower case, and stored
    under both spellings. When any proxy setting is present, NO_PROXY is
    extended with the service and pod subnets.
    """
    lookup = getenv or os.environ.get
    envs: dict[str, str] = {}
    for name in _PROXY_VARIABLES:
        value = lookup(name) or lookup(name.lower()) or ""
        if value:
            envs[name] = value
            envs[name.lower()] = value

    if envs:
        no_proxy = envs.get(NO_PROXY, "")
        if no_proxy:
            no_proxy += ","
        no_proxy += f"{service_subnet},{pod_subnet}"
        envs[NO_PROXY] = no_proxy
        envs[NO_PROXY.lower()] = no_proxy
    return envs


def port_or_get_free_port(port: int, listen_addr: str) -> int:
    """Resolve a configured port.

    -1 means "let the backend pick" and becomes 0; 0 means "pick one now"
    and becomes a free port on listen_addr; anything else is kept.
    """
    if port == -1:
        return 0
    if port == 0:
        return get_free_port(listen_addr)
    return port


def get_free_port(listen_addr: str) -> int:
    """Return a TCP port that is currently free on listen_addr.

    Raises OSError when the address cannot be resolved or bound.
    """
    host = listen_addr or None
    infos = socket.getaddrinfo(
        host, 0, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE
    )
    family, sock_type, proto, _, address = infos[0]
    with socket.socket(family, sock_type, proto) as sock:
        sock.bind(address)
        sock.listen(1)
        return sock.getsockname()[1]


def required_node_images(nodes: Iterable[Any]) -> set[str]:
    """Return the set of images used by the given nodes (objects with ``image``)."""
    return {node.image for node in nodes}


@functools.cache
def node_reached_cgroups_ready_regexp() -> re.Pattern[str]:
    """Return the pattern of the node log line after which exec is safe.

    It matches either the cgroup v1 detection message or the systemd
    Multi-User System target being reached.
    """
    return re.compile("Reached target .*Multi-User System.*|detected cgroup v1")


def wait_until_log_regexp_matches(
    lines: Iterable[str], pattern: str | re.Pattern[str]
) -> str:
    """Consume log lines until one matches pattern and return that line.

    Raises LookupError if the lines run out without a match.
    """
    regexp = re.compile(pattern)
    for line in lines:
        text = line.rstrip("\n").rstrip("\r")
        if regexp.search(text):
            return text
    raise LookupError(f"could not find a log line that matches {regexp.pattern!r}")


def file_on_host(path: str | os.PathLike) -> IO[bytes]:
    """Create (or truncate) the file at path, creating parent directories first.

    The file is returned open for binary reading and writing.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    return open(target, "w+b")