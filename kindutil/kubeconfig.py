"""Kubeconfig data model, decoding and encoding for kind clusters."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


class KubeconfigError(Exception):
    """Raised when a kubeconfig cannot be decoded, validated or encoded."""


def _string(value: Any, what: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise KubeconfigError(f"expected a string for {what}, got {type(value).__name__}")


def _mapping(value: Any, what: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise KubeconfigError(f"expected a mapping for {what}, got {type(value).__name__}")
    return value


def _sequence(value: Any, what: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise KubeconfigError(f"expected a list for {what}, got {type(value).__name__}")
    return value


@dataclass
class Cluster:
    """How to reach a kubernetes cluster."""

    server: str = ""
    other_fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Cluster:
        mapping = dict(_mapping(data, "cluster"))
        server = _string(mapping.pop("server", None), "cluster.server")
        return cls(server=server, other_fields=mapping)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.other_fields)
        if self.server:
            out["server"] = self.server
        return out


@dataclass
class NamedCluster:
    """A cluster entry with its nickname."""

    name: str = ""
    cluster: Cluster = field(default_factory=Cluster)

    @classmethod
    def from_dict(cls, data: Any) -> NamedCluster:
        mapping = _mapping(data, "clusters entry")
        return cls(
            name=_string(mapping.get("name"), "clusters.name"),
            cluster=Cluster.from_dict(mapping.get("cluster")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "cluster": self.cluster.to_dict()}


@dataclass
class NamedUser:
    """A user entry with its nickname; the user data is kept untouched."""

    name: str = ""
    user: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> NamedUser:
        mapping = _mapping(data, "users entry")
        return cls(
            name=_string(mapping.get("name"), "users.name"),
            user=dict(_mapping(mapping.get("user"), "users.user")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "user": dict(self.user)}


@dataclass
class Context:
    """References to a cluster and a user."""

    cluster: str = ""
    user: str = ""
    other_fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Context:
        mapping = dict(_mapping(data, "context"))
        cluster = _string(mapping.pop("cluster", None), "context.cluster")
        user = _string(mapping.pop("user", None), "context.user")
        return cls(cluster=cluster, user=user, other_fields=mapping)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.other_fields)
        out["cluster"] = self.cluster
        out["user"] = self.user
        return out


@dataclass
class NamedContext:
    """A context entry with its nickname."""

    name: str = ""
    context: Context = field(default_factory=Context)

    @classmethod
    def from_dict(cls, data: Any) -> NamedContext:
        mapping = _mapping(data, "contexts entry")
        return cls(
            name=_string(mapping.get("name"), "contexts.name"),
            context=Context.from_dict(mapping.get("context")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "context": self.context.to_dict()}


_CONFIG_KEYS = ("clusters", "users", "contexts", "current-context")


@dataclass
class Config:
    """A kubeconfig; fields that are not inspected live in other_fields."""

    clusters: list[NamedCluster] = field(default_factory=list)
    users: list[NamedUser] = field(default_factory=list)
    contexts: list[NamedContext] = field(default_factory=list)
    current_context: str = ""
    other_fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        mapping = dict(_mapping(data, "kubeconfig"))
        clusters = [NamedCluster.from_dict(c) for c in _sequence(mapping.pop("clusters", None), "clusters")]
        users = [NamedUser.from_dict(u) for u in _sequence(mapping.pop("users", None), "users")]
        contexts = [NamedContext.from_dict(c) for c in _sequence(mapping.pop("contexts", None), "contexts")]
        current = _string(mapping.pop("current-context", None), "current-context")
        return cls(
            clusters=clusters,
            users=users,
            contexts=contexts,
            current_context=current,
            other_fields=mapping,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the plain mapping form, omitting empty known fields."""
        out: dict[str, Any] = {
            key: value for key, value in self.other_fields.items() if key not in _CONFIG_KEYS
        }
        if self.clusters:
            out["clusters"] = [c.to_dict() for c in self.clusters]
        if self.users:
            out["users"] = [u.to_dict() for u in self.users]
        if self.contexts:
            out["contexts"] = [c.to_dict() for c in self.contexts]
        if self.current_context:
            out["current-context"] = self.current_context
        return out


def decode(raw: str | bytes) -> Config:
    """Parse kubeconfig YAML into a Config."""
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise KubeconfigError(f"failed to decode KUBECONFIG: {exc}") from exc
    if data is None:
        return Config()
    return Config.from_dict(data)


def kind_cluster_key(cluster_name: str) -> str:
    """Return the key identifying a kind cluster in kubeconfig files."""
    return "kind-" + cluster_name


def check_kubeadm_expectations(cfg: Config) -> None:
    """Raise unless cfg has exactly one cluster, one user and one context."""
    if len(cfg.clusters) != 1:
        raise KubeconfigError(
            f"kubeadm KUBECONFIG should have one cluster, but read {len(cfg.clusters)}"
        )
    if len(cfg.users) != 1:
        raise KubeconfigError(f"kubeadm KUBECONFIG should have one user, but read {len(cfg.users)}")
    if len(cfg.contexts) != 1:
        raise KubeconfigError(
            f"kubeadm KUBECONFIG should have one context, but read {len(cfg.contexts)}"
        )


def _normalize(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return value


def encode(cfg: Config) -> str:
    """Encode cfg as normalized YAML with sorted keys; empty configs encode to ''."""
    data = _normalize(cfg.to_dict())
    if not data:
        return ""
    try:
        return yaml.safe_dump(
            data,
            default_flow_style=False,
            sort_keys=True,
            allow_unicode=True,
            width=1 << 30,
        )
    except yaml.YAMLError as exc:
        raise KubeconfigError(f"failed to encode KUBECONFIG: {exc}") from exc


def kind_from_raw_kubeadm(raw_kubeadm_kubeconfig: str, cluster_name: str, server: str = "") -> Config:
    """Derive a kind kubeconfig from a kubeadm admin kubeconfig.

    All named references are renamed to the kind cluster key; the server
    endpoint is replaced when server is non-empty.
    """
    cfg = decode(raw_kubeadm_kubeconfig)
    check_kubeadm_expectations(cfg)

    key = kind_cluster_key(cluster_name)
    cfg.clusters[0].name = key
    cfg.users[0].name = key
    cfg.contexts[0].name = key
    cfg.contexts[0].context.user = key
    cfg.contexts[0].context.cluster = key
    cfg.current_context = key

    if server:
        cfg.clusters[0].cluster.server = server
    return cfg


def read(config_path: str | Path) -> Config:
    """Load the kubeconfig at config_path, or an empty Config if it is missing."""
    try:
        raw = Path(config_path).read_bytes()
    except FileNotFoundError:
        return Config()
    return decode(raw)