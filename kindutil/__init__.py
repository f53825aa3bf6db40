"""Helpers for kubeconfig management, node naming, proxy settings and load balancer configuration."""

__version__ = "0.1.0"

__all__ = ["common", "kubeconfig", "kubeconfig_paths", "kubeconfig_store", "loadbalancer"]