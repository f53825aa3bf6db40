[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kindutil"
version = "0.1.0"
description = "Helpers for local Kubernetes-in-container clusters: kubeconfig merging, node naming, proxy settings and load balancer configuration"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["kubernetes", "kubeconfig", "cluster", "haproxy", "containers"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kindutil"]

[tool.pytest.ini_options]
addopts = "-ra"
