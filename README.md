# kindutil

Library helpers for managing local Kubernetes clusters whose nodes run as
containers.

## Modules

- `kindutil.kubeconfig`: the kubeconfig data model (`Config`, `NamedCluster`,
  `Cluster`, `NamedUser`, `NamedContext`, `Context`). Fields the model does
  not inspect are kept in `other_fields` and written back unchanged. It also
  has these functions:
  - `decode`: parses YAML into a `Config`.
  - `encode`: writes YAML with sorted keys. An empty config encodes to `""`.
  - `kind_cluster_key`: returns `kind-<name>`.
  - `check_kubeadm_expectations`: requires exactly one cluster, one user and
    one context.
  - `kind_from_raw_kubeadm`: renames every entry of a kubeadm `admin.conf` to
    the cluster key and can replace the server endpoint.
  - `read`: loads a file. A missing file gives an empty `Config`.
- `kindutil.kubeconfig_paths`: chooses which kubeconfig files to use, by the
  same rules as `kubectl`. An explicit path comes first. If there is none, the
  entries of `$KUBECONFIG` are used, with empty and repeated entries dropped.
  If that is empty too, `$HOME/.kube/config` is used.
  - `paths`: returns the list of files to consider.
  - `path_for_merge`: returns the first of those files that exists. If none
    exists, it returns the last one.
  - `home_dir`: on Windows, looks for the home directory in `HOME`,
    `HOMEDRIVE`+`HOMEPATH` and `USERPROFILE`.
- `kindutil.kubeconfig_store`: changes kubeconfig files on disk.
  - `write`: writes a file with mode `0600` and creates any missing parent
    directories.
  - `merge`: replaces or appends the single cluster, user and context entries,
    and sets the current context.
  - `write_merged`: merges a config into the file and writes it back.
  - `remove`: takes a cluster's entries out of a `Config`. It clears the
    current context if that pointed at the cluster.
  - `remove_kind`: removes a cluster's entries from every file in use.
  - `lock_file`, `unlock_file` and `locked`: every change to a file is guarded
    by a `<file>.lock` file that is created exclusively. `locked` is the
    context-manager form.
- `kindutil.common`: helpers for node providers.
  - `make_node_namer`: names nodes `<cluster>-<role>`, `<cluster>-<role>2`
    and so on.
  - `get_proxy_envs`: returns the `HTTP_PROXY`, `HTTPS_PROXY` and `NO_PROXY`
    settings in upper- and lower-case forms. When any proxy is set, it adds
    the service and pod subnets to `NO_PROXY`.
  - `port_or_get_free_port` and `get_free_port`: pick TCP ports. `-1` becomes
    `0`, `0` becomes a free port, and any other value is kept.
  - `required_node_images`: returns the set of the nodes' `image` values.
  - `node_reached_cgroups_ready_regexp`: the pattern of the log line after
    which a node is ready to run commands.
  - `wait_until_log_regexp_matches`: reads an iterable of log lines and
    returns the first line that matches. It raises `LookupError` if no line
    matches.
  - `file_on_host`: creates a file and any missing parent directories.
  - `API_SERVER_INTERNAL_PORT` is `6443`.
- `kindutil.loadbalancer`: `render_config` renders the HAProxy configuration
  that fronts the control-plane nodes, from a `ConfigData`. Backend servers
  are listed in name order, and the IPv6 form is optional. `IMAGE` and
  `CONFIG_PATH` name the image and the path of the configuration file inside
  it.

## Installation

```
pip install .
```

## Examples

Turn a kubeadm kubeconfig into a cluster kubeconfig, merge it into the
kubeconfig in use, then take it out again:

```python
from kindutil.kubeconfig import kind_from_raw_kubeadm, encode
from kindutil.kubeconfig_store import write_merged, remove_kind

with open("admin.conf") as f:
    cfg = kind_from_raw_kubeadm(f.read(), "kind", "https://127.0.0.1:6443")

print(encode(cfg))
write_merged(cfg, "")        # "" means: follow the kubectl path rules
remove_kind("kind", "")
```

Name nodes and collect proxy settings:

```python
import os
from kindutil.common import make_node_namer, get_proxy_envs

namer = make_node_namer("dev")
namer("control-plane")   # 'dev-control-plane'
namer("worker")          # 'dev-worker'
namer("worker")          # 'dev-worker2'

envs = get_proxy_envs("10.96.0.0/16", "10.244.0.0/16", os.environ.get)
```

Render the load balancer configuration:

```python
from kindutil.loadbalancer import ConfigData, render_config

print(render_config(ConfigData(
    control_plane_port=6443,
    backend_servers={"dev-control-plane": "dev-control-plane:6443"},
)))
```

## Errors

- Bad or unexpected kubeconfig content raises
  `kindutil.kubeconfig.KubeconfigError`. So does a failure to lock, read or
  write a kubeconfig file.
- File and socket problems elsewhere raise `OSError`.
- `wait_until_log_regexp_matches` raises `LookupError`.

## What this package does not do

This is a library only. It has no command-line program. It does not create,
start or delete clusters or containers. It does not run commands on nodes,
fetch `admin.conf` from a node, or collect node logs. The caller supplies the
kubeconfig text and the log lines, and applies the rendered load balancer
configuration.

## Running the tests

```
pip install .[test]
pytest
```