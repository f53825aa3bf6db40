from kindutil.loadbalancer import CONFIG_PATH, IMAGE, ConfigData, render_config

SERVERS = {
    "kind-control-plane2": "kind-control-plane2:6443",
    "kind-control-plane": "kind-control-plane:6443",
}


def _server_lines(text):
    return [line for line in text.splitlines() if line.startswith("  server ")]


def test_render_starts_with_generated_header():
    out = render_config(ConfigData(control_plane_port=6443, backend_servers=SERVERS))
    assert out.startswith("# generated by kind\nglobal\n")
    assert out.endswith("\n")


def test_render_ipv4_frontend_and_servers():
    out = render_config(ConfigData(control_plane_port=6443, backend_servers=SERVERS))
    assert "  bind *:6443\n  \n  default_backend kube-apiservers\n" in out
    assert "bind :::" not in out
    assert _server_lines(out) == [
        "  server kind-control-plane kind-control-plane:6443 check check-ssl verify none "
        "resolvers docker resolve-prefer ipv4",
        "  server kind-control-plane2 kind-control-plane2:6443 check check-ssl verify none "
        "resolvers docker resolve-prefer ipv4",
    ]


def test_render_ipv6_frontend_and_servers():
    out = render_config(ConfigData(control_plane_port=6443, backend_servers=SERVERS, ipv6=True))
    assert "  bind *:6443\n  bind :::6443;\n  default_backend kube-apiservers\n" in out
    lines = _server_lines(out)
    assert len(lines) == len(SERVERS)
    assert all(line.endswith("resolve-prefer ipv6") for line in lines)


def test_render_servers_sorted_by_name():
    servers = {"c": "c:1", "a": "a:1", "b": "b:1"}
    out = render_config(ConfigData(control_plane_port=1234, backend_servers=servers))
    names = [line.split()[1] for line in _server_lines(out)]
    assert names == sorted(servers)


def test_render_without_servers():
    out = render_config(ConfigData(control_plane_port=1234))
    assert _server_lines(out) == []
    assert out.endswith("  # TODO: we should be verifying (!)\n  \n")


def test_render_uses_port():
    out = render_config(ConfigData(control_plane_port=31337, ipv6=True))
    assert "  bind *:31337\n" in out
    assert "  bind :::31337;\n" in out


def test_config_data_defaults():
    data = ConfigData(control_plane_port=6443)
    assert data.backend_servers == {}
    assert data.ipv6 is False


def test_image_and_config_path_constants():
    assert IMAGE.startswith("kindest/haproxy:")
    assert CONFIG_PATH.endswith("/haproxy.cfg")