import os

from kindutil.kubeconfig_paths import (
    discard_empty_and_duplicates,
    file_exists,
    home_dir,
    path_for_merge,
    paths,
)


def _getenv(env):
    return lambda name: env.get(name, "")


LIST_ENV = {
    "KUBECONFIG": os.pathsep.join(["/foo", "/bar", "", "/foo", "/bar"]),
    "HOME": "/home",
}


def test_paths_explicit():
    assert paths("foo", _getenv(LIST_ENV)) == ["foo"]


def test_paths_kubeconfig_list():
    assert paths("", _getenv(LIST_ENV)) == ["/foo", "/bar"]


def test_paths_home_config():
    assert paths("", _getenv({"HOME": "/home"})) == ["/home/.kube/config"]


def test_path_for_merge_explicit():
    assert path_for_merge("foo", _getenv(LIST_ENV)) == "foo"


def test_path_for_merge_first_existing(tmp_path):
    files = []
    for name in ("foo", "bar", "baz"):
        p = tmp_path / name
        p.touch()
        files.append(str(p))
    env = {"KUBECONFIG": os.pathsep.join(files)}
    assert path_for_merge("", _getenv(env)) == files[0]


def test_path_for_merge_skips_missing(tmp_path):
    existing = tmp_path / "present"
    existing.touch()
    env = {"KUBECONFIG": os.pathsep.join(["/bogus/path", str(existing)])}
    assert path_for_merge("", _getenv(env)) == str(existing)


def test_path_for_merge_last_if_none_exist():
    env = {"KUBECONFIG": os.pathsep.join(["/bogus/path", "/bogus/path/two"])}
    assert path_for_merge("", _getenv(env)) == "/bogus/path/two"


def test_home_dir_windows_with_kube_config(tmp_path):
    fake_home = tmp_path / "fake-home"
    (fake_home / ".kube").mkdir(parents=True)
    (fake_home / ".kube" / "config").touch()
    env = {
        "HOME": str(fake_home),
        "HOMEDRIVE": "ZZ:",
        "HOMEPATH": "ZZ:\\Users\\fake-user-zzz",
    }
    assert home_dir("windows", _getenv(env)) == str(fake_home)


def test_home_dir_windows_without_kube_config(tmp_path):
    env = {
        "HOME": str(tmp_path),
        "HOMEDRIVE": "",
        "HOMEPATH": "Users/fake-user-zzz",
    }
    assert home_dir("windows", _getenv(env)) == str(tmp_path)


def test_home_dir_windows_none_exist():
    env = {
        "HOME": "Z:/faaaaake",
        "HOMEDRIVE": "Z:/",
        "HOMEPATH": "Users/fake-user-zzz",
    }
    assert home_dir("windows", _getenv(env)) == "Z:/faaaaake"


def test_home_dir_windows_no_path():
    assert home_dir("windows", lambda name: "") == ""


def test_home_dir_non_windows_uses_home():
    assert home_dir("linux", _getenv({"HOME": "/home/someone"})) == "/home/someone"


def test_discard_empty_and_duplicates():
    assert discard_empty_and_duplicates(["", "/a", "/b", "/a", "", "/c"]) == ["/a", "/b", "/c"]


def test_file_exists(tmp_path):
    f = tmp_path / "file"
    f.touch()
    assert file_exists(str(f)) is True
    assert file_exists(str(tmp_path)) is False
    assert file_exists(str(tmp_path / "missing")) is False