# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
import pytest

from rpmtrust.auxlib.ish import dals
from rpmtrust.exceptions import RepoFileLoadError
from rpmtrust.gateways.disk.repo_file import load_repo_file
from rpmtrust.models.repository import RepositoryDescriptor

REPO_YAML = dals(
    """
    repositories:
    - arch: x86_64
      baseurl: http://mirror.example.com/fedora/releases/35/Everything/x86_64/os/
      name: fedora
      gpgkey: https://mirror.example.com/fedora/RPM-GPG-KEY-fedora-35-primary
    - arch: x86_64
      metalink: https://mirrors.example.com/metalink?repo=updates-released-f35&arch=x86_64
      name: updates
      disabled: true
      gpgkey: https://mirror.example.com/fedora/RPM-GPG-KEY-fedora-35-primary
    - name: local
      priority: 10
    """
)


def test_load_repo_file(tmp_path):
    path = tmp_path / "repo.yaml"
    path.write_text(REPO_YAML)

    repo_file = load_repo_file(path)

    assert [repo.name for repo in repo_file.repositories] == ["fedora", "updates", "local"]
    fedora, updates, local = repo_file.repositories
    assert fedora.supplies_key
    assert fedora.key_source_url.endswith("RPM-GPG-KEY-fedora-35-primary")
    assert updates.disabled and not updates.supplies_key
    assert local.key_source_url is None
    assert not fedora.disabled and not local.disabled


def test_round_trip_through_dump(tmp_path):
    path = tmp_path / "repo.yaml"
    path.write_text(REPO_YAML)
    repo_file = load_repo_file(path)
    assert [
        RepositoryDescriptor.from_map(entry)
        for entry in repo_file.dump()["repositories"]
    ] == list(repo_file.repositories)


@pytest.mark.parametrize(
    "content",
    ["", "repositories: []\n", "other: 1\n"],
)
def test_no_repositories(tmp_path, content):
    path = tmp_path / "repo.yaml"
    path.write_text(content)
    assert load_repo_file(path).repositories == ()


@pytest.mark.parametrize(
    "content,reason",
    [
        ("repositories: [\n", "invalid yaml"),
        ("- just\n- a list\n", "must be a mapping"),
        ("repositories: fedora\n", "'repositories' must be a list"),
        ("repositories:\n- fedora\n", "must be a mapping"),
        ("repositories:\n- name: x\n  disabled: maybe\n", "must be a boolean"),
        ("repositories:\n- name: x\n  gpgkey: [a, b]\n", "must be a string"),
    ],
)
def test_malformed(tmp_path, content, reason):
    path = tmp_path / "repo.yaml"
    path.write_text(content)
    with pytest.raises(RepoFileLoadError, match=reason):
        load_repo_file(path)


def test_missing(tmp_path):
    with pytest.raises(RepoFileLoadError, match="file does not exist"):
        load_repo_file(tmp_path / "repo.yaml")


def test_local_gpgkey_becomes_file_url(tmp_path):
    key = tmp_path / "RPM-GPG-KEY-local"
    repo = RepositoryDescriptor(name="local", gpgkey=str(key))
    assert repo.key_source_url == key.resolve().as_uri()
