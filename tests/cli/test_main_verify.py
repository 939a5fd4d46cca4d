# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
import json

import pytest

from rpmtrust.auxlib.ish import dals
from rpmtrust.cli.main import main
from rpmtrust.testing.rpm import build_rpm, sha256_hex


@pytest.fixture
def inputs(tmp_path):
    """A repository file without keys and a workspace of two local rpms."""
    foo, bar = build_rpm(name="foo"), build_rpm(name="bar")
    (tmp_path / "foo.rpm").write_bytes(foo)
    (tmp_path / "bar.rpm").write_bytes(bar)
    missing = (tmp_path / "mirror-down" / "foo.rpm").as_uri()

    repo_file = tmp_path / "repo.yaml"
    repo_file.write_text(
        dals(
            """
            repositories:
            - name: local
              baseurl: file:///nowhere
            """
        )
    )
    workspace = tmp_path / "WORKSPACE"
    workspace.write_text(
        dals(
            f"""
            rpm(
                name = "foo",
                sha256 = "{sha256_hex(foo)}",
                urls = ["{missing}", "{(tmp_path / 'foo.rpm').as_uri()}"],
            )
            rpm(
                name = "bar",
                sha256 = "{sha256_hex(bar)}",
                urls = ["{(tmp_path / 'bar.rpm').as_uri()}"],
            )
            """
        )
    )
    return ["-r", str(repo_file), "-w", str(workspace)]


def test_verify_success(inputs, capsys):
    assert main("verify", *inputs, "--allow-unsigned") == 0
    out = capsys.readouterr().out
    assert "foo: OK" in out
    assert "Verified 2 package(s) against 0 key(s)." in out


def test_verify_json(inputs, capsys):
    assert main("verify", *inputs, "--allow-unsigned", "--json") == 0
    report = json.loads(capsys.readouterr().out)
    assert report["success"] is True
    assert report["keyring"] == []
    assert [pkg["name"] for pkg in report["packages"]] == ["foo", "bar"]
    assert all(pkg["verified"] for pkg in report["packages"])


def test_verify_unsigned_fails(inputs, capsys):
    assert main("verify", *inputs) == 1
    err = capsys.readouterr().err
    assert "Could not verify foo" in err
    assert "not signed" in err


def test_verify_unsigned_fails_json(inputs, capsys):
    assert main("verify", *inputs, "--json") == 1
    report = json.loads(capsys.readouterr().out)
    assert report["exception_name"] == "RunAbortedError"
    assert report["package_name"] == "foo"


@pytest.mark.parametrize("content", ["", "repositories: []\n"])
def test_repo_file_without_repositories(inputs, tmp_path, content, capsys):
    (tmp_path / "repo.yaml").write_text(content)
    assert main("verify", *inputs, "--allow-unsigned") == 0
    assert "against 0 key(s)" in capsys.readouterr().out


def test_missing_repo_file(tmp_path, capsys):
    rc = main("verify", "-r", str(tmp_path / "repo.yaml"), "-w", str(tmp_path / "WORKSPACE"))
    assert rc == 1
    assert "Unable to load repository file" in capsys.readouterr().err


def test_allow_unsigned_from_environment(inputs, monkeypatch):
    monkeypatch.setenv("RPMTRUST_ALLOW_UNSIGNED_PACKAGES", "true")
    assert main("verify", *inputs) == 0


def test_version(capsys):
    assert main("--version") == 0
    assert capsys.readouterr().out.startswith("rpmtrust ")
