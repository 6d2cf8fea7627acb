"""Tests for the resource-query command."""

from __future__ import annotations

import json

import pytest

from resource_svc.cli import main

from .conftest import LUSTRE_FS, SLURM_CLUSTER


@pytest.fixture
def config_path(tmp_path):
    bad = {"id": "bad", "resourceType": "STORAGE", "resource": {}}
    (tmp_path / "seed.json").write_text(json.dumps([LUSTRE_FS, SLURM_CLUSTER, bad]))
    path = tmp_path / "config.yaml"
    path.write_text("store:\n  seed_file: seed.json\n")
    return str(path)


def test_query_by_type(config_path, capsys):
    assert main(["--config", config_path, "--resource-type", "COMPUTE"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert [r["id"] for r in output] == ["r2"]
    assert output[0]["resource"] == {"schedulerType": "slurm"}


def test_strict_failure_exit_code(config_path, capsys):
    assert main(["--config", config_path]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "no storageType or schedulerType" in captured.err


def test_lenient_skips_malformed(config_path, capsys):
    assert main(["--config", config_path, "--lenient", "--indent", "0"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert [r["id"] for r in output] == ["r1", "r2"]
