"""Core test fixtures."""

from __future__ import annotations

import pytest

from afltriage.gdb import ChildResult, ThreadInfo, TriageResult


@pytest.fixture()
def sample_result(sample_payload):
    """A TriageResult built from the shared sample payload."""
    return TriageResult(
        thread_info=ThreadInfo.model_validate(sample_payload),
        child=ChildResult(
            stdout="starting up\n",
            stderr="warning: short read\n",
            status_code=1,
        ),
    )


@pytest.fixture()
def in_tmp_dir(tmp_path, monkeypatch):
    """Run with a clean working directory so no afltriage.toml is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
