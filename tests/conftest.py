import logging

import pytest

from ffencode.binary import ENV_OVERRIDE
from ffencode.config import Settings
from ffencode.models import Job


@pytest.fixture(autouse=True)
def no_binary_override(monkeypatch):
    monkeypatch.delenv(ENV_OVERRIDE, raising=False)


@pytest.fixture
def settings(tmp_path):
    cache = tmp_path / "cache"
    cache.mkdir()
    return Settings(workpath=str(cache), logger=logging.getLogger("ffencode.tests"))


@pytest.fixture
def job(tmp_path):
    workpath = tmp_path / "job"
    workpath.mkdir()
    return Job(uid="job01", workpath=str(workpath), output="result.mov")
