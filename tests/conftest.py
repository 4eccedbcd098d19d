import logging

import pytest

from fakes import ScriptedSource


@pytest.fixture
def log():
    return logging.getLogger("mousecal.test")


@pytest.fixture
def source():
    return ScriptedSource()
