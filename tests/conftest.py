from __future__ import annotations

import pytest

import fluent_http


@pytest.fixture(autouse=True)
def reset_fluent_http():
    fluent_http.reset()
    yield
    fluent_http.reset()
