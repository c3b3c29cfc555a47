"""Shared pytest fixtures for cdv2spm tests."""

import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"
