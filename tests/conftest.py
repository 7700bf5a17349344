"""Pytest configuration for packbits-codec tests."""

import logging

import pytest

from packbits_codec import codec

logging.basicConfig(level=logging.DEBUG)

try:
    from packbits_codec import _codec  # type: ignore[attr-defined]

    IMPLEMENTATIONS = [codec, _codec]
except ImportError:
    IMPLEMENTATIONS = [codec]


@pytest.fixture(params=IMPLEMENTATIONS, ids=lambda mod: mod.__name__)
def impl(request):
    """Each available buffer codec implementation."""
    return request.param
