"""Shared fixtures for reading tests."""

import importlib.util
import sys
from pathlib import Path

import pytest

# load helpers by path so test module names do not collide
_helpers_path = Path(__file__).resolve().parent / 'helpers.py'
_spec = importlib.util.spec_from_file_location('helpers', _helpers_path)
_helpers = importlib.util.module_from_spec(_spec)
sys.modules['helpers'] = _helpers
_spec.loader.exec_module(_helpers)

from helpers import make_face, make_payload  # noqa: E402


@pytest.fixture
def face():
  return make_face()


@pytest.fixture
def payload():
  return make_payload()
