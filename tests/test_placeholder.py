from __future__ import annotations

import re

from tasktracker import __version__
from tasktracker.core.config import Settings


def test_version_is_semver() -> None:
    pattern = r"^\d+\.\d+\.\d+$"
    assert re.match(pattern, __version__) is not None


def test_settings_default_to_package_version() -> None:
    assert Settings(environment="test").version == __version__
