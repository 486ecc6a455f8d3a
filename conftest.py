"""Test discovery plumbing.

The vendored ``nuki_lib`` tests live inside the Home Assistant integration
package. Collect that directory as a plain directory so pytest does not import
the integration's ``__init__.py`` (which needs ``homeassistant``) before
running the library tests.
"""

from pathlib import Path

import pytest

_INTEGRATION_DIR = Path(__file__).parent / "custom_components" / "nuki_bridge"


def pytest_collect_directory(path, parent):
    if path == _INTEGRATION_DIR:
        return pytest.Dir.from_parent(parent, path=path)
    return None
