import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture(autouse=True)
def _no_user_config(tmp_path, monkeypatch):
    """Keep a developer's own config.yaml out of the tests."""
    import pairs.config

    monkeypatch.setattr(pairs.config, "default_user_config_path", lambda: tmp_path / "no-user-config.yaml")
