import os
import pathlib
import sys
import textwrap

import pytest

from scriptutils import settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep the user's configuration and SCRIPTUTILS_* variables out of tests."""
    for name in list(os.environ):
        if name.startswith(settings.ENV_PREFIX):
            monkeypatch.delenv(name)
    monkeypatch.setattr(settings, "settings_file", tmp_path / "no-settings.json")
    settings.get_settings.cache_clear()
    yield
    settings.get_settings.cache_clear()


@pytest.fixture
def make_project(tmp_path):
    """Create a project with a pyproject.toml and a src/ package defining main()."""
    created = []

    def _make(name: str, *, marker: bool = True, body: str = "") -> pathlib.Path:
        project = tmp_path / name
        package = project / "src" / name
        package.mkdir(parents=True)
        if marker:
            (project / "pyproject.toml").write_text(
                f'[project]\nname = "{name}"\nversion = "1.2.3"\n', encoding="utf-8"
            )
        (package / "__init__.py").write_text(
            textwrap.dedent(body)
            or "def main(args):\n    print(' '.join(args))\n    return len(args)\n",
            encoding="utf-8",
        )
        created.append(name)
        return project

    yield _make
    for name in created:
        sys.modules.pop(name, None)
