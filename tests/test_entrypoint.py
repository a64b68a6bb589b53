import importlib
import os
import sys
from types import SimpleNamespace

import pytest

from scriptutils import (
    ProcessContext,
    UnknownScriptError,
    conditional_main,
    default_script_path,
    dispatch,
    is_main,
    package_root,
    script_path,
)


def _launched(program_file, *args, interactive=False) -> ProcessContext:
    return ProcessContext(program_file, interactive, list(args))


def test_interactive_session_is_never_main(tmp_path) -> None:
    script = tmp_path / "echo.py"
    script.write_text("")
    assert not is_main(str(script), _launched(str(script), interactive=True))
    assert not is_main(str(script), ProcessContext(None, interactive=False))


def test_same_path_is_main(tmp_path) -> None:
    script = tmp_path / "echo.py"
    script.write_text("")
    assert is_main(str(script), _launched(str(script)))
    assert is_main(script, _launched(str(script)))


def test_launch_through_symlink_is_main(tmp_path) -> None:
    script = tmp_path / "scripts" / "echo.py"
    script.parent.mkdir()
    script.write_text("")
    (tmp_path / "bin").mkdir()
    link = tmp_path / "bin" / "echo"
    link.symlink_to(script)

    assert is_main(str(script), _launched(str(link)))


def test_relative_launch_path_is_made_absolute(monkeypatch, tmp_path) -> None:
    script = tmp_path / "echo.py"
    script.write_text("")
    monkeypatch.chdir(tmp_path)
    assert is_main(str(script), _launched("echo.py"))


def test_other_file_is_not_main(tmp_path) -> None:
    script = tmp_path / "echo.py"
    other = tmp_path / "other.py"
    script.write_text("")
    other.write_text("")
    assert not is_main(str(script), _launched(str(other)))
    assert not is_main(str(tmp_path / "missing.py"), _launched(str(other)))


def test_candidate_is_compared_without_resolving_it(tmp_path) -> None:
    script = tmp_path / "echo.py"
    script.write_text("")
    link = tmp_path / "alias.py"
    link.symlink_to(script)
    assert not is_main(str(link), _launched(str(script)))


def test_conditional_main_runs_once_with_arguments_unchanged() -> None:
    calls = []
    args = ["a", "-q", "b c"]
    context = _launched("/pkg/scripts/echo.run", *args)

    result = conditional_main(
        "/pkg/scripts/echo.run", lambda a: calls.append(a) or "done", context
    )

    assert calls == [args]
    assert result == "done"


def test_conditional_main_skips_interactive_sessions() -> None:
    calls = []
    context = _launched("/pkg/scripts/echo.run", "a", interactive=True)

    result = conditional_main("/pkg/scripts/echo.run", calls.append, context)

    assert calls == []
    assert result is None


def test_conditional_main_as_library_does_nothing(tmp_path) -> None:
    calls = []
    context = _launched(str(tmp_path / "pytest"))
    conditional_main(str(tmp_path / "scripts" / "missing.py"), calls.append, context)
    assert calls == []


def test_conditional_main_explicit_args() -> None:
    calls = []
    context = _launched("/pkg/scripts/echo.run", "from", "argv")
    conditional_main("/pkg/scripts/echo.run", calls.append, context, args=["x"])
    assert calls == [["x"]]


def test_dispatch_picks_launched_script() -> None:
    calls = []
    scripts = {
        "/pkg/scripts/cat.py": lambda args: calls.append(("cat", args)),
        "/pkg/scripts/tail.py": lambda args: calls.append(("tail", args)),
    }
    dispatch(scripts, _launched("/pkg/scripts/tail.py", "f"))
    assert calls == [("tail", ["f"])]


def test_dispatch_without_match() -> None:
    scripts = {"/pkg/scripts/cat.py": lambda args: pytest.fail("should not run")}
    assert dispatch(scripts, _launched("/elsewhere/run.py")) is None
    assert dispatch(scripts, _launched(None, interactive=True), strict=True) is None
    with pytest.raises(UnknownScriptError, match="/elsewhere/run.py"):
        dispatch(scripts, _launched("/elsewhere/run.py"), strict=True)


def test_context_from_process(monkeypatch) -> None:
    monkeypatch.setattr(sys, "argv", ["/pkg/scripts/echo.py", "a", "b"])
    monkeypatch.setattr(sys, "flags", SimpleNamespace(interactive=0))
    monkeypatch.delattr(sys, "ps1", raising=False)

    context = ProcessContext.from_process()

    assert context == ProcessContext("/pkg/scripts/echo.py", False, ["a", "b"])


@pytest.mark.parametrize("argv0", ["", "-c", "-"])
def test_context_without_program_file(monkeypatch, argv0) -> None:
    monkeypatch.setattr(sys, "argv", [argv0])
    monkeypatch.setattr(sys, "flags", SimpleNamespace(interactive=0))
    monkeypatch.delattr(sys, "ps1", raising=False)

    context = ProcessContext.from_process()

    assert context.program_file is None
    assert context.interactive


def test_context_interactive_flags(monkeypatch) -> None:
    monkeypatch.setattr(sys, "argv", ["/pkg/scripts/echo.py"])
    monkeypatch.setattr(sys, "flags", SimpleNamespace(interactive=1))
    monkeypatch.delattr(sys, "ps1", raising=False)
    assert ProcessContext.from_process().interactive

    monkeypatch.setattr(sys, "flags", SimpleNamespace(interactive=0))
    monkeypatch.setattr(sys, "ps1", ">>> ", raising=False)
    assert ProcessContext.from_process().interactive


def test_default_script_path() -> None:
    assert default_script_path("/pkg", "Echo") == "/pkg/scripts/echo.py"
    assert default_script_path("/pkg/src/..", "tools.Echo") == "/pkg/scripts/echo.py"
    assert (
        default_script_path("/pkg", "Echo", scripts_dir="bin", suffix=".run")
        == "/pkg/bin/echo.run"
    )


def test_default_script_path_from_settings(monkeypatch) -> None:
    monkeypatch.setenv("SCRIPTUTILS_SCRIPTS_DIR", "tools")
    monkeypatch.setenv("SCRIPTUTILS_SCRIPT_SUFFIX", "")
    assert default_script_path("/pkg", "Echo") == "/pkg/tools/echo"


def test_package_root_finds_project_marker(monkeypatch, make_project) -> None:
    project = make_project("sutest_marker")
    monkeypatch.syspath_prepend(str(project / "src"))

    module = importlib.import_module("sutest_marker")

    assert package_root(module) == str(project)
    assert package_root("sutest_marker") == str(project)


def test_package_root_without_marker(monkeypatch, make_project) -> None:
    project = make_project("sutest_nomarker", marker=False)
    monkeypatch.syspath_prepend(str(project / "src"))

    assert package_root("sutest_nomarker") == str(project)


def test_package_root_needs_a_file() -> None:
    with pytest.raises(ValueError):
        package_root(sys)


def test_script_path(monkeypatch, make_project) -> None:
    project = make_project("sutest_script")
    monkeypatch.syspath_prepend(str(project / "src"))

    assert script_path("sutest_script") == os.path.join(
        project, "scripts", "sutest_script.py"
    )
    assert script_path("sutest_script", "other.py") == os.path.join(
        project, "scripts", "other.py"
    )
    assert script_path("sutest_script", "x", scripts_dir="bin") == os.path.join(
        project, "bin", "x"
    )


def test_package_root_stops_above_the_package(monkeypatch, tmp_path) -> None:
    outer = tmp_path / "outer"
    libs = outer / "libs"
    package = libs / "vendored" / "sutest_flat"
    package.mkdir(parents=True)
    (outer / "pyproject.toml").write_text('[project]\nname = "outer"\n')
    (package / "__init__.py").write_text("")
    monkeypatch.syspath_prepend(str(libs / "vendored"))
    try:
        assert package_root("sutest_flat") == str(libs)
        assert script_path("sutest_flat") == os.path.join(
            libs, "scripts", "sutest_flat.py"
        )
    finally:
        sys.modules.pop("sutest_flat", None)
