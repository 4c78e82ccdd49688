from __future__ import annotations

import json
from pathlib import Path

import pytest

from agentpro import __version__
from agentpro.cli._dispatcher import build_parser, discover_commands, discover_domains, main


def _run_json(capsys: pytest.CaptureFixture[str], *argv: str):
    code = main(list(argv) + ["--json"])
    captured = capsys.readouterr()
    return code, json.loads(captured.out) if captured.out.strip() else None, captured.err


def test_domains_and_commands_are_discovered() -> None:
    assert {"resources", "config"} <= set(discover_domains())
    assert set(discover_commands("resources")) == {
        "install",
        "status",
        "reset",
        "tree",
        "list",
        "stat",
        "open",
        "insert",
        "export",
    }
    assert "show" in discover_commands("config")


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_no_domain_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "usage: agentpro" in capsys.readouterr().out


def test_install_then_warm_start(capsys: pytest.CaptureFixture[str], isolated_user_env: Path) -> None:
    code, first, err = _run_json(capsys, "resources", "install")
    assert code == 0
    assert first["status"] == "success"
    assert first["installed"] is True
    assert first["filesCopied"] == 8
    assert "Activated! 8 resources installed" in err

    code, second, err = _run_json(capsys, "resources", "install")
    assert code == 0
    assert second["installed"] is False
    assert err == ""

    code, forced, _ = _run_json(capsys, "resources", "install", "--force")
    assert forced["installed"] is True

    log_file = isolated_user_env / ".agentpro" / "logs" / "agentpro.log"
    assert "Resources installed to" in log_file.read_text(encoding="utf-8")


def test_status_reports_counts(capsys: pytest.CaptureFixture[str]) -> None:
    code, data, _ = _run_json(capsys, "resources", "status")

    assert code == 0
    assert data["installedVersion"] == __version__
    assert data["current"] is True
    assert data["categories"] == {"agents": 3, "instructions": 2, "prompts": 2, "skills": 1}
    assert data["documents"] == 8


def test_tree_and_category_filter(capsys: pytest.CaptureFixture[str]) -> None:
    code, data, _ = _run_json(capsys, "resources", "tree")
    assert code == 0
    assert [c["label"] for c in data["children"]] == ["agents", "instructions", "prompts", "skills"]
    skills = data["children"][3]
    assert skills["children"][0]["label"] == "code-review"
    assert skills["children"][0]["children"][0]["uri"] == "agentpro:/skills/code-review/SKILL.md"

    code, data, _ = _run_json(capsys, "resources", "tree", "agents")
    assert [c["label"] for c in data["children"]] == [
        "architect.agent.md",
        "debugger.agent.md",
        "test-engineer.agent.md",
    ]


def test_list_is_sorted_pick_list(capsys: pytest.CaptureFixture[str]) -> None:
    code, data, _ = _run_json(capsys, "resources", "list")

    labels = [item["label"] for item in data["resources"]]
    assert code == 0
    assert labels == sorted(labels, key=str.lower)
    assert len(labels) == 8
    assert data["resources"][0]["uri"] == "agentpro:/agents/architect.agent.md"


def test_stat_and_traversal(capsys: pytest.CaptureFixture[str]) -> None:
    code, data, _ = _run_json(capsys, "resources", "stat", "agentpro:/agents/architect.agent.md")
    assert code == 0
    assert data["type"] == "file"
    assert data["size"] > 0

    code, data, err = _run_json(capsys, "resources", "stat", "agentpro:/../state.json")
    assert code == 1
    assert data is None
    error = json.loads(err[err.index("{"):])
    assert error["error"] == "not_found"
    assert error["details"]["code"] == "ResourceNotFoundError"


def test_open_prints_read_only_document(capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["resources", "open", "prompts/explain-code.prompt.md"])
    out = capsys.readouterr().out

    assert code == 0
    assert out.startswith("--- agentpro:/prompts/explain-code.prompt.md [read-only]\n")


def test_open_without_target_non_interactive_is_cancelled(capsys: pytest.CaptureFixture[str]) -> None:
    code, data, _ = _run_json(capsys, "resources", "open")

    assert code == 1
    assert data["status"] == "cancelled"


def test_insert_into_file_at_line(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    target = tmp_path / "notes.md"
    target.write_text("first\nsecond\n", encoding="utf-8")

    code, data, _ = _run_json(
        capsys, "resources", "insert", "agents/debugger.agent.md", "--file", str(target), "--line", "2"
    )

    assert code == 0
    assert data["status"] == "ok"
    text = target.read_text(encoding="utf-8")
    assert text.startswith("first\n")
    assert text.endswith("second\n")
    assert len(text) == len("first\nsecond\n") + data["characters"]


def test_insert_without_editor_warns(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    code, data, err = _run_json(capsys, "resources", "insert", "agents/debugger.agent.md")

    assert code == 1
    assert data["status"] == "warning"
    assert "[warning] No active editor" in err


def test_export_requires_trust(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    project = tmp_path / "project"
    project.mkdir()

    code, data, _ = _run_json(capsys, "resources", "export", "agents/architect.agent.md", "--project", str(project))
    assert code == 1
    assert data["status"] == "warning"
    assert not (project / ".github").exists()

    code, data, _ = _run_json(
        capsys, "resources", "export", "agents/architect.agent.md", "--project", str(project), "--trust"
    )
    assert code == 0
    exported = project / ".github" / "agents" / "architect.agent.md"
    assert exported.is_file()

    exported.write_text("local", encoding="utf-8")
    code, data, _ = _run_json(
        capsys, "resources", "export", "agents/architect.agent.md", "--project", str(project), "--trust"
    )
    assert data["status"] == "cancelled"
    assert exported.read_text(encoding="utf-8") == "local"

    code, data, _ = _run_json(
        capsys, "resources", "export", "agents/architect.agent.md", "--project", str(project), "--trust", "--force"
    )
    assert code == 0
    assert exported.read_text(encoding="utf-8") != "local"


def test_reset_forces_reinstall(capsys: pytest.CaptureFixture[str]) -> None:
    _run_json(capsys, "resources", "install")

    code, data, _ = _run_json(capsys, "resources", "reset", "--purge")
    assert code == 0
    assert data["previousVersion"] == __version__
    assert data["purged"] is True
    assert not Path(data["resourcesPath"]).exists()

    code, data, _ = _run_json(capsys, "resources", "install")
    assert data["installed"] is True
