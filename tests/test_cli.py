"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from compgraph.cli import _build_parser, main
from tests._fixtures.project_builder import ProjectBuilder

_APP = """
export function App() {
  const [count, setCount] = useState(0);
  return <Counter count={count} onClick={() => setCount(count + 1)} />;
}

const Counter = ({ count }: { count: number }) => <span>{count}</span>;
"""


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "analyze"])
    assert args.verbose is True
    assert args.command == "analyze"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "src", "--verbose"])
    assert args.verbose is True
    assert args.path == "src"


def test_cli_analyze_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "-o", "out.json", "--rules", "god-component", "-q"])
    assert args.output == Path("out.json")
    assert args.rules == "god-component"
    assert args.quiet is True


def test_cli_serve_defaults() -> None:
    parser = _build_parser()
    args = parser.parse_args(["serve"])
    assert (args.host, args.port) == ("127.0.0.1", 8000)


def test_analyze_prints_json(project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    project_builder.write({"src/App.tsx": _APP})

    main(["analyze", str(project_builder.root), "-q"])

    payload = json.loads(capsys.readouterr().out)
    assert [component["name"] for component in payload["components"]] == ["App", "Counter"]
    assert payload["prop_flows"][0]["target"] == "src/App.tsx#Counter"


def test_analyze_writes_output_file(project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    project_builder.write({"src/App.tsx": _APP})
    target = project_builder.root / "graph.json"

    main(["analyze", str(project_builder.root), "-o", str(target), "--rules", "render-props", "-q"])

    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["patterns"] == []
    assert "Wrote 2 components" in capsys.readouterr().out


def test_analyze_missing_path_exits(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(tmp_path / "nope"), "-q"])

    assert excinfo.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_analyze_unknown_rule_exits(project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    project_builder.write({"src/App.tsx": _APP})

    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(project_builder.root), "--rules", "nonsense", "-q"])

    assert excinfo.value.code == 1
    assert "nonsense" in capsys.readouterr().err


def test_analyze_honours_excludes_of_explicit_config(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project_builder.write(
        {
            "src/App.tsx": _APP,
            "sandbox/Try.tsx": "export const Try = () => <p />;\n",
            "ci.yml": "exclude_paths: [sandbox/]\n",
        }
    )

    main(["analyze", str(project_builder.root), "--config", str(project_builder.root / "ci.yml"), "-q"])

    payload = json.loads(capsys.readouterr().out)
    assert [component["name"] for component in payload["components"]] == ["App", "Counter"]
