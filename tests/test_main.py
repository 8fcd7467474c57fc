import io
import json

from notr.main import main


def _run(monkeypatch, capsys, code, argv):
    monkeypatch.setattr("sys.stdin", io.StringIO(code))
    status = main(argv)
    return status, json.loads(capsys.readouterr().out)


def test_main_reads_stdin_and_prints_json(monkeypatch, capsys, cases_source):
    status, output = _run(monkeypatch, capsys, cases_source, ["static"])

    assert status == 0
    assert len(output["errors"]) == 4
    assert output["call_graph"] is not None


def test_main_defaults_to_static_mode(monkeypatch, capsys):
    status, output = _run(monkeypatch, capsys, "def f():\n    return 1\n", [])

    assert status == 0
    assert output["errors"] == []
    assert [node["id"] for node in output["call_graph"]["nodes"]] == ["<string>.f"]


def test_main_with_config_file(monkeypatch, capsys, tmp_path, cases_source):
    config = tmp_path / "notr.json"
    config.write_text(json.dumps({"tree-recursion": False}), encoding="utf-8")

    status, output = _run(monkeypatch, capsys, cases_source, ["realtime", str(config)])

    assert status == 0
    assert output == {"errors": [], "call_graph": None}


def test_main_rejects_invalid_config(monkeypatch, capsys, tmp_path):
    config = tmp_path / "notr.json"
    config.write_text(json.dumps(["tree-recursion"]), encoding="utf-8")

    status, output = _run(monkeypatch, capsys, "x = 1\n", ["static", str(config)])

    assert status == 2
    assert output["errors"][0]["errorType"] == "ConfigError"


def test_main_reports_crash_as_error_entry(monkeypatch, capsys):
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("notr.main.analyze_code", boom)
    status, output = _run(monkeypatch, capsys, "x = 1\n", ["static"])

    assert status == 0
    assert output["errors"][0]["errorType"] == "CoreAnalysisCrash"
