import json

import pytest

from cli.main import main


def _run(capsys, argv):
    main(argv)
    return json.loads(capsys.readouterr().out)


def test_cli_basic_preset(capsys):
    payload = _run(capsys, ["--preset", "basic", "--inputs", "0.5"])
    assert payload["network"] == "basic"
    assert payload["output"][0] == pytest.approx(0.73516286937, abs=1e-8)
    assert set(payload["layers"]) == {"input", "inner", "output"}


def test_cli_config_file(tmp_path, capsys):
    config = {
        "layers": [
            {"name": "x", "size": 2},
            {"name": "y", "inputs": ["x"], "nodes": [{"weights": {"x": [0.0, 0.0]}}]},
        ]
    }
    path = tmp_path / "net.json"
    path.write_text(json.dumps(config))
    payload = _run(capsys, ["--config", str(path), "--inputs", "1", "2"])
    assert payload["output"] == [0.5]


def test_cli_rejects_wrong_input_length():
    with pytest.raises(SystemExit) as excinfo:
        main(["--preset", "multi_node", "--inputs", "1.0"])
    assert "Incorrect amount of inputs" in str(excinfo.value)


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--list-presets"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.split() == ["basic", "diamond", "multi_node"]


def test_cli_ranks_word_vectors(tmp_path, capsys):
    path = tmp_path / "vectors.txt"
    path.write_text("target 1 1\nfar -1 -1\nclose-ish -1 1\nsame 1 1\n", encoding="utf-8")
    payload = _run(capsys, ["--vectors", str(path), "--word", "target", "--top", "2"])
    assert [w for w, _ in payload["neighbours"]] == ["same", "close-ish"]

    with pytest.raises(SystemExit):
        main(["--vectors", str(path), "--word", "missing"])


def test_cli_reports_bad_config_files(tmp_path):
    text_path = tmp_path / "net.txt"
    text_path.write_text("{}")
    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(text_path)])
    assert "Unsupported network file type" in str(excinfo.value)

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path / "missing.json")])
    assert str(excinfo.value).startswith("error:")

    list_path = tmp_path / "list.json"
    list_path.write_text("[1, 2]")
    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(list_path)])
    assert "must decode to a mapping" in str(excinfo.value)


def test_cli_rejects_unknown_log_level():
    with pytest.raises(SystemExit) as excinfo:
        main(["--preset", "basic", "--inputs", "0.5", "--log-level", "chatty"])
    assert "unknown log level" in str(excinfo.value)
