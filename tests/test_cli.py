from __future__ import annotations

import json

from iiif_image_cli.cli import main


def test_cli_prints_plan_for_path(capsys):
    assert main(["200", "100", "square/50,/!90/bitonal.png"]) == 0
    payload = json.loads(capsys.readouterr().out)

    assert payload["request"] == "square/50,/!90/bitonal.png"
    assert payload["dimensions"] == {"width": 100, "height": 100}
    assert [d["op"] for d in payload["directives"]] == [
        "extract",
        "resize",
        "flip_horizontal",
        "rotate",
        "threshold",
        "set_output_format",
    ]
    assert payload["directives"][0] == {"op": "extract", "left": 50, "top": 0, "width": 100, "height": 100}


def test_cli_parameter_flags(capsys):
    assert main(["640", "480", "--region", "pct:50,50,50,50", "--quality", "gray", "--format", "webp"]) == 0
    payload = json.loads(capsys.readouterr().out)

    assert payload["request"] == "pct:50,50,50,50/max/0/gray.webp"
    assert payload["directives"][0] == {"op": "extract", "left": 320, "top": 240, "width": 320, "height": 240}


def test_cli_invalid_parameter_exit_code(capsys):
    assert main(["200", "100", "full/max/0/purple.jpg"]) == 2
    assert "Invalid quality: purple" in capsys.readouterr().err


def test_cli_invalid_source_dimensions(capsys):
    assert main(["0", "100"]) == 2
    assert "positive" in capsys.readouterr().err


def test_cli_indent_from_config(capsys, config):
    config.set_setting("cli.indent", 4)
    assert main(["10", "10"]) == 0
    out = capsys.readouterr().out
    assert '\n    "request"' in out


def test_cli_huge_percentage_is_a_clean_rejection(capsys):
    assert main(["200", "100", "--size", "pct:" + "9" * 400]) == 2
    assert "Invalid size" in capsys.readouterr().err
