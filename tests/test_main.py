from __future__ import annotations

import pandas as pd
import yaml

from main import main


def _no_cfg(tmp_path) -> list:
    return ["--config", str(tmp_path / "missing.yaml")]


def test_compute_prints_answers(tmp_path, capsys) -> None:
    rc = main(_no_cfg(tmp_path) + ["-a", "8,11,2,15,18", "-c"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "OPTIONS policy FIFO" in out
    assert "REQUESTS 8,11,2,15,18" in out
    assert "Block:   8  Seek:  0  Rotate: 45  Transfer: 30  Total:  75" in out
    assert "Block:  15  Seek: 80  Rotate:280  Transfer: 30  Total: 390" in out
    assert "TOTALS      Seek: 80  Rotate:505  Transfer:150  Total: 735" in out


def test_without_compute_prints_prompt(tmp_path, capsys) -> None:
    rc = main(_no_cfg(tmp_path) + ["-a", "5", "-l", "17"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "LATE REQUESTS 17" in out
    assert "Use -c to see the answers." in out
    assert "TOTALS" not in out


def test_config_error_exits_with_status_one(tmp_path, capsys) -> None:
    rc = main(_no_cfg(tmp_path) + ["-w", "0"])
    err = capsys.readouterr().err
    assert rc == 1
    assert "scheduling window (0)" in err

    rc = main(_no_cfg(tmp_path) + ["-z", "30,30"])
    assert rc == 1


def test_yaml_config_with_cli_override(tmp_path, capsys) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(
        yaml.safe_dump({"workload": {"addr": "8,11,2,15,18"}, "policies": {"policy": "SSTF"}}),
        encoding="utf-8",
    )
    rc = main(["--config", str(cfg_path), "-p", "SATF", "-c"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "OPTIONS policy SATF" in out
    assert "TOTALS      Seek: 80  Rotate:415  Transfer:150  Total: 645" in out


def test_csv_export(tmp_path, capsys) -> None:
    out_dir = tmp_path / "out"
    rc = main(_no_cfg(tmp_path) + ["-a", "7,30,8", "-p", "SATF", "--out-dir", str(out_dir)])
    capsys.readouterr()
    assert rc == 0
    df = pd.read_csv(out_dir / "request_stats.csv")
    assert list(df["block"]) == [7, 8, 30]
    assert int(df["total"].sum()) == 375


def test_log_file(tmp_path, capsys) -> None:
    log_path = tmp_path / "logs" / "sim.log"
    rc = main(_no_cfg(tmp_path) + ["-a", "0,1", "--log-level", "DEBUG", "--log-file", str(log_path)])
    capsys.readouterr()
    assert rc == 0
    text = log_path.read_text(encoding="utf-8")
    assert "adjacent_sector" in text
    assert "simulation done" in text
