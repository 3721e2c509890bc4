import csv

import pytest

from maze_agents import metrics_simulator
from maze_agents.metrics_simulator import aggregate_results, run_single, write_csv


def test_run_single_row():
    row = run_single(6, 6, agents=2, tie_break="random", seed=3)
    assert row["finished"] is True
    assert row["solved"] == 2
    assert row["stuck"] == 0
    assert row["tie_break"] == "random"
    assert 0 < row["ticks"] <= 2 * 36
    assert row["path_length"] >= 10
    assert row["unique_explored"] <= 36


def test_run_single_is_reproducible():
    a = run_single(8, 8, seed=11)
    b = run_single(8, 8, seed=11)
    for key in ("ticks", "algorithm_steps", "path_length", "backtracks"):
        assert a[key] == b[key]


def test_run_single_respects_max_ticks():
    row = run_single(20, 20, seed=1, max_ticks=5)
    assert row["ticks"] == 5
    assert row["finished"] is False


def test_aggregate_results():
    rows = [run_single(5, 5, seed=s) for s in range(4)] + [run_single(5, 5, tie_break="random", seed=s) for s in range(2)]
    summary = aggregate_results(rows)
    assert [(s["tie_break"], s["count"]) for s in summary] == [("priority", 4), ("random", 2)]
    first = summary[0]
    ticks = [r["ticks"] for r in rows[:4]]
    assert first["ticks_min"] == min(ticks)
    assert first["ticks_max"] == max(ticks)
    assert first["ticks_avg"] == pytest.approx(sum(ticks) / 4)
    assert first["finished_rate"] == 1


def test_write_csv(tmp_path):
    path = tmp_path / "out" / "rows.csv"
    write_csv(str(path), [{"a": 1, "b": 2}, {"a": 3, "b": 4}])
    with open(path, newline="") as f:
        assert list(csv.DictReader(f)) == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]


def test_write_csv_empty(tmp_path):
    path = tmp_path / "none.csv"
    write_csv(str(path), [])
    assert not path.exists()


def test_main_writes_outputs(tmp_path):
    out_dir = tmp_path / "metrics"
    code = metrics_simulator.main([
        "--runs", "2", "--sizes", "4", "--seed", "5",
        "--out_dir", str(out_dir), "--no_charts",
    ])
    assert code == 0
    with open(out_dir / "raw_results.csv", newline="") as f:
        assert len(list(csv.DictReader(f))) == 4
    with open(out_dir / "summary.csv", newline="") as f:
        assert len(list(csv.DictReader(f))) == 2


def test_plot_metric(tmp_path):
    summary = aggregate_results([run_single(4, 4, seed=0)])
    out = tmp_path / "charts" / "ticks.png"
    metrics_simulator.plot_metric(summary, "ticks_avg", str(out))
    assert out.exists()
