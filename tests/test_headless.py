import json

from experiments.run_headless import run


def test_headless_run_reports_and_exports(tmp_path):
    out = tmp_path / "stats.json"
    flock, history = run(
        steps=20, n_agents=25, num_neighbors=4, stats_interval=5, seed=1, export_stats=str(out)
    )

    assert flock.tick == 20
    assert [entry["tick"] for entry in history] == [5, 10, 15, 20]
    assert json.loads(out.read_text()) == history


def test_headless_run_is_reproducible():
    _, first = run(steps=10, n_agents=15, stats_interval=10, seed=8)
    _, second = run(steps=10, n_agents=15, stats_interval=10, seed=8)
    assert first == second
