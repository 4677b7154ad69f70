import json

import pytest

from expedition_sim.ratings import StrategyRatings, StrategyPerformance, InteractionPerformance


@pytest.fixture
def ratings(tmp_path):
    return StrategyRatings(tmp_path / "results" / "ratings.json")


def _by_name(entries):
    return {e["name"]: e for e in entries}


def test_first_sweep_ranks_from_scratch(ratings):
    entries = ratings.update_ratings([
        StrategyPerformance("Alpha", 10.0, 3, 4),
        StrategyPerformance("Beta", 5.0, 1, 4),
    ], source_label="test sweep")

    alpha, beta = entries
    assert alpha["name"] == "Alpha"
    assert alpha["rating"] == 5.0
    assert alpha["win_rate"] == 75.0
    assert alpha["rating_rank"] == 1
    assert beta["rating"] == 0.0
    assert beta["win_rate"] == 25.0

    data = json.loads(ratings.path.read_text(encoding="utf-8"))
    assert data["source"] == "test sweep"
    assert data["rating_weight"] == 0.5
    assert [s["name"] for s in data["strategies"]] == ["Alpha", "Beta"]
    assert data["strategies"][0]["last_interaction_win_rate"] == 0.0


def test_second_sweep_blends_with_saved_values(ratings):
    ratings.update_ratings([
        StrategyPerformance("Alpha", 10.0, 3, 4),
        StrategyPerformance("Beta", 5.0, 1, 4),
    ])
    entries = _by_name(ratings.update_ratings([
        StrategyPerformance("Alpha", 5.0, 1, 4),
        StrategyPerformance("Beta", 10.0, 3, 4),
    ]))

    assert entries["Alpha"]["rating"] == 2.5
    assert entries["Beta"]["rating"] == 2.5
    assert entries["Alpha"]["win_rate"] == 50.0
    assert entries["Beta"]["win_rate"] == 50.0
    # a parità di rating decide il nome
    assert entries["Alpha"]["rating_rank"] == 1
    assert ratings.load()["Beta"]["rating"] == 2.5


def test_interactions_shift_the_ranking(ratings):
    interactions = {
        "Alpha": InteractionPerformance("Alpha", 2.0, 0.0),
        "Beta": InteractionPerformance("Beta", 12.0, 100.0),
    }
    entries = _by_name(ratings.update_ratings([
        StrategyPerformance("Alpha", 10.0, 2, 2),
        StrategyPerformance("Beta", 8.0, 1, 2),
    ], interactions=interactions, include_interactions=True))

    alpha, beta = entries["Alpha"], entries["Beta"]
    assert alpha["rating"] == 0.0
    assert alpha["win_rate"] == pytest.approx(30.0)
    assert alpha["sweep_win_rate"] == 100.0
    assert alpha["interaction_win_rate"] == 0.0
    assert alpha["rating_rank"] == 2
    assert beta["rating"] == 5.0
    assert beta["win_rate"] == pytest.approx(85.0)
    assert beta["sweep_win_rate"] == 50.0
    assert beta["interaction_win_rate"] == 100.0
    assert beta["rating_rank"] == 1


def test_missing_file_means_no_ratings(ratings):
    assert ratings.load() == {}
    assert ratings.update_ratings([]) == []
    assert not ratings.path.exists()


def test_single_strategy_gets_top_rating(ratings):
    (entry,) = ratings.update_ratings([StrategyPerformance("Solo", 1.0, 0, 3)])
    assert entry["rating"] == 5.0
    assert entry["win_rate"] == 0.0
