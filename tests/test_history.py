"""Tests for the daily score history store."""

from __future__ import annotations

import json
import random
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from src.health.history import HistoryStore, generate_placeholder
from src.health.jsonstore import JsonDocument

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(tmp_path: Path) -> HistoryStore:
    return HistoryStore(tmp_path / "data" / "health-history.json")


class TestSave:
    def test_creates_document(self, store: HistoryStore) -> None:
        point = store.save(87, now=NOW)

        assert point.date == "2024-05-20"
        assert point.timestamp == "2024-05-20T12:00:00Z"
        doc = json.loads(store.path.read_text())
        assert doc["history"] == [{"date": "2024-05-20", "score": 87, "timestamp": "2024-05-20T12:00:00Z"}]
        assert doc["lastUpdated"] == "2024-05-20T12:00:00Z"

    def test_same_day_replaces(self, store: HistoryStore) -> None:
        store.save(87, now=NOW)
        store.save(91, now=NOW + timedelta(hours=3))

        history = store.load()
        assert len(history) == 1
        assert history[0].score == 91

    def test_dates_are_utc(self, store: HistoryStore) -> None:
        # 23:30 in UTC-5 is already the next day in UTC
        local = datetime(2024, 5, 20, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert store.save(80, now=local).date == "2024-05-21"

    def test_sorted_ascending(self, store: HistoryStore) -> None:
        for offset, score in ((0, 90), (-2, 70), (-1, 80)):
            store.save(score, now=NOW + timedelta(days=offset))
        assert [p.date for p in store.load()] == ["2024-05-18", "2024-05-19", "2024-05-20"]

    def test_prunes_outside_retention(self, tmp_path: Path) -> None:
        store = HistoryStore(tmp_path / "h.json", retention_days=90)
        store.save(50, now=NOW - timedelta(days=91))
        store.save(60, now=NOW - timedelta(days=90))
        store.save(70, now=NOW)

        assert [p.score for p in store.load()] == [60, 70]

    def test_write_error_propagates(self, store: HistoryStore) -> None:
        with patch.object(JsonDocument, "write", side_effect=OSError("read-only")):
            with pytest.raises(OSError):
                store.save(80, now=NOW)

    def test_concurrent_saves_lose_nothing(self, tmp_path: Path) -> None:
        path = tmp_path / "health-history.json"
        stores = [HistoryStore(path) for _ in range(10)]

        threads = [
            threading.Thread(target=s.save, args=(60 + day,), kwargs={"now": NOW - timedelta(days=day)})
            for day, s in enumerate(stores)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert [p.score for p in HistoryStore(path).load()] == list(range(69, 59, -1))


class TestLoad:
    def test_absent_is_empty(self, store: HistoryStore) -> None:
        assert store.load() == []

    def test_corrupt_is_empty(self, store: HistoryStore) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")
        assert store.load() == []

    def test_corrupt_file_is_overwritten_on_save(self, store: HistoryStore) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text("[]")
        store.save(75, now=NOW)
        assert [p.score for p in store.load()] == [75]

    def test_skips_malformed_points(self, store: HistoryStore) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({"history": [{"date": "2024-05-19"}, {"date": "2024-05-20", "score": 88}]}))
        assert [p.score for p in store.load()] == [88]


class TestQueries:
    def test_get_recent(self, store: HistoryStore) -> None:
        for offset in (0, 5, 29, 30, 31, 60):
            store.save(100 - offset, now=NOW - timedelta(days=offset))

        recent = store.get_recent(30, now=NOW)
        assert [p.date for p in recent] == ["2024-04-20", "2024-04-21", "2024-05-15", "2024-05-20"]
        assert [p.date for p in store.get_recent(7, now=NOW)] == ["2024-05-15", "2024-05-20"]

    def test_latest_score(self, store: HistoryStore) -> None:
        assert store.latest_score(now=NOW) is None
        store.save(70, now=NOW - timedelta(days=1))
        store.save(82, now=NOW)
        assert store.latest_score(now=NOW) == 82

    def test_latest_score_ignores_stale_points(self, store: HistoryStore) -> None:
        store.save(100, now=NOW - timedelta(days=40))
        assert store.latest_score(now=NOW) is None
        assert store.latest_score(days=60, now=NOW) == 100

    def test_latest_score_includes_yesterday(self, store: HistoryStore) -> None:
        store.save(64, now=NOW - timedelta(days=1))
        assert store.latest_score(now=NOW) == 64

    def test_clear(self, store: HistoryStore) -> None:
        store.save(70, now=NOW)
        store.clear()
        assert not store.path.exists()
        assert store.load() == []
        # clearing twice is harmless
        store.clear()


class TestPlaceholder:
    def test_shape(self) -> None:
        points = generate_placeholder(30, now=NOW, rng=random.Random(7))
        assert len(points) == 30
        assert points[0].date == "2024-04-21"
        assert points[-1].date == "2024-05-20"
        assert all(45 <= p.score <= 100 for p in points)

    def test_seeded_is_reproducible(self) -> None:
        a = generate_placeholder(10, now=NOW, rng=random.Random(1))
        b = generate_placeholder(10, now=NOW, rng=random.Random(1))
        assert [p.score for p in a] == [p.score for p in b]

    def test_scores_round_half_up(self) -> None:
        class HalfStep(random.Random):
            def random(self) -> float:
                return 0.0625  # 0.5 after scaling, on top of sin(0) == 0

        (point,) = generate_placeholder(1, now=NOW, rng=HalfStep())
        assert point.score == 71

    def test_dates_are_utc(self) -> None:
        local = datetime(2024, 5, 20, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        points = generate_placeholder(2, now=local, rng=random.Random(3))
        assert [p.date for p in points] == ["2024-05-20", "2024-05-21"]
