"""Tests for the application wiring and command line."""

import pytest

from randomwalk import HistoryDB, Logger, RandomWalkApp, WalkPoint, make_config
from randomwalk.__main__ import main


def saved_walk(path, ordinals):
    db = HistoryDB(path, logger=Logger(echo=False))
    db.save([WalkPoint(o, 40.0 + o / 100, -74.0) for o in ordinals])
    db.close()


class TestApp:

    def test_run_generates_count_points(self, tmp_path):
        db_path = str(tmp_path / "walk.db")
        config = make_config(db_path=db_path, update_time_interval=0.01)
        app = RandomWalkApp(config, start_location=(40.0, -74.0), seed=3,
                            logger=Logger(echo=False))

        app.run(count=3)

        saved = HistoryDB(db_path, logger=Logger(echo=False))
        points = saved.load()
        saved.close()
        assert len(points) >= 3
        assert [p.ordinal for p in points] == list(range(1, len(points) + 1))

    def test_replay_only(self, tmp_path):
        db_path = str(tmp_path / "walk.db")
        saved_walk(db_path, [1, 2, 3])
        config = make_config(db_path=db_path, replay_time_interval=0.01)
        app = RandomWalkApp(config, logger=Logger(echo=False))

        app.replay()

        assert app.console.status == "Random Walk (replay finished)"


class TestMain:

    def test_reset(self, tmp_path, capsys):
        db_path = str(tmp_path / "walk.db")
        saved_walk(db_path, [1, 2])

        main(["--db", db_path, "--reset"])

        assert "Cleared 2 saved walk points." in capsys.readouterr().out
        db = HistoryDB(db_path, logger=Logger(echo=False))
        assert db.load() is None
        db.close()

    def test_export_gpx(self, tmp_path, capsys):
        db_path = str(tmp_path / "walk.db")
        out = tmp_path / "walk.gpx"
        saved_walk(db_path, [1, 2, 3])

        main(["--db", db_path, "--export-gpx", str(out)])

        assert out.read_text().count("<trkpt ") == 3
        assert "Exported 3 points" in capsys.readouterr().out

    @pytest.mark.parametrize("argv", [
        ["--lat", "40.0"],
        ["--lat", "95", "--lon", "0"],
        ["--interval", "0"],
        ["--reset", "--replay"],
    ])
    def test_invalid_arguments(self, argv):
        with pytest.raises(SystemExit):
            main(argv)
