import json

import pytest
from sqlalchemy import text

from geopoints.cli import main
from geopoints.config.settings import SQLConf
from geopoints.mapping.sql import SQLMapper


def test_distance_command(capsys):
    assert main(["distance", "0", "0", "0", "90"]) == 0
    assert float(capsys.readouterr().out) == pytest.approx(9985.1, abs=0.1)


def test_project_command(capsys):
    assert main(["project", "--lat", "50", "--lng", "-4", "--distance", "100", "--bearing", "90"]) == 0
    lat, lng = (float(v) for v in capsys.readouterr().out.split())
    assert lat == pytest.approx(50.0, abs=0.1)
    assert lng > -4.0


def test_nearby_command_reads_configured_table(monkeypatch, tmp_path, capsys):
    db_url = f"sqlite:///{tmp_path / 'points.db'}"
    seed = SQLMapper(SQLConf(driver="sqlite", open_str=db_url, table="points", lat_col="lat", lng_col="lng"))
    with seed.engine.begin() as conn:
        conn.execute(text("CREATE TABLE points (name TEXT, lat REAL, lng REAL)"))
        conn.execute(
            text("INSERT INTO points (name, lat, lng) VALUES (:name, :lat, :lng)"),
            [
                {"name": "near", "lat": 51.51, "lng": -0.12},
                {"name": "far", "lat": 48.85, "lng": 2.35},
            ],
        )
    seed.close()

    config = tmp_path / "geo.yml"
    config.write_text(
        f"development:\n  driver: sqlite\n  openStr: {db_url}\n  table: points\n  latCol: lat\n  lngCol: lng\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("GEOPOINTS_SQL_CONFIG", str(config))

    assert main(["nearby", "--lat", "51.5", "--lng", "-0.12", "--radius", "10", "--json"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["name"] for r in rows] == ["near"]


def test_geocode_command_reports_no_match(monkeypatch, capsys):
    monkeypatch.setattr("geopoints.geocoding.nominatim.get_json", lambda *_a, **_k: [])

    assert main(["geocode", "nowhere at all"]) == 1
    assert "no results" in capsys.readouterr().err


def test_reverse_command(monkeypatch, capsys):
    monkeypatch.setattr(
        "geopoints.geocoding.nominatim.get_json",
        lambda *_a, **_k: {"address": {"road": "Downing Street", "city": "London", "country_code": "gb"}},
    )

    assert main(["reverse", "--lat", "51.5034", "--lng", "-0.1276"]) == 0
    assert capsys.readouterr().out.strip() == "Downing Street London gb"


def test_malformed_settings_file_exits_with_error(monkeypatch, tmp_path, capsys):
    settings_file = tmp_path / "settings.yaml"
    settings_file.write_text("app: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("GEOPOINTS_CONFIG_PATH", str(settings_file))

    assert main(["distance", "0", "0", "0", "90"]) == 1
    assert "error:" in capsys.readouterr().err


def test_settings_file_without_sql_block_exits_with_error(monkeypatch, tmp_path, capsys):
    settings_file = tmp_path / "settings.yaml"
    settings_file.write_text("app:\n  log_level: INFO\n", encoding="utf-8")
    monkeypatch.setenv("GEOPOINTS_CONFIG_PATH", str(settings_file))
    monkeypatch.setattr("geopoints.geocoding.nominatim.get_json", lambda *_a, **_k: [{"lat": "1", "lon": "2"}])

    assert main(["--log-level", "WARNING", "geocode", "somewhere"]) == 1
    assert "error:" in capsys.readouterr().err
