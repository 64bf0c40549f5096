import json

from ghdir.core import paths
from ghdir.core.models import RepositoryCoordinates
from ghdir.repo import cache


def test_load_missing_returns_empty(tmp_path):
    assert cache.load(tmp_path / "nope" / "cache.json") == {}


def test_load_malformed_returns_empty(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("{not json")
    assert cache.load(path) == {}


def test_load_non_object_returns_empty(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("[1, 2]")
    assert cache.load(path) == {}


def test_load_drops_non_string_values(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text(json.dumps({"a/b/main/": '"x"', "bad": 3}))
    assert cache.load(path) == {"a/b/main/": '"x"'}


def test_save_creates_directories_and_round_trips(tmp_path):
    path = tmp_path / "deep" / "dir" / "cache.json"
    assert cache.save({"k": "v"}, path) is True
    assert cache.load(path) == {"k": "v"}


def test_save_failure_is_silent(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    assert cache.save({"k": "v"}, blocker / "cache.json") is False


def test_default_location_uses_ghdir_home(isolated_home):
    assert paths.cache_path() == isolated_home / "cache.json"
    cache.save({"k": "v"})
    assert cache.load() == {"k": "v"}


def test_key_joins_all_coordinates():
    coords = RepositoryCoordinates("o", "r", "b", "x/y")
    assert cache.key_for(coords) == "o/r/b/x/y"
