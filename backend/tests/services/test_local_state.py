"""Local State — per-instance JSON file survives restarts and tolerates corruption."""

from origen.infrastructure.local_state import LocalStateStore


def test_values_survive_a_new_instance(tmp_path):
    path = tmp_path / "state.json"
    LocalStateStore(path).set("theme", "dark")
    assert LocalStateStore(path).get("theme") == "dark"


def test_missing_file_reads_empty(tmp_path):
    assert LocalStateStore(tmp_path / "nope.json").get("theme") is None


def test_corrupt_file_reads_empty(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    store = LocalStateStore(path)
    assert store.get("theme") is None
    store.set("theme", "light")
    assert LocalStateStore(path).get("theme") == "light"


def test_remove(tmp_path):
    path = tmp_path / "state.json"
    store = LocalStateStore(path)
    store.set("session_user", {"username": "ana"})
    store.remove("session_user")
    assert LocalStateStore(path).get("session_user") is None


def test_no_temp_files_left_behind(tmp_path):
    store = LocalStateStore(tmp_path / "state.json")
    store.set("a", 1)
    store.set("b", 2)
    assert [p.name for p in tmp_path.iterdir()] == ["state.json"]
