import json
from token_service.seed_scripts.init_store import init_store, main
from token_service.tokens.store import TokenStore


def test_init_store_creates_loadable_empty_store(tmp_path):
    path = tmp_path / "livenet_t.json"
    assert init_store(path) is True
    assert json.loads(path.read_text()) == {}
    assert len(TokenStore.from_file(path)) == 0


def test_init_store_keeps_existing_file(tmp_path):
    path = tmp_path / "livenet_t.json"
    path.write_text('{"1": {"id": 1, "value": "keep"}}')
    assert init_store(path) is False
    assert "keep" in path.read_text()


def test_main_force_overwrites(tmp_path):
    path = tmp_path / "livenet_t.json"
    path.write_text("garbage")
    assert main(["--path", str(path), "--force"]) == 0
    assert json.loads(path.read_text()) == {}


def test_main_reports_write_failure(tmp_path):
    assert main(["--path", str(tmp_path / "missing-dir" / "t.json")]) == 1
