import json
import threading
from concurrent.futures import ThreadPoolExecutor
import pytest
from token_service.tokens import persistence
from token_service.tokens.exceptions import PersistenceError, StartupError, TokenExistsError, TokenNotFoundError
from token_service.tokens.generator import TokenGenerator
from token_service.tokens.store import TokenStore

generator = TokenGenerator()


@pytest.fixture
def store(store_path):
    return TokenStore.from_file(store_path)


@pytest.fixture
def save_calls(monkeypatch):
    calls = []
    real_save = persistence.save_tokens

    def counting_save(path, tokens, atomic=True):
        calls.append(dict(tokens))
        real_save(path, tokens, atomic=atomic)

    monkeypatch.setattr(persistence, "save_tokens", counting_save)
    return calls


def test_from_file_missing(tmp_path):
    with pytest.raises(StartupError):
        TokenStore.from_file(tmp_path / "absent.json")


def test_primitives_do_not_persist(store, store_path, save_calls):
    token = generator.generate()
    store.insert(5, token)
    assert store.get(5) == token
    assert 5 in store and len(store) == 1

    replacement = generator.generate()
    store.replace(5, replacement)
    assert store.get(5) == replacement

    store.remove(5)
    assert store.get(5) is None
    assert save_calls == []
    assert json.loads(store_path.read_text()) == {}


def test_create_stamps_id_and_persists(store, store_path, save_calls):
    token = store.create(42, generator.generate())

    assert token.id == 42
    assert store.get(42) == token
    assert len(save_calls) == 1
    assert persistence.load_tokens(store_path) == store.snapshot()


def test_create_existing_raises_and_keeps_token(store, save_calls):
    original = store.create(1, generator.generate())

    with pytest.raises(TokenExistsError):
        store.create(1, generator.generate())

    assert store.get(1) == original
    assert len(save_calls) == 1


def test_rewrite_replaces_value(store, store_path):
    old = store.create(9, generator.generate())
    new = store.rewrite(9, generator.generate())

    assert new.value != old.value
    assert store.get(9) == new
    assert persistence.load_tokens(store_path)[9] == new


def test_rewrite_absent_makes_no_write(store, save_calls):
    with pytest.raises(TokenNotFoundError):
        store.rewrite(3, generator.generate())
    assert save_calls == []
    assert 3 not in store


def test_delete(store, store_path, save_calls):
    store.create(11, generator.generate())
    store.delete(11)

    assert store.get(11) is None
    assert len(save_calls) == 2
    assert persistence.load_tokens(store_path) == {}


def test_delete_absent_makes_no_write(store, store_path, save_calls):
    before = store_path.read_text()
    with pytest.raises(TokenNotFoundError):
        store.delete(11)
    assert save_calls == []
    assert store_path.read_text() == before


def test_failed_save_rolls_back_every_mutation(store, monkeypatch):
    kept = store.create(1, generator.generate())

    def broken_save(path, tokens, atomic=True):
        raise PersistenceError()

    monkeypatch.setattr(persistence, "save_tokens", broken_save)

    with pytest.raises(PersistenceError):
        store.create(2, generator.generate())
    with pytest.raises(PersistenceError):
        store.rewrite(1, generator.generate())
    with pytest.raises(PersistenceError):
        store.delete(1)

    assert store.snapshot() == {1: kept}


def test_non_atomic_store_writes_in_place(store_path):
    store = TokenStore.from_file(store_path, atomic=False)
    store.create(4, generator.generate())
    assert persistence.load_tokens(store_path) == store.snapshot()


def test_concurrent_create_same_id_has_single_winner(store, store_path):
    workers = 16
    barrier = threading.Barrier(workers)

    def attempt(_):
        barrier.wait()
        try:
            return store.create(77, generator.generate())
        except TokenExistsError:
            return None

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(attempt, range(workers)))

    winners = [r for r in results if r is not None]
    assert len(winners) == 1
    assert store.get(77) == winners[0]
    assert persistence.load_tokens(store_path) == {77: winners[0]}


def test_concurrent_creates_different_ids_are_all_persisted(store, store_path):
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda uid: store.create(uid, generator.generate()), range(40)))

    assert len(store) == 40
    assert persistence.load_tokens(store_path) == store.snapshot()
