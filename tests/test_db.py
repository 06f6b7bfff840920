import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from vectorpad.stash.db import ItemNotFoundError, StashDB, decode_embedding, encode_embedding
from vectorpad.stash.model import Item, ItemType, Source
from vectorpad.stash.similarity import SimilarityLevel


def _now():
    return datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture
def db(tmp_path):
    database = StashDB(tmp_path / "test.db")
    yield database
    database.close()


def test_insert_and_get(db):
    item = Item(
        id="test-001",
        text="test idea",
        title="Test",
        type=ItemType.INSIGHT,
        project="vectorpad",
        tags=["go", "tui"],
        claim_id="claim-abc",
        source=Source.CLI,
        created=_now(),
    )
    db.insert(item)
    got = db.get("test-001")
    assert got.text == item.text
    assert got.title == item.title
    assert got.type == item.type
    assert got.project == item.project
    assert got.claim_id == item.claim_id
    assert got.tags == ["go", "tui"]
    assert got.created == item.created
    assert got.source == Source.CLI


def test_all(db):
    base = _now()
    for index in range(3):
        db.insert(
            Item(
                id=f"item-{index}",
                text=f"idea {index}",
                source=Source.CLI,
                created=base + timedelta(minutes=index),
            )
        )
    items = db.all()
    assert [item.id for item in items] == ["item-0", "item-1", "item-2"]


def test_delete(db):
    db.insert(Item(id="del-001", text="to delete", source=Source.CLI, created=_now()))
    db.delete("del-001")
    with pytest.raises(ItemNotFoundError):
        db.get("del-001")


def test_get_missing_raises(db):
    with pytest.raises(ItemNotFoundError):
        db.get("missing")


def test_duplicate_insert_raises(db):
    db.insert(Item(id="dup", text="one", source=Source.CLI, created=_now()))
    with pytest.raises(sqlite3.IntegrityError):
        db.insert(Item(id="dup", text="two", source=Source.CLI, created=_now()))


def test_embedding_round_trip(db):
    embedding = [0.1, 0.2, 0.3, -0.5]
    db.insert(
        Item(id="emb-001", text="embedded idea", source=Source.CLI, created=_now(), embedding=embedding)
    )
    got = db.get("emb-001")
    assert len(got.embedding) == len(embedding)
    assert got.embedding == pytest.approx(embedding, rel=1e-6)


def test_find_similar(db):
    now = _now()
    for item_id, text, embedding in [
        ("a", "alpha", [1.0, 0.0, 0.0]),
        ("b", "beta", [0.9, 0.1, 0.0]),
        ("c", "gamma", [0.0, 1.0, 0.0]),
    ]:
        db.insert(Item(id=item_id, text=text, source=Source.CLI, created=now, embedding=embedding))

    results = db.find_similar([1.0, 0.0, 0.0], 0.5, 10)
    assert len(results) >= 2
    assert results[0].item.id == "a"
    assert results[0].level == SimilarityLevel.NEAR_DUPLICATE
    scores = [result.score for result in results]
    assert scores == sorted(scores, reverse=True)
    assert all(score >= 0.5 for score in scores)


def test_find_similar_limit_and_empty_query(db):
    now = _now()
    db.insert(Item(id="a", text="alpha", source=Source.CLI, created=now, embedding=[1.0, 0.0]))
    db.insert(Item(id="b", text="beta", source=Source.CLI, created=now, embedding=[0.9, 0.1]))
    assert len(db.find_similar([1.0, 0.0], 0.0, 1)) == 1
    assert db.find_similar([], 0.0, 10) == []


def test_filter(db):
    now = _now()
    db.insert(Item(id="f1", text="go insight", type=ItemType.INSIGHT, project="vp", source=Source.CLI, created=now))
    db.insert(Item(id="f2", text="py question", type=ItemType.QUESTION, project="cs", source=Source.CLI, created=now))

    assert [item.id for item in db.filter("vp", "", "")] == ["f1"]
    assert [item.id for item in db.filter("", "question", "")] == ["f2"]
    assert [item.id for item in db.filter("", ItemType.INSIGHT, "")] == ["f1"]


def test_filter_by_tag(db):
    now = _now()
    db.insert(Item(id="t1", text="tagged", tags=["go"], source=Source.CLI, created=now))
    db.insert(Item(id="t2", text="other", tags=["rust"], source=Source.CLI, created=now))
    assert [item.id for item in db.filter("", "", "rust")] == ["t2"]


def test_by_claim_id(db):
    now = _now()
    db.insert(Item(id="c1", text="v1", claim_id="claim-x", source=Source.CLI, created=now))
    db.insert(Item(id="c2", text="v2", claim_id="claim-x", source=Source.CLI, created=now + timedelta(minutes=1)))
    db.insert(Item(id="c3", text="other", claim_id="claim-y", source=Source.CLI, created=now))
    items = db.by_claim_id("claim-x")
    assert [item.id for item in items] == ["c1", "c2"]


def test_update_embedding(db):
    db.insert(Item(id="u1", text="no embed", source=Source.CLI, created=_now()))
    db.update_embedding("u1", [0.5, 0.5, 0.5])
    assert db.get("u1").embedding == [0.5, 0.5, 0.5]


def test_counts_and_missing_embeddings(db):
    now = _now()
    db.insert(Item(id="e1", text="with", source=Source.CLI, created=now, embedding=[1.0]))
    db.insert(Item(id="e2", text="without", source=Source.CLI, created=now))
    assert db.count() == 2
    assert db.count_with_embeddings() == 1
    assert [item.id for item in db.items_without_embeddings()] == ["e2"]


def test_cache_similarity_replaces(tmp_path):
    path = tmp_path / "cache.db"
    with StashDB(path) as database:
        database.cache_similarity("a", "b", 0.5)
        database.cache_similarity("a", "b", 0.75)
    conn = sqlite3.connect(path)
    try:
        rows = conn.execute("SELECT id_a, id_b, score FROM similarity_cache").fetchall()
    finally:
        conn.close()
    assert rows == [("a", "b", 0.75)]


def test_migration_idempotent(tmp_path):
    path = tmp_path / "nested" / "migrate.db"
    first = StashDB(path)
    first.insert(Item(id="m1", text="test", source=Source.CLI, created=_now()))
    first.close()

    with StashDB(path) as second:
        assert second.get("m1").text == "test"

    conn = sqlite3.connect(path)
    try:
        versions = conn.execute("SELECT version FROM schema_version").fetchall()
    finally:
        conn.close()
    assert versions == [(1,)]


def test_encode_decode_embedding():
    original = [1.5, -2.3, 0.0, 100.0]
    decoded = decode_embedding(encode_embedding(original))
    assert len(decoded) == len(original)
    assert decoded == pytest.approx(original, rel=1e-6)


def test_encode_embedding_little_endian_float32():
    assert encode_embedding([1.0]) == b"\x00\x00\x80\x3f"
    assert encode_embedding([]) is None


def test_decode_embedding_nil_and_malformed():
    assert decode_embedding(None) == []
    assert decode_embedding(b"\x00\x00\x80") == []