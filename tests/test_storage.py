"""Tests for the key-value storage backends."""

import io
import json

import pytest
from botocore.exceptions import ClientError

from config import Settings
from database import Base, make_engine
from errors import StorageReadError, StorageWriteError
from storage import LocalStorage, MemoryStorage, S3Storage, SqlStorage, get_storage
from transaction_store import TransactionStore


class FakeS3:
    """Just enough of a boto3 S3 client for S3Storage."""

    class exceptions:
        class NoSuchKey(Exception):
            pass

    def __init__(self, fail_with=None):
        self.objects = {}
        self.fail_with = fail_with

    def get_object(self, Bucket, Key):
        if self.fail_with:
            raise ClientError({"Error": {"Code": self.fail_with, "Message": "Forbidden"}}, "GetObject")
        if (Bucket, Key) not in self.objects:
            raise self.exceptions.NoSuchKey(Key)
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}

    def put_object(self, Bucket, Key, Body, ContentType=None):
        if self.fail_with:
            raise ClientError({"Error": {"Code": self.fail_with, "Message": "Forbidden"}}, "PutObject")
        self.objects[(Bucket, Key)] = Body


def test_memory_storage():
    storage = MemoryStorage({"a": "1"})
    assert storage.get_item("a") == "1"
    assert storage.get_item("b") is None
    storage.set_item("b", "2")
    assert storage.get_item("b") == "2"


# ── Local ─────────────────────────────────────────────────


def test_local_missing_key(tmp_path):
    assert LocalStorage(tmp_path / "data").get_item("transactions") is None


def test_local_write_then_read(tmp_path):
    storage = LocalStorage(tmp_path / "data")
    storage.set_item("transactions", "[]")

    assert (tmp_path / "data" / "transactions.json").read_text(encoding="utf-8") == "[]"
    assert storage.get_item("transactions") == "[]"


def test_local_overwrite(tmp_path):
    storage = LocalStorage(tmp_path)
    storage.set_item("transactions", "[1]")
    storage.set_item("transactions", "[2]")
    assert storage.get_item("transactions") == "[2]"
    assert not (tmp_path / "transactions.json.tmp").exists()


def test_local_read_error(tmp_path):
    (tmp_path / "transactions.json").mkdir()
    with pytest.raises(StorageReadError):
        LocalStorage(tmp_path).get_item("transactions")


def test_local_write_error(tmp_path):
    blocker = tmp_path / "data"
    blocker.write_text("not a directory")
    with pytest.raises(StorageWriteError):
        LocalStorage(blocker).set_item("transactions", "[]")


def test_store_on_local_storage_survives_restart(tmp_path):
    first = TransactionStore(LocalStorage(tmp_path))
    tx = first.add({"type": "expense", "amount": "9.99", "category": "Entertainment", "date": "2024-02-10"})

    second = TransactionStore(LocalStorage(tmp_path))
    assert second.transactions == (tx,)


def test_store_ignores_corrupt_local_file(tmp_path):
    (tmp_path / "transactions.json").write_text("[{oops", encoding="utf-8")
    assert TransactionStore(LocalStorage(tmp_path)).transactions == ()


def test_local_undecodable_bytes_are_a_read_error(tmp_path):
    (tmp_path / "transactions.json").write_bytes(b"\xff\xfe[{]")
    with pytest.raises(StorageReadError):
        LocalStorage(tmp_path).get_item("transactions")


def test_store_ignores_undecodable_local_file(tmp_path):
    (tmp_path / "transactions.json").write_bytes(b"\xff\xfe[{]")
    assert TransactionStore(LocalStorage(tmp_path)).transactions == ()


# ── S3 ────────────────────────────────────────────────────


def test_s3_missing_key():
    assert S3Storage("bucket", client=FakeS3()).get_item("transactions") is None


def test_s3_write_then_read():
    s3 = FakeS3()
    storage = S3Storage("bucket", prefix="tracker", client=s3)
    storage.set_item("transactions", '[{"id": 1}]')

    assert ("bucket", "tracker/transactions.json") in s3.objects
    assert storage.get_item("transactions") == '[{"id": 1}]'


def test_s3_without_prefix():
    s3 = FakeS3()
    S3Storage("bucket", prefix="", client=s3).set_item("transactions", "[]")
    assert ("bucket", "transactions.json") in s3.objects


def test_s3_errors():
    storage = S3Storage("bucket", client=FakeS3(fail_with="AccessDenied"))
    with pytest.raises(StorageReadError):
        storage.get_item("transactions")
    with pytest.raises(StorageWriteError):
        storage.set_item("transactions", "[]")


def test_store_ignores_undecodable_s3_object():
    s3 = FakeS3()
    s3.objects[("bucket", "tracker/transactions.json")] = b"\xff\xfe"
    storage = S3Storage("bucket", prefix="tracker", client=s3)

    with pytest.raises(StorageReadError):
        storage.get_item("transactions")
    assert TransactionStore(storage).transactions == ()


def test_store_write_failure_on_s3_is_logged_not_raised():
    store = TransactionStore(S3Storage("bucket", client=FakeS3(fail_with="AccessDenied")))
    assert store.transactions == ()
    store.add({"type": "income", "amount": "1", "category": "Salary", "date": "2024-01-01"})
    assert store.last_write_ok is False


# ── SQL ───────────────────────────────────────────────────


def test_sql_requires_url_or_engine():
    with pytest.raises(ValueError):
        SqlStorage()


def test_sql_write_then_read(tmp_path):
    storage = SqlStorage(f"sqlite:///{tmp_path / 'kv.db'}")
    assert storage.get_item("transactions") is None

    storage.set_item("transactions", "[]")
    storage.set_item("transactions", '[{"id": 2}]')

    assert storage.get_item("transactions") == '[{"id": 2}]'
    assert SqlStorage(f"sqlite:///{tmp_path / 'kv.db'}").get_item("transactions") == '[{"id": 2}]'


def test_sql_errors(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'kv.db'}")
    storage = SqlStorage(engine=engine)
    Base.metadata.drop_all(bind=engine)

    with pytest.raises(StorageReadError):
        storage.get_item("transactions")
    with pytest.raises(StorageWriteError):
        storage.set_item("transactions", "[]")


def test_store_on_sql_storage_round_trip(tmp_path):
    url = f"sqlite:///{tmp_path / 'kv.db'}"
    store = TransactionStore(SqlStorage(url))
    store.add({"type": "expense", "amount": "30", "category": "Utilities", "date": "2024-01-03"})
    store.add({"type": "income", "amount": "500", "category": "Salary", "date": "2024-01-04"})

    reloaded = TransactionStore(SqlStorage(url))
    assert reloaded.transactions == store.transactions
    assert [t["amount"] for t in json.loads(reloaded.storage.get_item("transactions"))] == ["30", "500"]


# ── Factory ───────────────────────────────────────────────


def test_get_storage_defaults_to_local(tmp_path):
    storage = get_storage(Settings(data_dir=str(tmp_path)))
    assert isinstance(storage, LocalStorage)
    assert storage.directory == tmp_path


def test_get_storage_sql(tmp_path):
    storage = get_storage(Settings(database_url=f"sqlite:///{tmp_path / 'kv.db'}"))
    assert isinstance(storage, SqlStorage)


def test_get_storage_s3_wins():
    storage = get_storage(Settings(s3_bucket="bucket", s3_prefix="p", database_url="sqlite://"))
    assert isinstance(storage, S3Storage)
    assert storage.bucket == "bucket"
    assert storage.prefix == "p"
