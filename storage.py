"""
Key-value blob storage for the tracker.

Each backend stores one string value per key, the way a browser's
localStorage does. Pick one with ``get_storage()``: S3 when ``S3_BUCKET``
is set, a SQL table when ``DATABASE_URL`` is set, JSON files on local disk
otherwise.
"""

from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.exc import SQLAlchemyError

from config import Settings, load_settings
from database import StoredValue, init_db, make_engine, make_session_factory
from errors import StorageReadError, StorageWriteError
from logger import get_logger

logger = get_logger(__name__)


class MemoryStorage:
    """Dict-backed storage; nothing survives the process."""

    def __init__(self, initial: Optional[dict] = None):
        self._items = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class LocalStorage:
    """Stores each key as ``<directory>/<key>.json``."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageWriteError(f"Could not write {path}: {e}") from e


class S3Storage:
    """Stores each key as the object ``<prefix>/<key>.json`` in a bucket."""

    def __init__(self, bucket: str, prefix: str = "expense_tracker", client=None, region: str = "us-east-1"):
        self.bucket = bucket
        self.prefix = prefix
        self.s3 = client or boto3.client("s3", region_name=region)

    def _object_key(self, key: str) -> str:
        return f"{self.prefix}/{key}.json" if self.prefix else f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        object_key = self._object_key(key)
        try:
            obj = self.s3.get_object(Bucket=self.bucket, Key=object_key)
            return obj["Body"].read().decode("utf-8")
        except self.s3.exceptions.NoSuchKey:
            return None
        except (BotoCoreError, ClientError, UnicodeDecodeError) as e:
            raise StorageReadError(f"S3 download error for {object_key}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        object_key = self._object_key(key)
        try:
            self.s3.put_object(
                Bucket=self.bucket,
                Key=object_key,
                Body=value.encode("utf-8"),
                ContentType="application/json",
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageWriteError(f"S3 upload error for {object_key}: {e}") from e


class SqlStorage:
    """Stores each key as a row of the ``kv_store`` table."""

    def __init__(self, url: Optional[str] = None, engine=None):
        if engine is None:
            if not url:
                raise ValueError("SqlStorage needs a database url or an engine")
            engine = make_engine(url)
        self.engine = engine
        init_db(engine)
        self.SessionLocal = make_session_factory(engine)

    def get_item(self, key: str) -> Optional[str]:
        try:
            with self.SessionLocal() as db:
                row = db.get(StoredValue, key)
                return row.value if row is not None else None
        except SQLAlchemyError as e:
            raise StorageReadError(f"Database read error for {key!r}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            with self.SessionLocal() as db:
                row = db.get(StoredValue, key)
                if row is None:
                    db.add(StoredValue(key=key, value=value))
                else:
                    row.value = value
                db.commit()
        except SQLAlchemyError as e:
            raise StorageWriteError(f"Database write error for {key!r}: {e}") from e


def get_storage(settings: Optional[Settings] = None):
    """
    Build the backend selected by the environment.
    """
    settings = settings or load_settings()
    if settings.s3_bucket:
        logger.info(f"Using S3 storage in bucket {settings.s3_bucket}")
        return S3Storage(settings.s3_bucket, prefix=settings.s3_prefix, region=settings.aws_region)
    if settings.database_url:
        logger.info("Using SQL storage")
        return SqlStorage(settings.database_url)
    logger.info(f"Using local storage in {settings.data_dir}")
    return LocalStorage(settings.data_dir)
