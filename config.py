"""
config.py
---------
Settings for the expense tracker, read from the environment (and a
``.env`` file when present).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    storage_key: str = "transactions"
    data_dir: str = "expense_tracker_data"
    s3_bucket: Optional[str] = None
    s3_prefix: str = "expense_tracker"
    aws_region: str = "us-east-1"
    database_url: Optional[str] = None
    currency_symbol: str = "₹"
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        storage_key=os.getenv("TRACKER_STORAGE_KEY", "transactions"),
        data_dir=os.getenv("TRACKER_DATA_DIR", "expense_tracker_data"),
        s3_bucket=os.getenv("S3_BUCKET") or None,
        s3_prefix=os.getenv("S3_PREFIX", "expense_tracker"),
        aws_region=os.getenv("AWS_REGION", "us-east-1"),
        database_url=os.getenv("DATABASE_URL") or None,
        currency_symbol=os.getenv("TRACKER_CURRENCY_SYMBOL", "₹"),
        log_level=os.getenv("TRACKER_LOG_LEVEL", "INFO"),
    )
