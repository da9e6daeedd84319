"""Settings read from the environment (.env is loaded by env_loader)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

STORAGE_BACKENDS = ("memory", "file", "s3")


def _bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    log_level: str = "INFO"
    low_stock_threshold: int = 10
    low_margin_percent: float = 15.0
    storage_backend: str = "memory"
    storage_dir: str = ".dashboard-data"
    s3_bucket: str = ""
    s3_prefix: str = "dashboard/"
    region_name: str = "us-east-1"
    payment_success_rate: float = 0.95
    pro_price: float = 299.0
    seed_sample_data: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        settings = cls(
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            low_stock_threshold=int(env.get("LOW_STOCK_THRESHOLD", "10")),
            low_margin_percent=float(env.get("LOW_MARGIN_PERCENT", "15")),
            storage_backend=env.get("STORAGE_BACKEND", "memory").lower(),
            storage_dir=env.get("STORAGE_DIR", ".dashboard-data"),
            s3_bucket=env.get("S3_BUCKET", ""),
            s3_prefix=env.get("S3_PREFIX", "dashboard/"),
            region_name=env.get("AWS_DEFAULT_REGION", "us-east-1"),
            payment_success_rate=float(env.get("PAYMENT_SUCCESS_RATE", "0.95")),
            pro_price=float(env.get("PRO_PRICE", "299")),
            seed_sample_data=_bool(env.get("SEED_SAMPLE_DATA", "true")),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}")
        if self.storage_backend == "s3" and not self.s3_bucket:
            raise ValueError("S3_BUCKET is required for the s3 storage backend")
        if not 0.0 <= self.payment_success_rate <= 1.0:
            raise ValueError("PAYMENT_SUCCESS_RATE must be between 0 and 1")
        if self.low_stock_threshold < 0:
            raise ValueError("LOW_STOCK_THRESHOLD cannot be negative")
