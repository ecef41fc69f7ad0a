"""Runtime settings for the productos API, read from PRODUCTOS_* variables."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field

# productos_api/src/ -> parents[1] == productos_api/
DEFAULT_DATA_PATH = Path(__file__).resolve().parents[1] / "data" / "productos.json"

ENV_PREFIX = "PRODUCTOS_"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(3000, ge=1, le=65535)
    data_path: Path = DEFAULT_DATA_PATH
    lock_timeout: float = Field(5.0, gt=0)
    strict_ids: bool = False
    id_field: str = Field("id", min_length=1)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the environment, ignoring unset variables."""

        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)
