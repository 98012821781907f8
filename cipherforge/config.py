from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    # Plug-in defaults (overridable per call and through init())
    default_mode: str = Field(default="CBC")
    encrypt_input_encoding: str = Field(default="utf8")
    encrypt_output_encoding: str = Field(default="base64")
    decrypt_input_encoding: str = Field(default="base64")
    decrypt_output_encoding: str = Field(default="utf8")
    trim_trailing_zeros_on_decrypt: bool = Field(default=True)

    # Logging (applied by the scripts; library code only creates loggers)
    log_level: str = Field(default="INFO")

    # Reproducibility
    global_seed: int = Field(default=1337)

    # Paths
    project_root: str = Field(default=os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir)))
    runs_dir: str = Field(default="runs")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    def _bool(name: str, default: bool) -> bool:
        v = os.getenv(name)
        if v is None:
            return default
        return v.strip().lower() in {"1", "true", "yes", "y", "on"}

    return Settings(
        default_mode=os.getenv("CIPHERFORGE_DEFAULT_MODE", "CBC"),
        encrypt_input_encoding=os.getenv("CIPHERFORGE_INPUT_ENCODING", "utf8"),
        encrypt_output_encoding=os.getenv("CIPHERFORGE_OUTPUT_ENCODING", "base64"),
        decrypt_input_encoding=os.getenv("CIPHERFORGE_DECRYPT_INPUT_ENCODING", "base64"),
        decrypt_output_encoding=os.getenv("CIPHERFORGE_DECRYPT_OUTPUT_ENCODING", "utf8"),
        trim_trailing_zeros_on_decrypt=_bool("CIPHERFORGE_TRIM_NULLS", True),
        log_level=os.getenv("CIPHERFORGE_LOG_LEVEL", "INFO"),
        global_seed=int(os.getenv("GLOBAL_SEED", "1337")),
        runs_dir=os.getenv("RUNS_DIR", "runs"),
    )
