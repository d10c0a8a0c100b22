from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator
import yaml

CONFIG_ENV_VAR = "RECLAIM_CONFIG"
CHECKSUMS = ("sha256", "blake3", "xxh64")

class DedupeConfig(BaseModel):
    hard_link_duplicates: bool = False
    symlink_only: bool = False
    dry_run: bool = False
    verbose: bool = False
    same_filesystem_only: bool = False
    remove_empties: bool = True  # reclaim emptied target trees when no link option is set

    @property
    def wants_link(self) -> bool:
        return self.hard_link_duplicates or self.symlink_only

class CompareConfig(BaseModel):
    block_size: int = 32768
    checksum: str = "sha256"

    @field_validator("block_size")
    @classmethod
    def _positive_block(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("block_size must be positive")
        return value

    @field_validator("checksum")
    @classmethod
    def _known_checksum(cls, value: str) -> str:
        value = value.lower()
        if value not in CHECKSUMS:
            raise ValueError(f"checksum must be one of {', '.join(CHECKSUMS)}")
        return value

class LogConfig(BaseModel):
    summary: bool = False

class ReclaimConfig(BaseModel):
    dedupe: DedupeConfig = Field(default_factory=DedupeConfig)
    compare: CompareConfig = Field(default_factory=CompareConfig)
    log: LogConfig = Field(default_factory=LogConfig)

def load_config(path: Optional[Path] = None) -> ReclaimConfig:
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return ReclaimConfig()
        path = Path(env_path)
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return ReclaimConfig(**data)

def apply_overrides(cfg: ReclaimConfig, overrides: Dict[str, Dict[str, Any]]) -> ReclaimConfig:
    """Return a copy of cfg with per-section values replaced.

    ``None`` values are skipped so unset CLI flags leave the file value alone.
    """
    updates: Dict[str, Any] = {}
    for section, values in overrides.items():
        current = getattr(cfg, section)
        changed = {k: v for k, v in values.items() if v is not None}
        if changed:
            updates[section] = current.model_validate({**current.model_dump(), **changed})
    return cfg.model_copy(update=updates)
