"""Configuration management using Pydantic BaseSettings.

This module provides centralized configuration management with validation,
type safety, and sensible defaults for the duplicate-store engine.

The matching heuristics (threshold, business suffixes, spelling folds) were
tuned on Algerian French/Arabic/English store names and are exposed here so
they can be re-tuned per market without code changes.
"""
import json
from typing import List, Tuple

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_BUSINESS_SUFFIXES = "shop,store,boutique,dz,algeria,algerie"

# Order matters: "ou" is folded before "oo" so "doum" and "dum" collapse.
DEFAULT_TRANSLITERATIONS: Tuple[Tuple[str, str], ...] = (
    ("ou", "u"),
    ("ph", "f"),
    ("ck", "k"),
    ("ee", "i"),
    ("oo", "u"),
)


def _env(name: str, env: str) -> AliasChoices:
    return AliasChoices(name, env)


class Config(BaseSettings):
    """Main configuration class for the engine, catalog and logging."""

    # Matching heuristics
    similarity_threshold: float = Field(
        0.85, validation_alias=_env("similarity_threshold", "DEDUP_SIMILARITY_THRESHOLD"),
        ge=0.0, le=1.0, description="Minimum fuzzy score for a name duplicate")
    business_suffixes: str = Field(
        DEFAULT_BUSINESS_SUFFIXES, validation_alias=_env("business_suffixes", "DEDUP_BUSINESS_SUFFIXES"),
        description="Comma-separated words ignored when comparing names")
    transliterations_json: str = Field(
        "", validation_alias=_env("transliterations_json", "DEDUP_TRANSLITERATIONS_JSON"),
        description="JSON array of [from, to] spelling folds, applied in order")
    transliterator: str = Field(
        "auto", validation_alias=_env("transliterator", "DEDUP_TRANSLITERATOR"),
        description="Script transliteration backend: auto, icu, none")

    # Store catalog
    catalog_backend: str = Field(
        "memory", validation_alias=_env("catalog_backend", "CATALOG_BACKEND"),
        description="Store catalog backend: memory, file, sql")
    catalog_file_path: str = Field(
        "stores.json", validation_alias=_env("catalog_file_path", "CATALOG_FILE_PATH"),
        description="JSON store dump used by the file backend")
    catalog_database_url: str = Field(
        "sqlite:///stores.db", validation_alias=_env("catalog_database_url", "CATALOG_DATABASE_URL"),
        description="SQLAlchemy URL used by the sql backend")

    # Logging Configuration
    log_level: str = Field("INFO", validation_alias=_env("log_level", "LOG_LEVEL"), description="Logging level")
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        validation_alias=_env("log_format", "LOG_FORMAT"), description="Log format")
    max_json_output_length: int = Field(
        1000, validation_alias=_env("max_json_output_length", "MAX_JSON_OUTPUT_LENGTH"),
        ge=100, le=10000, description="Max JSON output length")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    @field_validator('transliterator')
    @classmethod
    def validate_transliterator(cls, v):
        if v.lower() not in ['auto', 'icu', 'none']:
            raise ValueError('transliterator must be "auto", "icu" or "none"')
        return v.lower()

    @field_validator('catalog_backend')
    @classmethod
    def validate_catalog_backend(cls, v):
        if v.lower() not in ['memory', 'file', 'sql']:
            raise ValueError('catalog_backend must be "memory", "file" or "sql"')
        return v.lower()

    @field_validator('log_level')
    @classmethod
    def validate_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Invalid log level: {v}. Valid options: {valid_levels}')
        return v.upper()

    @field_validator('transliterations_json')
    @classmethod
    def validate_transliterations(cls, v):
        if v.strip():
            try:
                pairs = json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f'Invalid JSON in transliterations_json: {e}')
            if not isinstance(pairs, list):
                raise ValueError('transliterations_json must be a JSON array')
            for pair in pairs:
                if not (isinstance(pair, list) and len(pair) == 2
                        and all(isinstance(p, str) for p in pair) and pair[0]):
                    raise ValueError(f'Invalid transliteration pair: {pair!r}')
        return v

    def get_business_suffixes(self) -> List[str]:
        """Parse and return the business suffixes as a list."""
        return [s.strip().lower() for s in self.business_suffixes.split(",") if s.strip()]

    def get_transliterations(self) -> List[Tuple[str, str]]:
        """Parse and return the ordered spelling folds."""
        if not self.transliterations_json.strip():
            return list(DEFAULT_TRANSLITERATIONS)
        return [(src, dst) for src, dst in json.loads(self.transliterations_json)]

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any issues."""
        issues = []

        if self.similarity_threshold < 0.5:
            issues.append("DEDUP_SIMILARITY_THRESHOLD is very low, may report many false duplicates")

        if not self.get_business_suffixes():
            issues.append("DEDUP_BUSINESS_SUFFIXES is empty, store-type words will affect name matching")

        if self.catalog_backend == "file" and not self.catalog_file_path:
            issues.append("CATALOG_FILE_PATH is required for the file catalog backend")

        if self.catalog_backend == "sql" and "://" not in self.catalog_database_url:
            issues.append("CATALOG_DATABASE_URL must be a valid SQLAlchemy URL (dialect://...)")

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration (sanitized)."""
        from storedup.utils.logger import log_info

        log_info("Configuration loaded",
                 similarity_threshold=self.similarity_threshold,
                 business_suffixes=self.get_business_suffixes(),
                 transliterator=self.transliterator,
                 catalog_backend=self.catalog_backend,
                 catalog_database_url=self.catalog_database_url,
                 log_level=self.log_level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config
