from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Optional, Protocol

try:
    import streamlit as st
except ImportError:  # pragma: no cover - streamlit not available during some tests
    st = None

from supabase import Client, create_client


logger = logging.getLogger(__name__)

DEFAULT_SUPABASE_BUCKET = "ticket-trends"
DATASET_KEY = "dataset"
FILTERS_KEY = "filters"


class StoreConfigError(RuntimeError):
    """Raised when Supabase configuration is missing or invalid."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store, used for tests and when Supabase is off."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._items: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self._items.get(key)

    def set(self, key: str, value: Any) -> None:
        self._items[key] = value

    def delete(self, key: str) -> None:
        self._items.pop(key, None)


class SupabaseStore:
    """Keeps each key as a JSON object in a Supabase storage bucket."""

    def __init__(self, client: Client, bucket: str) -> None:
        self.client = client
        self.bucket = bucket

    @staticmethod
    def _path(key: str) -> str:
        return f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        try:
            response = self.client.storage.from_(self.bucket).download(self._path(key))
        except Exception:
            # Missing objects come back as errors; treat them as empty.
            return None

        try:
            return json.loads(response.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Ignoring corrupt stored object %s", self._path(key))
            return None

    def set(self, key: str, value: Any) -> None:
        data = json.dumps(value, indent=2).encode("utf-8")
        options = {"content-type": "application/json", "upsert": "true"}
        try:
            self.client.storage.from_(self.bucket).upload(self._path(key), data, options)
        except Exception as exc:
            raise RuntimeError(f"Failed to persist {key} to Supabase storage") from exc

    def delete(self, key: str) -> None:
        try:
            self.client.storage.from_(self.bucket).remove([self._path(key)])
        except Exception as exc:
            raise RuntimeError(f"Failed to delete {key} from Supabase storage") from exc


@dataclass
class StoredDataset:
    """An uploaded CSV kept as its raw rows."""

    name: str
    rows: List[Dict[str, Any]] = field(default_factory=list)
    uploaded_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredDataset":
        rows = data.get("rows")
        return cls(
            name=str(data.get("name") or "dataset.csv"),
            rows=list(rows) if isinstance(rows, list) else [],
            uploaded_at=data.get("uploaded_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": self.name, "rows": self.rows}
        if self.uploaded_at:
            payload["uploaded_at"] = self.uploaded_at
        return payload


def load_dataset(store: KeyValueStore) -> Optional[StoredDataset]:
    data = store.get(DATASET_KEY)
    if not isinstance(data, dict):
        return None
    return StoredDataset.from_dict(data)


def save_dataset(store: KeyValueStore, name: str, rows: List[Dict[str, Any]]) -> StoredDataset:
    dataset = StoredDataset(
        name=name,
        rows=rows,
        uploaded_at=datetime.now(timezone.utc).isoformat(),
    )
    store.set(DATASET_KEY, dataset.to_dict())
    return dataset


def clear_dataset(store: KeyValueStore) -> None:
    store.delete(DATASET_KEY)
    store.delete(FILTERS_KEY)


def load_filter_state(store: KeyValueStore) -> Optional[Dict[str, Any]]:
    data = store.get(FILTERS_KEY)
    return data if isinstance(data, dict) else None


def save_filter_state(store: KeyValueStore, state: Dict[str, Any]) -> None:
    store.set(FILTERS_KEY, state)


def _supabase_secrets() -> Dict[str, Any]:
    if st is None:
        return {}
    try:
        return dict(st.secrets.get("supabase", {}))
    except Exception:
        return {}


def _config_value(env_key: str, secret_key: str, default: Optional[str] = None) -> str:
    secrets = _supabase_secrets()
    if secret_key in secrets and secrets[secret_key]:
        return str(secrets[secret_key])

    value = os.getenv(env_key)
    if value:
        return value

    if default is not None:
        return default

    raise StoreConfigError(
        f"Supabase configuration missing. Set environment variable {env_key} or add '{secret_key}' to st.secrets['supabase']."
    )


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in {"1", "true", "yes"}
    return False


def supabase_disabled() -> bool:
    if _flag(_supabase_secrets().get("disable")):
        return True
    return _flag(os.getenv("SUPABASE_DISABLE"))


@lru_cache(maxsize=1)
def get_client() -> Client:
    """Initialise and cache the Supabase client."""

    url = _config_value("SUPABASE_URL", "url")
    key = _config_value("SUPABASE_ANON_KEY", "anon_key")
    try:
        return create_client(url, key)
    except Exception as exc:
        raise StoreConfigError("Unable to initialise Supabase client") from exc


def get_bucket_name() -> str:
    return _config_value("SUPABASE_BUCKET", "bucket", DEFAULT_SUPABASE_BUCKET)


def get_store() -> KeyValueStore:
    """Supabase-backed store, or an in-memory one when Supabase is off."""
    if supabase_disabled():
        return MemoryStore()
    try:
        return SupabaseStore(get_client(), get_bucket_name())
    except StoreConfigError as exc:
        logger.warning("Falling back to in-memory storage: %s", exc)
        return MemoryStore()
