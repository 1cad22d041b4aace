from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from ..settings import CacheSettings, cache_settings_from_env

CACHE_VERSION = 1


@dataclass
class MetadataCacheEntry:
    identity: str
    cached_at: str
    size_bytes: int
    cache_version: int = CACHE_VERSION


def _cache_key(identity: str) -> str:
    return hashlib.sha256(identity.encode("utf-8")).hexdigest()


def _cache_paths(root: Path, identity: str) -> tuple[Path, Path]:
    key = _cache_key(identity)
    content = root / key[:2] / f"{key}.json"
    meta = root / key[:2] / f"{key}.meta.json"
    return content, meta


def _load_meta(path: Path) -> MetadataCacheEntry | None:
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    try:
        return MetadataCacheEntry(**payload)
    except TypeError:
        return None


def _is_expired(meta: MetadataCacheEntry, ttl: timedelta) -> bool:
    if ttl == timedelta(0):
        return True
    if meta.cache_version != CACHE_VERSION:
        return True
    try:
        cached_at = datetime.fromisoformat(meta.cached_at.replace("Z", "+00:00"))
    except ValueError:
        return True
    return (datetime.now(timezone.utc) - cached_at) > ttl


class JsonFileCache:
    def __init__(self, settings: CacheSettings | None = None) -> None:
        self.settings = settings or cache_settings_from_env()

    @property
    def enabled(self) -> bool:
        return self.settings.enabled

    def get(self, identity: str) -> Any | None:
        if not self.enabled:
            return None
        content_path, meta_path = _cache_paths(self.settings.root, identity)
        if not content_path.exists():
            return None
        meta = _load_meta(meta_path)
        if meta is None or _is_expired(meta, self.settings.ttl):
            return None
        try:
            return json.loads(content_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None

    def store(self, identity: str, payload: Any) -> None:
        if not self.enabled:
            return
        content_path, meta_path = _cache_paths(self.settings.root, identity)
        text = json.dumps(payload, ensure_ascii=False)
        meta = MetadataCacheEntry(
            identity=identity,
            cached_at=datetime.now(timezone.utc).isoformat(),
            size_bytes=len(text.encode("utf-8")),
        )
        try:
            content_path.parent.mkdir(parents=True, exist_ok=True)
            tmp = content_path.with_suffix(".tmp")
            tmp.write_text(text, encoding="utf-8")
            tmp.replace(content_path)
            meta_path.write_text(json.dumps(asdict(meta), indent=2), encoding="utf-8")
        except OSError:
            return
