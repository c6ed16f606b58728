"""Client-local draft cache.

Drafts give editors immediate feedback while durable writes happen later
through the sync engine. The cache is single-writer and keyed by
(page_id, path): saving overwrites any earlier draft for the same key
without looking at it or at the document store.

Drafts file structure (FileDraftCache):
    drafts:
      home:
        hero.headline:
          value: "Ship faster"
          timestamp: "2024-01-15T10:30:00.000Z"
"""

import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

import yaml

from src.content_tree.addressing import parse_path
from src.content_tree.errors import ValidationError

from .errors import DraftCacheError
from .models import DraftEntry

logger = logging.getLogger(__name__)

# page_id -> path -> {"value": ..., "timestamp": ...}
DraftData = Dict[str, Dict[str, Dict[str, str]]]


def utc_timestamp() -> datetime:
    return datetime.now(timezone.utc)


class DraftCache(ABC):
    """Pending edits per (page_id, path), last write wins."""

    def __init__(self, clock: Callable[[], datetime] = utc_timestamp):
        self._clock = clock

    @abstractmethod
    def _read(self) -> DraftData:
        """Load all drafts."""

    @abstractmethod
    def _write(self, data: DraftData) -> None:
        """Persist all drafts."""

    def _now(self) -> str:
        return self._clock().isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def save(self, page_id: str, path: str, value: str) -> DraftEntry:
        """Record a draft, replacing any earlier draft for the same key."""
        if not isinstance(value, str):
            raise ValidationError(f"must be a string, got {type(value).__name__}", "value")
        parse_path(path)
        entry = DraftEntry(page_id=page_id, path=path, value=value, timestamp=self._now())

        data = self._read()
        data.setdefault(page_id, {})[path] = {"value": value, "timestamp": entry.timestamp}
        self._write(data)

        logger.debug(f"Saved draft {page_id}#{path}")
        return entry

    def get(self, page_id: str, path: str) -> Optional[DraftEntry]:
        stored = self._read().get(page_id, {}).get(path)
        if stored is None:
            return None
        return DraftEntry(page_id, path, stored["value"], stored["timestamp"])

    def enumerate(self, page_id: str) -> List[DraftEntry]:
        """List a page's pending drafts, oldest first."""
        entries = [
            DraftEntry(page_id, path, stored["value"], stored["timestamp"])
            for path, stored in self._read().get(page_id, {}).items()
        ]
        return sorted(entries, key=lambda entry: (entry.timestamp, entry.path))

    def clear(self, page_id: str, path: Optional[str] = None) -> int:
        """Remove one draft, or every draft of a page when path is None.

        Returns:
            Number of drafts removed
        """
        data = self._read()
        page_drafts = data.get(page_id)
        if not page_drafts:
            return 0

        if path is None:
            removed = len(page_drafts)
            del data[page_id]
        elif path in page_drafts:
            removed = 1
            del page_drafts[path]
            if not page_drafts:
                del data[page_id]
        else:
            return 0

        self._write(data)
        logger.debug(f"Cleared {removed} draft(s) for page {page_id}")
        return removed

    def count(self, page_id: str) -> int:
        return len(self._read().get(page_id, {}))

    def pages(self) -> List[str]:
        """List pages that have pending drafts."""
        return sorted(page_id for page_id, drafts in self._read().items() if drafts)


class InMemoryDraftCache(DraftCache):
    """Draft cache held in process memory."""

    def __init__(self, clock: Callable[[], datetime] = utc_timestamp):
        super().__init__(clock)
        self._data: DraftData = {}

    def _read(self) -> DraftData:
        return {page_id: {path: dict(stored) for path, stored in drafts.items()}
                for page_id, drafts in self._data.items()}

    def _write(self, data: DraftData) -> None:
        self._data = data


class FileDraftCache(DraftCache):
    """Draft cache persisted to a local YAML file.

    A missing or empty file is an empty cache. A malformed file raises
    DraftCacheError rather than silently discarding drafts.
    """

    DEFAULT_DRAFTS_FILE = '.microtext/drafts.yaml'

    def __init__(self, cache_path: str = DEFAULT_DRAFTS_FILE, clock: Callable[[], datetime] = utc_timestamp):
        super().__init__(clock)
        self.cache_path = cache_path

    def _read(self) -> DraftData:
        try:
            with open(self.cache_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise DraftCacheError(self.cache_path, f"Failed to read: {e}")

        if not content.strip():
            return {}

        try:
            loaded = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DraftCacheError(self.cache_path, f"Invalid YAML syntax: {str(e)}")

        if loaded is None:
            return {}
        if not isinstance(loaded, dict) or not isinstance(loaded.get('drafts', {}), dict):
            raise DraftCacheError(self.cache_path, "Expected a mapping with a 'drafts' dictionary")

        return self._validate(loaded.get('drafts') or {})

    def _validate(self, drafts: dict) -> DraftData:
        data: DraftData = {}
        for page_id, page_drafts in drafts.items():
            if not isinstance(page_drafts, dict):
                raise DraftCacheError(
                    self.cache_path, f"Drafts for page '{page_id}' must be a dictionary"
                )
            for path, stored in page_drafts.items():
                if not isinstance(stored, dict) or not isinstance(stored.get('value'), str):
                    raise DraftCacheError(
                        self.cache_path, f"Draft '{page_id}#{path}' must have a string value"
                    )
                data.setdefault(str(page_id), {})[str(path)] = {
                    'value': stored['value'],
                    'timestamp': str(stored.get('timestamp', '')),
                }
        return data

    def _write(self, data: DraftData) -> None:
        yaml_str = yaml.safe_dump(
            {'drafts': data},
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        cache_dir = os.path.dirname(self.cache_path)
        try:
            if cache_dir:
                os.makedirs(cache_dir, exist_ok=True)
            temp_path = f"{self.cache_path}.tmp"
            with open(temp_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
            os.replace(temp_path, self.cache_path)
        except OSError as e:
            raise DraftCacheError(self.cache_path, f"Failed to write: {e}")
