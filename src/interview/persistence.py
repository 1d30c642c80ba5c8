"""
Snapshot persistence.

Two media, both round-tripping the snapshot produced by
``InterviewEngine.get_state()``:

    - StateStore: a JSON file holding ``{key: snapshot}``
    - share tokens: a compact, URL-safe string carried in a ``state``
      query parameter

Every failure (missing file, corrupt JSON, broken token) is logged and
reported as "no saved state" (None / False). Nothing here raises for bad
input, so a damaged snapshot always falls back to a fresh interview.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import zlib
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from interview.config import StorageConfig

logger = logging.getLogger(__name__)

STATE_PARAM = "state"


class StateStore:
    """
    File-backed snapshot storage.

    Args:
        path: JSON file to read and write
        key: Entry name inside the file, so one file can hold several
            interviews
    """

    def __init__(self, path: str | Path, key: str = "interview_state"):
        self.path = Path(path)
        self.key = key

    @classmethod
    def from_config(cls, config: StorageConfig) -> "StateStore":
        return cls(config.state_path, config.state_key)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return data

    def save(self, snapshot: Dict[str, Any]) -> bool:
        """Write the snapshot. Returns False (and logs) on failure."""
        try:
            try:
                data = self._read_all()
            except (json.JSONDecodeError, ValueError):
                data = {}
            data[self.key] = snapshot
            self.path.write_text(json.dumps(data), encoding="utf-8")
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to save interview state to %s: %s", self.path, e)
            return False

    def load(self) -> Optional[Dict[str, Any]]:
        """Read the snapshot, or None if there is none or it is unreadable."""
        try:
            snapshot = self._read_all().get(self.key)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.warning("Failed to load interview state from %s: %s", self.path, e)
            return None
        if snapshot is not None and not isinstance(snapshot, dict):
            logger.warning("Ignoring stored interview state of type %s", type(snapshot).__name__)
            return None
        return snapshot

    def clear(self) -> None:
        """Remove the stored snapshot, keeping other keys in the file."""
        try:
            data = self._read_all()
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.warning("Failed to read %s while clearing: %s", self.path, e)
            data = {}
        if self.key not in data:
            return
        del data[self.key]
        try:
            if data:
                self.path.write_text(json.dumps(data), encoding="utf-8")
            else:
                self.path.unlink()
        except OSError as e:
            logger.warning("Failed to clear interview state in %s: %s", self.path, e)


def compress_state(snapshot: Dict[str, Any]) -> str:
    """
    Encode answers, index and history into a URL-safe token.

    ``completed`` is not carried; it is re-derived on the next
    question lookup.
    """
    minimal = {
        "a": snapshot.get("answers", {}),
        "c": snapshot.get("currentQuestionIndex", 0),
        "v": snapshot.get("visitedQuestions", []),
    }
    raw = json.dumps(minimal, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(zlib.compress(raw, 9)).decode("ascii").rstrip("=")


def decompress_state(token: str) -> Optional[Dict[str, Any]]:
    """Decode a share token. Returns None if it is corrupt."""
    try:
        padded = token + "=" * (-len(token) % 4)
        raw = zlib.decompress(base64.urlsafe_b64decode(padded.encode("ascii")))
        minimal = json.loads(raw.decode("utf-8"))
        if not isinstance(minimal, dict):
            raise ValueError("token payload is not an object")
    except (binascii.Error, zlib.error, UnicodeError, ValueError, AttributeError) as e:
        logger.warning("Failed to decompress interview state: %s", e)
        return None

    return {
        "answers": minimal.get("a") or {},
        "currentQuestionIndex": minimal.get("c") or 0,
        "visitedQuestions": minimal.get("v") or [],
    }


def share_url(base_url: str, snapshot: Dict[str, Any]) -> str:
    """``base_url`` with the ``state`` query parameter set to the share token."""
    parts = urlsplit(base_url)
    query = parse_qs(parts.query, keep_blank_values=True)
    query[STATE_PARAM] = [compress_state(snapshot)]
    return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))


def state_from_url(url: str) -> Optional[Dict[str, Any]]:
    """Snapshot carried by a share URL, or None."""
    values = parse_qs(urlsplit(url).query).get(STATE_PARAM)
    if not values:
        return None
    return decompress_state(values[0])
