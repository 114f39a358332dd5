"""
PolicyCache — last-known forbidden-app policy on disk.

Survives restarts and network outages. The file is rewritten in full on
every save via a temp file + os.replace, so a reader never sees a
half-written document.
"""

import json
import os
import tempfile
from pathlib import Path

from .config import log, policy_cache_file
from .errors import StorageError
from .models import Policy


class PolicyCache:

    def __init__(self, path=None):
        self.path = Path(path) if path else policy_cache_file()

    def save(self, policy):
        """Overwrite the cache with ``policy``. Raises StorageError."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create cache dir {self.path.parent}: {e}") from e

        body = json.dumps(policy.to_dict(), indent=2)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=".forbidden_cache-", suffix=".tmp", dir=str(self.path.parent),
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(body)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StorageError(f"Cannot write cache {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

        log.info("Cached %d forbidden apps to %s", len(policy), self.path)

    def load(self):
        """Return the cached Policy, or an empty one if there is no cache yet.

        Raises StorageError when the file exists but is unreadable or corrupt.
        """
        if not self.path.exists():
            return Policy.empty()
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StorageError(f"Cannot read cache {self.path}: {e}") from e
        try:
            # Undecodable bytes are corruption too.
            return Policy.from_dict(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, ValueError, KeyError, TypeError) as e:
            raise StorageError(f"Corrupt cache {self.path}: {e}") from e
