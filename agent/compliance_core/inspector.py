"""
ProcessInspector — every process visible to this user at scan time.

Full enumeration, no filtering or caching. Uses psutil so the same code
runs on Windows, macOS and Linux.
"""

import psutil

from .config import log
from .models import ProcessSnapshot


class ProcessInspector:

    def snapshot(self):
        """Return a fresh list of ProcessSnapshot for all running processes."""
        snapshots = []
        try:
            # process_iter skips processes that exit mid-iteration; with an
            # attrs list, AccessDenied fields come back as None.
            for proc in psutil.process_iter(["pid", "name"]):
                info = proc.info
                snapshots.append(ProcessSnapshot(
                    process_id=int(info["pid"]),
                    process_name=info.get("name") or "",
                ))
        except psutil.Error as e:
            log.warning("Process enumeration stopped early after %d processes: %s",
                        len(snapshots), e)
        return snapshots
