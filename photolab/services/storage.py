import os
import re
import time
import uuid

from photolab.config import logger
from photolab.errors import ImageNotFoundError

_HANDLE_RE = re.compile(r"[0-9a-f]{32}")


class TempStorage:
    """Keeps original uploads on disk under random, opaque handles."""
    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, handle: str) -> str:
        if not isinstance(handle, str) or not _HANDLE_RE.fullmatch(handle):
            raise ImageNotFoundError("unknown image handle")
        return os.path.join(self.directory, handle)

    def save(self, data: bytes) -> str:
        handle = uuid.uuid4().hex
        with open(os.path.join(self.directory, handle), "wb") as f:
            f.write(data)
        logger.info("[storage] Saved %s (%d bytes)", handle, len(data))
        return handle

    def load(self, handle: str) -> bytes:
        path = self._path(handle)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError as exc:
            raise ImageNotFoundError("unknown image handle") from exc

    def purge(self, max_age: float) -> int:
        """Remove stored originals older than ``max_age`` seconds; returns how many."""
        cutoff = time.time() - max_age
        removed = 0
        for name in os.listdir(self.directory):
            path = os.path.join(self.directory, name)
            if not _HANDLE_RE.fullmatch(name) or not os.path.isfile(path):
                continue
            try:
                if os.path.getmtime(path) < cutoff:
                    os.remove(path)
                    removed += 1
            except FileNotFoundError:
                # removed by a concurrent purge
                continue
        if removed:
            logger.info("[storage] Purged %d expired upload(s)", removed)
        return removed
