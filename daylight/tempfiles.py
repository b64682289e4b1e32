"""Temporary artifact files that are removed on a slow schedule."""

import os
import logging
import tempfile
import threading
from typing import IO, List, Optional

from .utils.exceptions import CreationError

logger = logging.getLogger(__name__)


class ArtifactSet:
    """
    A collection of temporary files that can be removed in bulk.

    Daylight uses this for .ics files, which must be read by a calendar
    application before they can be deleted. Cleanup can race with that
    application; since cleanups are infrequent, event creation is rarer still,
    and calendar apps read an ICS file quickly, a file being removed while it
    is still being read is an accepted risk. Deletion is best effort.

    ``new`` and ``cleanup`` may be called from different threads (the event
    loop and the shutdown path).
    """

    def __init__(self, name_template: str = 'daylight.*.ics', directory: Optional[str] = None):
        """
        Initialize the set.

        Args:
            name_template: File name pattern; the last '*' is replaced by a
                random string
            directory: Where files are created; the system temp dir by default
        """
        self.name_template = name_template
        self.directory = directory
        self._lock = threading.Lock()
        self._files: List[IO] = []

    def _affixes(self):
        prefix, star, suffix = self.name_template.rpartition('*')
        if not star:
            return self.name_template, ''
        return prefix, suffix

    def new(self) -> IO:
        """
        Create a new writable temporary file that belongs to this set.

        The caller writes and closes it; the file stays on disk until the next
        ``cleanup``.

        Returns:
            Open text-mode file object

        Raises:
            CreationError: If the file cannot be created
        """
        prefix, suffix = self._affixes()
        try:
            handle = tempfile.NamedTemporaryFile(
                mode='w',
                encoding='utf-8',
                prefix=prefix,
                suffix=suffix,
                dir=self.directory,
                delete=False
            )
        except OSError as e:
            raise CreationError(f"Error creating temporary file from {self.name_template}: {e}")

        with self._lock:
            self._files.append(handle)
        logger.debug(f"Created temporary file {handle.name}")
        return handle

    def cleanup(self) -> int:
        """
        Remove every file created since the last cleanup.

        Returns:
            Number of files actually removed
        """
        with self._lock:
            files, self._files = self._files, []

        removed = 0
        for handle in files:
            try:
                os.remove(handle.name)
                removed += 1
            except FileNotFoundError:
                # Already consumed and removed by the viewer
                logger.debug(f"Temporary file already gone: {handle.name}")
            except OSError as e:
                logger.debug(f"Could not remove temporary file {handle.name}: {e}")

        if files:
            logger.info(f"Cleaned up {removed} of {len(files)} temporary files")
        return removed

    def paths(self) -> List[str]:
        """Paths of the files currently registered."""
        with self._lock:
            return [handle.name for handle in self._files]

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)
