"""Provides the :class:`Scanner` class, which loads a notes directory into memory."""

from concurrent.futures import Future, ThreadPoolExecutor
import logging
import os
import os.path
import time
from typing import Callable, Iterator, List, Optional

from snotes.accessors.base import MalformedFileError
from snotes.accessors.delegating import DelegatingAccessor
from snotes.cache import SnoteCache, SnoteCollection
from snotes.conf import default_ignore
from snotes.models import Query, Snote, Template


logger = logging.getLogger(__name__)


class RootAccessError(OSError):
    """Raised when the directory to scan does not exist or cannot be read."""


class ProgressListener:
    """Receives progress reports from :meth:`Scanner.load_collection`.

    The default implementation ignores everything and never cancels.
    """

    def begin(self, step_count: int) -> None:
        """Called once, with the number of files that will be processed."""

    def update(self, step: int, label: str) -> bool:
        """Called before each file is processed. Return False to stop the scan."""
        return True

    def complete(self) -> None:
        """Called once every file has been processed."""

    def canceled(self) -> None:
        """Called instead of :meth:`complete` if :meth:`update` stopped the scan."""


class Scanner:
    """Walks a directory recursively and loads every note (``.txt``) and definition file into memory.

    A file that cannot be parsed is logged and skipped; only a problem with the root directory itself
    stops the scan. Scanning never modifies any files.

    .. attribute:: root
       :type: str

    .. attribute:: ignore
       :type: Callable[[str, str], bool]

       Called with a parent directory and a file or folder name; entries for which it returns True are skipped,
       along with all of their children.
    """
    def __init__(self, root: str, ignore: Callable[[str, str], bool] = default_ignore, encoding: str = 'utf-8'):
        self.root = root
        self.ignore = ignore
        self.encoding = encoding

    def _paths(self) -> List[str]:
        if not os.path.isdir(self.root):
            raise RootAccessError(f'Notes directory does not exist: {self.root}')
        return sorted(self._paths_in(self.root))

    def _paths_in(self, dirpath: str) -> Iterator[str]:
        try:
            entries = list(os.scandir(dirpath))
        except OSError as e:
            if dirpath == self.root:
                raise RootAccessError(f'Cannot read notes directory: {self.root}') from e
            logger.warning(f'Skipping unreadable directory {dirpath}: {e}')
            return
        for entry in entries:
            if entry.is_symlink():
                continue
            if self.ignore(dirpath, entry.name):
                continue
            if entry.is_dir():
                yield from self._paths_in(entry.path)
            elif DelegatingAccessor.supports(entry.name):
                yield entry.path

    def load_collection(self, listener: Optional[ProgressListener] = None) -> SnoteCollection:
        """Loads all notes and saved definitions under :attr:`root`.

        If the listener cancels, the collection is returned as far as it got.

        Raises :exc:`RootAccessError` if the root directory is missing or unreadable.
        """
        listener = listener or ProgressListener()
        start = time.monotonic()
        collection = SnoteCollection()
        paths = self._paths()
        listener.begin(len(paths))
        for step, path in enumerate(paths):
            if not listener.update(step, os.path.relpath(path, self.root)):
                logger.info(f'Scan of {self.root} canceled after {step} of {len(paths)} files.')
                listener.canceled()
                return collection
            try:
                loaded = DelegatingAccessor(path, self.encoding).read()
            except (MalformedFileError, OSError) as e:
                logger.warning(f'Problem loading file: {path}: {e}')
                continue
            logger.debug(f'Loaded {path}')
            if isinstance(loaded, Snote):
                collection.snotes.add(loaded)
            elif isinstance(loaded, Query):
                collection.queries.add(loaded)
            elif isinstance(loaded, Template):
                collection.templates.add(loaded)

        elapsed = int((time.monotonic() - start) * 1000)
        logger.info(f'All data loaded in {elapsed}ms: {collection.snotes.tag_count()} tags,'
                    f' {collection.snotes.size()} snotes.')
        listener.complete()
        return collection

    def load_snote_cache(self, listener: Optional[ProgressListener] = None) -> SnoteCache:
        """Like :meth:`load_collection`, but returns only the notes."""
        return self.load_collection(listener).snotes

    def start(self, listener: Optional[ProgressListener] = None) -> 'Future[SnoteCollection]':
        """Runs :meth:`load_collection` on a background thread and returns a future for its result."""
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='snotes-scan')
        try:
            return executor.submit(self.load_collection, listener)
        finally:
            executor.shutdown(wait=False)
