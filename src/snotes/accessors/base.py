"""Defines the API for reading and writing individual files.

The most important class is :class:`Accessor`.
"""


class MalformedFileError(Exception):
    """Raised when an :class:`Accessor` is unable to parse a file.

    Scanning treats this as a problem with the one file only: it is logged and the file is skipped.
    """
    def __init__(self, message: str, path: str = None, cause: BaseException = None):
        super().__init__(f'{message} ({path})' if path else message)
        self.message = message
        self.path = path
        self.cause = cause


class Accessor:
    """Base class for accessors, which are responsible for reading and writing supported file types.

    Each instance is for working with a single file, specified to the constructor.

    .. attribute:: path
       :type: str

    .. attribute:: encoding
       :type: str
    """
    def __init__(self, path: str, encoding: str = 'utf-8'):
        self.path = path
        self.encoding = encoding
        self._loaded = False

    def load(self) -> None:
        """Attempts to parse the file. This does not normally need to be called explicitly.

        It will be called by :meth:`read` when necessary.

        May raise :exc:`MalformedFileError` or an IO-related exception.
        """
        try:
            self._load()
        except Exception as e:
            self._loaded = False
            raise e
        self._loaded = True

    def read(self):
        """Returns the object represented by the file.

        This will not reload the file from disk if the instance has previously loaded it.

        May raise :exc:`MalformedFileError` or an IO-related exception.
        """
        if not self._loaded:
            self.load()
        return self._read()

    def write(self, value) -> None:
        """Replaces the file's content with the given object. Parent directories must already exist."""
        self._write(value)
        self._loaded = False

    def _read_text(self) -> str:
        try:
            with open(self.path, 'r', encoding=self.encoding) as file:
                return file.read()
        except UnicodeDecodeError as e:
            raise MalformedFileError('File is not valid text.', self.path, e)

    def _write_text(self, text: str) -> None:
        with open(self.path, 'w', encoding=self.encoding) as file:
            file.write(text)

    def _load(self) -> None:
        """Subclasses should override this instead of :meth:`load`.

        The base class will then track whether load has been called, so that calls to :meth:`read`
        do not result in multiple loads."""
        raise NotImplementedError()

    def _read(self):
        """Subclasses should override this instead of :meth:`read`. The base class ensures :meth:`load` was called."""
        raise NotImplementedError()

    def _write(self, value) -> None:
        raise NotImplementedError()
