"""Provides the :class:`DelegatingAccessor` class."""

from snotes.accessors.base import Accessor
from snotes.accessors.definitions import QUERY_SUFFIX, TEMPLATE_SUFFIX, QueryAccessor, TemplateAccessor
from snotes.accessors.text import SnoteAccessor


class DelegatingAccessor(Accessor):
    """Responsible for choosing what :class:`snotes.accessors.base.Accessor` subclass to use for a given file.

    This selects an accessor based on the path's file extension, and delegates method calls to that accessor.

    Currently, the mapping is hardcoded:

    * ``.query.yml`` -> :class:`QueryAccessor`
    * ``.template.yml`` -> :class:`TemplateAccessor`
    * ``.txt`` -> :class:`SnoteAccessor`

    Raises :exc:`ValueError` for any other path; use :meth:`supports` to check first.
    """
    def __init__(self, path: str, encoding: str = 'utf-8'):
        super().__init__(path, encoding)
        lower = path.lower()
        if lower.endswith(QUERY_SUFFIX):
            self.accessor = QueryAccessor(path, encoding)
        elif lower.endswith(TEMPLATE_SUFFIX):
            self.accessor = TemplateAccessor(path, encoding)
        elif lower.endswith('.txt'):
            self.accessor = SnoteAccessor(path, encoding)
        else:
            raise ValueError(f'Unsupported file type: {path}')

    @staticmethod
    def supports(path: str) -> bool:
        lower = path.lower()
        return lower.endswith(QUERY_SUFFIX) or lower.endswith(TEMPLATE_SUFFIX) or lower.endswith('.txt')

    def load(self) -> None:
        self.accessor.load()

    def read(self):
        return self.accessor.read()

    def write(self, value) -> None:
        self.accessor.write(value)
