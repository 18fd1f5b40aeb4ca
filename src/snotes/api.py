"""Provides the main entry point for using the library, :class:`Snotes`"""

from __future__ import annotations
import logging
import os
import os.path
from typing import List, Optional, Union

from snotes.accessors.definitions import QUERY_SUFFIX, TEMPLATE_SUFFIX, QueryAccessor, TemplateAccessor
from snotes.accessors.text import SnoteAccessor
from snotes.cache import SnoteCache, SnoteCollection
from snotes.conf import SnotesConf
from snotes.files import find_available_name, slugify
from snotes.models import Query, RowCountOption, Snote, Tag, Template
from snotes.scanner import ProgressListener, Scanner


logger = logging.getLogger(__name__)


class Error(Exception):
    pass


class Snotes:
    """Main entry point for working programmatically with your collection of notes.

    Generally, you should get an instance using the :meth:`Snotes.for_user` method. Creating an instance scans
    the notes directory; call :meth:`reload` to scan again after changing files yourself.

    .. attribute:: conf
       :type: snotes.conf.SnotesConf

       Typically loaded from the variable ``conf`` in the file ``~/.snotes.conf.py``

    .. attribute:: collection
       :type: snotes.cache.SnoteCollection

    Here's an example of how to use this class. This would print the text of the three last notes tagged
    "journal" from March 2024.

    .. code-block:: python

       from snotes.api import Snotes
       from snotes.models import Query, RowCountOption
       sn = Snotes.for_user()
       query = Query(tag_string='journal', year_filter='2024', month_filter='03')
       for snote in sn.query(query, RowCountOption.MOST_RECENT3):
           print(snote.text)
    """

    @staticmethod
    def for_user() -> Snotes:
        """Creates an instance using the user's ``~/.snotes.conf.py`` file.

        Raises :exc:`Exception` if it does not exist or does not define configuration.
        """
        return SnotesConf.for_user().instantiate()

    def __init__(self, conf: SnotesConf, listener: Optional[ProgressListener] = None):
        self.conf = conf
        self.collection = SnoteCollection()
        self.reload(listener)

    def scanner(self) -> Scanner:
        return Scanner(self.conf.root_path, ignore=self.conf.ignore, encoding=self.conf.encoding)

    def reload(self, listener: Optional[ProgressListener] = None) -> None:
        """Replaces everything in memory with a fresh scan of the notes directory.

        Raises :exc:`snotes.scanner.RootAccessError` if the directory is missing or unreadable.
        """
        self.collection = self.scanner().load_collection(listener)

    @property
    def cache(self) -> SnoteCache:
        return self.collection.snotes

    def query(self, query: Query, row_count: RowCountOption = RowCountOption.ALL) -> List[Snote]:
        return self.cache.execute_query(query, row_count)

    def saved_query(self, name: str) -> Query:
        """Returns the saved query with the given name. Raises :exc:`Error` if there isn't one."""
        query = self.collection.queries.get(name)
        if query is None:
            raise Error(f'No saved query named: {name}')
        return query

    def template(self, name: str) -> Template:
        """Returns the saved template with the given name. Raises :exc:`Error` if there isn't one."""
        template = self.collection.templates.get(name)
        if template is None:
            raise Error(f'No saved template named: {name}')
        return template

    def context(self, template: Union[str, Template]) -> List[Snote]:
        """Returns the notes to show for context when creating a note from the given template."""
        if isinstance(template, str):
            template = self.template(template)
        return template.context_snotes(self.cache)

    def _default_dest(self, template: Optional[Template], snote: Snote) -> str:
        if template:
            save_file = template.save_file(self.conf.root_path)
            if save_file:
                return save_file
            directory = template.save_directory(self.conf.root_path)
        else:
            directory = self.conf.root_path
        name = str(snote.date) if snote.has_date() else 'snote'
        return os.path.join(directory, f'{name}.txt')

    def new(self, template: Union[str, Template, None] = None, text: str = '', dest: str = None) -> str:
        """Creates a new note file and adds it to the cache.

        The note's date and tags come from the template, which may be given by name. Without a template,
        the note is undated. A note that would otherwise have no tags at all is tagged ``untagged``.

        If dest is not given, the template's save location is used, with a file named after the note's date
        (or ``snote.txt`` for undated notes). An existing file is never overwritten; a UUID is added to
        the name instead. Missing parent directories are created.

        Returns the path of the created file.
        """
        if isinstance(template, str):
            template = self.template(template)
        snote = template.create_snote() if template else Snote()
        if not snote.tags():
            # note files need at least one tag
            snote.tag(Tag(None))
        snote.text = text
        dest = os.path.abspath(dest) if dest else self._default_dest(template, snote)
        dest = find_available_name(dest)
        os.makedirs(os.path.dirname(dest), exist_ok=True)
        SnoteAccessor(dest, self.conf.encoding).write(snote)
        snote.source_file = dest
        self.cache.add(snote)
        logger.info(f'Created {dest}')
        return dest

    def remove(self, path: str) -> None:
        """Removes the note from the cache and deletes its file."""
        self.cache.remove(os.path.abspath(path))

    def _definition_path(self, name: str, suffix: str) -> str:
        directory = self.conf.definitions_path()
        os.makedirs(directory, exist_ok=True)
        return os.path.join(directory, f'{slugify(name)}{suffix}')

    def save_query(self, query: Query) -> str:
        """Writes the query to the definitions folder (replacing any previous file for that name).

        Returns the path of the file.
        """
        path = self._definition_path(query.name, QUERY_SUFFIX)
        QueryAccessor(path, self.conf.encoding).write(query)
        self.collection.queries.items[query.name] = query
        return path

    def save_template(self, template: Template) -> str:
        """Writes the template to the definitions folder (replacing any previous file for that name).

        Returns the path of the file.
        """
        path = self._definition_path(template.name, TEMPLATE_SUFFIX)
        TemplateAccessor(path, self.conf.encoding).write(template)
        self.collection.templates.items[template.name] = template
        return path
