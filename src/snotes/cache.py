"""In-memory indexes of loaded notes and saved definitions.

The most important class is :class:`SnoteCache`. Instances are normally built by :class:`snotes.scanner.Scanner`.
The cache assumes a single writer: don't add or remove notes while another thread is querying.
"""

from dataclasses import dataclass, field
import logging
import os
import os.path
from typing import Dict, Iterable, List, Optional

from snotes.models import DateTag, Query, RowCountOption, Snote, Tag, TagIsh


logger = logging.getLogger(__name__)


def filter_by_tag(snotes: Iterable[Snote], tag: TagIsh) -> List[Snote]:
    """Returns the notes that have the given ordinary tag. Tag values are case-insensitive."""
    return [s for s in snotes if s.has_tag(tag)]


def filter_by_date(snotes: Iterable[Snote], year: Optional[str] = None, month: Optional[str] = None,
                   day: Optional[str] = None) -> List[Snote]:
    """Returns the notes whose date matches every given date component.

    Empty or None components match anything, so with no components at all every dated note matches.
    Undated notes never match.
    """
    year = (year or '').strip()
    month = (month or '').strip()
    day = (day or '').strip()
    result = []
    for snote in snotes:
        if not snote.has_date():
            continue
        ymd = snote.date
        if year and year != ymd.year_str:
            continue
        if month and month != ymd.month_str:
            continue
        if day and day != ymd.day_str:
            continue
        result.append(snote)
    return result


def filter_by_text(snotes: Iterable[Snote], text: Optional[str], match_case: bool = False) -> List[Snote]:
    """Returns the notes whose body contains the given text. Empty or None text matches everything."""
    if text is None or not text.strip():
        return list(snotes)
    if match_case:
        return [s for s in snotes if text in s.text]
    lower = text.lower()
    return [s for s in snotes if lower in s.text.lower()]


class SnoteCache:
    """Holds every loaded :class:`snotes.models.Snote`, keyed by its source file, along with the tags seen on them.

    Methods that return collections always return new lists, so callers can't change the cache by accident.
    """

    def __init__(self):
        self._snotes: Dict[str, Snote] = {}
        self._non_date_tags = set()
        self._date_tags = set()

    def clear(self) -> None:
        """Removes everything from the cache. No files are touched."""
        self._snotes.clear()
        self._non_date_tags.clear()
        self._date_tags.clear()
        logger.info('Snote cache cleared.')

    def add(self, snote: Optional[Snote]) -> None:
        """Adds the note, replacing any existing entry for the same source file.

        Notes without a source file are ignored, since notes are cached by file.
        """
        if snote is None:
            logger.warning('Attempt to add null Snote to cache - ignored.')
            return
        if not snote.source_file:
            logger.warning('Attempt to add Snote with no source file to cache - ignored.')
            return
        if snote.source_file in self._snotes:
            logger.warning(f'Snote cache already contains an entry for file: {snote.source_file}'
                           ' - overwriting existing entry.')
        self._snotes[snote.source_file] = snote
        for tag in snote.tags():
            if isinstance(tag, DateTag):
                self._date_tags.add(tag)
            else:
                self._non_date_tags.add(tag)

    def remove(self, source_file: str) -> None:
        """Removes the entry for the given file from the cache, and deletes the file.

        Tags that are no longer used by any note are not removed from the cache.
        """
        removed = self._snotes.pop(source_file, None)
        if removed is None:
            logger.warning(f'Attempt to remove Snote for file: {source_file} failed - no such entry in cache.')
            return
        logger.info(f'Removed Snote for file: {source_file} from cache.')
        try:
            os.remove(source_file)
        except OSError as e:
            logger.warning(f'Failed to delete Snote source file: {source_file}: {e}')

    def size(self) -> int:
        return len(self._snotes)

    def __len__(self) -> int:
        return len(self._snotes)

    def tag_count(self) -> int:
        return len(self._date_tags) + len(self._non_date_tags)

    def date_tag_count(self) -> int:
        return len(self._date_tags)

    def non_date_tag_count(self) -> int:
        return len(self._non_date_tags)

    def unique_dates(self) -> List[DateTag]:
        return sorted(self._date_tags)

    def years(self) -> List[str]:
        return sorted({t.date.year_str for t in self._date_tags})

    def non_date_tags(self) -> List[Tag]:
        return sorted(self._non_date_tags)

    def all_tags(self) -> List[Tag]:
        """Returns the dates in chronological order, followed by the other tags in alphabetical order."""
        return self.unique_dates() + self.non_date_tags()

    def all_snotes(self) -> List[Snote]:
        """Returns every cached note, sorted by the absolute path of its source file.

        This ordering is what "most recent" means for :class:`snotes.models.RowCountOption`; it is only
        chronological if file paths sort chronologically.
        """
        return sorted(self._snotes.values(), key=lambda s: os.path.abspath(s.source_file))

    def find_by_source_file(self, source_file: str) -> Optional[Snote]:
        return self._snotes.get(source_file)

    def find_by_tag(self, tag: TagIsh) -> List[Snote]:
        return filter_by_tag(self.all_snotes(), tag)

    def find_by_date(self, year: Optional[str] = None, month: Optional[str] = None,
                     day: Optional[str] = None) -> List[Snote]:
        return filter_by_date(self.all_snotes(), year, month, day)

    def find_by_text(self, text: Optional[str], match_case: bool = False) -> List[Snote]:
        return filter_by_text(self.all_snotes(), text, match_case)

    def execute_query(self, query: Query, row_count: RowCountOption = RowCountOption.ALL) -> List[Snote]:
        """Returns the notes matching the query.

        The filters are applied in this order, starting from :meth:`all_snotes`:

        1. If the query names tags, keep notes having *all* of them. Undated notes that survive this step
           are set aside.
        2. Keep only dated notes matching the query's year/month/day (empty components match anything).
        3. Add back the undated notes set aside in step 1.
        4. If the query has a text filter, keep notes whose body contains it.

        A query with no criteria at all returns every note. Finally, unless ``row_count`` is ALL, only the
        last N notes of the result are returned (fewer if fewer were found).
        """
        results = self.all_snotes()
        if not query.is_empty():
            undated_matches = []
            if query.tag_string:
                for tag in query.tags():
                    results = filter_by_tag(results, tag)
                undated_matches = [s for s in results if not s.has_date()]
            results = filter_by_date(results, query.year_filter, query.month_filter, query.day_filter)
            results.extend(undated_matches)
            if query.text_filter:
                results = filter_by_text(results, query.text_filter, query.case_sensitive)

        if row_count.count is None:
            return results
        return results[max(0, len(results) - row_count.count):]


@dataclass
class NamedCache:
    """Holds saved :class:`snotes.models.Query` or :class:`snotes.models.Template` definitions by name."""

    items: Dict[str, object] = field(default_factory=dict)

    def add(self, item) -> None:
        if item.name in self.items:
            logger.warning(f"Definition '{item.name}' already loaded - overwriting existing entry.")
        self.items[item.name] = item

    def get(self, name: str):
        return self.items.get(name)

    def remove(self, name: str) -> None:
        if self.items.pop(name, None) is None:
            logger.warning(f"Attempt to remove definition '{name}' failed - no such entry.")

    def names(self) -> List[str]:
        return sorted(self.items)

    def all(self) -> list:
        return [self.items[n] for n in self.names()]

    def clear(self) -> None:
        self.items.clear()

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class SnoteCollection:
    """Everything loaded from one notes directory."""

    snotes: SnoteCache = field(default_factory=SnoteCache)
    queries: NamedCache = field(default_factory=NamedCache)
    templates: NamedCache = field(default_factory=NamedCache)
