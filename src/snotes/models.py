"""Defines classes for representing notes, their tags, and the queries and templates used to work with them.

The most important classes are :class:`Snote`, :class:`TagList`, :class:`Query` and :class:`Template`.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
import logging
import os.path
import re
from typing import Iterator, List, Optional, Union

from snotes.props import Props


logger = logging.getLogger(__name__)

DATE_RE = re.compile(r'\d{4}-\d{2}-\d{2}', re.ASCII)
DEFAULT_TAG = 'untagged'


class ValidationError(ValueError):
    """Raised when a value given to a :class:`Query` is not acceptable."""


@dataclass(frozen=True, order=True)
class YMDDate:
    """An immutable calendar date that is always written as ``yyyy-MM-dd``.

    Instances always hold a valid date. Use :meth:`parse` to build one from text; bad input
    results in today's date rather than an error.
    """

    value: date

    @classmethod
    def today(cls) -> YMDDate:
        return cls(date.today())

    @classmethod
    def parse(cls, ymd: Optional[str]) -> YMDDate:
        """Returns the date represented by the given ``yyyy-MM-dd`` string.

        If the string is None or is not a valid date in that format, today's date is returned instead
        and a warning is logged.
        """
        if ymd is None:
            return cls.today()
        # impossible days such as 2023-02-30 are rejected, not clamped to the end of the month
        if DATE_RE.fullmatch(ymd):
            try:
                return cls(datetime.strptime(ymd, '%Y-%m-%d').date())
            except ValueError:
                pass
        logger.warning(f"Invalid date string '{ymd}'. Using today's date instead.")
        return cls.today()

    @staticmethod
    def is_valid_ymd(candidate: Optional[str]) -> bool:
        """Reports whether the given string is a real date in ``yyyy-MM-dd`` format."""
        if not candidate or not DATE_RE.fullmatch(candidate):
            return False
        try:
            datetime.strptime(candidate, '%Y-%m-%d')
        except ValueError:
            return False
        return True

    def plus_days(self, days: int) -> YMDDate:
        return YMDDate(self.value + timedelta(days=days))

    def yesterday(self) -> YMDDate:
        return self.plus_days(-1)

    def tomorrow(self) -> YMDDate:
        return self.plus_days(1)

    @property
    def day_name(self) -> str:
        """The full name of the day of the week, in the current locale.

        This is only used for display (see :meth:`Snote.tag_line`), never for tagging.
        """
        return self.value.strftime('%A')

    @property
    def year_str(self) -> str:
        return f'{self.value.year:04d}'

    @property
    def month_str(self) -> str:
        return f'{self.value.month:02d}'

    @property
    def day_str(self) -> str:
        return f'{self.value.day:02d}'

    def __str__(self) -> str:
        return f'{self.year_str}-{self.month_str}-{self.day_str}'


def sanitize_tag(value: Optional[str]) -> str:
    """Returns the form of the given text that is usable as a tag.

    The text is lower-cased and trimmed, and spaces, slashes and '#' are replaced with underscores.
    None or blank text results in ``"untagged"``.
    """
    if value is None or not value.strip():
        return DEFAULT_TAG
    return value.lower().strip().replace(' ', '_').replace('/', '_').replace('\\', '_').replace('#', '_')


class Tag:
    """A label attached to a :class:`Snote` to categorize it.

    Tags are immutable. Two tags are equal when their sanitized values are equal (see :func:`sanitize_tag`),
    and they sort alphabetically by that value.

    .. attribute:: value
       :type: str
    """
    __slots__ = ('_value',)

    def __init__(self, value: Optional[str]):
        self._value = sanitize_tag(value)

    @property
    def value(self) -> str:
        return self._value

    @staticmethod
    def is_date_value(value: Optional[str]) -> bool:
        """Checks whether the given text looks like a ``yyyy-MM-dd`` date."""
        return value is not None and DATE_RE.fullmatch(value) is not None

    def __str__(self) -> str:
        return f'#{self._value}'

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._value!r})'

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __lt__(self, other) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self._value < other._value


class DateTag(Tag):
    """A special :class:`Tag` whose value is always a ``yyyy-MM-dd`` date.

    Invalid or missing input results in today's date, following :meth:`YMDDate.parse`.
    DateTags sort by date.

    .. attribute:: date
       :type: YMDDate
    """
    __slots__ = ('_date',)

    def __init__(self, value: Union[str, YMDDate, DateTag, None] = None):
        if isinstance(value, DateTag):
            ymd = value.date
        elif isinstance(value, YMDDate):
            ymd = value
        else:
            ymd = YMDDate.parse(value)
        super().__init__(str(ymd))
        self._date = ymd

    @property
    def date(self) -> YMDDate:
        return self._date

    def __lt__(self, other) -> bool:
        if isinstance(other, DateTag):
            return self._date < other._date
        return super().__lt__(other)


TagIsh = Union[str, Tag]


def _as_tag(tag: TagIsh) -> Tag:
    return tag if isinstance(tag, Tag) else Tag(tag)


class TagList:
    """The tags attached to a single :class:`Snote`.

    * There is at most one :class:`DateTag`.
    * Adding a value that looks like a date sets the date instead of adding an ordinary tag.
    * Ordinary tags are unique, and are listed alphabetically after the date (if any).
    """

    def __init__(self, date: Optional[YMDDate] = None):
        self._date_tag: Optional[DateTag] = DateTag(date) if date is not None else None
        self._tags = set()

    @property
    def date_tag(self) -> Optional[DateTag]:
        return self._date_tag

    def has_date(self) -> bool:
        return self._date_tag is not None

    def set_date(self, value: Union[str, YMDDate, None]) -> None:
        """Sets the date, replacing any previous one. None removes the date.

        A badly formatted string results in today's date.
        """
        self._date_tag = None if value is None else DateTag(value)

    def set_date_tag(self, tag: Optional[DateTag]) -> None:
        self._date_tag = None if tag is None else DateTag(tag)

    def add_tag(self, tag: TagIsh) -> None:
        """Adds the tag. Dates (as strings or :class:`DateTag`) replace the current date."""
        if isinstance(tag, DateTag):
            self.set_date_tag(tag)
        elif isinstance(tag, str) and Tag.is_date_value(tag):
            self.set_date_tag(DateTag(tag))
        else:
            self._tags.add(_as_tag(tag))

    def remove_tag(self, tag: TagIsh) -> None:
        """Removes the tag if present.

        A :class:`DateTag` only clears the date when it equals the current date. Strings are always treated
        as ordinary tags, even when they look like dates.
        """
        tag = _as_tag(tag)
        if isinstance(tag, DateTag) and tag == self._date_tag:
            self._date_tag = None
        self._tags.discard(tag)

    def has_tag(self, tag: TagIsh) -> bool:
        """Reports whether the given ordinary tag is present. The date is not considered."""
        return _as_tag(tag) in self._tags

    def tags(self) -> List[Tag]:
        """Returns a new list with the date (if any) followed by the other tags in alphabetical order."""
        result = [self._date_tag] if self._date_tag else []
        result.extend(sorted(self._tags))
        return result

    def non_date_tags(self) -> List[Tag]:
        return sorted(self._tags)

    def size(self) -> int:
        return len(self._tags) + (1 if self._date_tag else 0)

    def clear(self) -> None:
        self._date_tag = None
        self._tags.clear()

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.tags())


class Snote:
    """Some text together with the tags that categorize it.

    .. attribute:: source_file
       :type: Optional[str]

       The file this note was loaded from or saved to. Notes without one cannot be cached.
    """

    def __init__(self, text: str = '', source_file: Optional[str] = None):
        self.tag_list = TagList()
        self._text = text or ''
        self.source_file = source_file

    @property
    def text(self) -> str:
        """The body of the note, not including the tag line."""
        return self._text

    @text.setter
    def text(self, value: Optional[str]) -> None:
        self._text = value or ''

    def append(self, text: str) -> None:
        """Appends text without adding a newline."""
        self._text += text

    def newline(self) -> None:
        self._text += '\n'

    def has_text(self) -> bool:
        return bool(self._text.strip())

    def has_date(self) -> bool:
        return self.tag_list.has_date()

    @property
    def date(self) -> Optional[YMDDate]:
        return self.tag_list.date_tag.date if self.tag_list.has_date() else None

    def set_date(self, value: Union[str, YMDDate, None]) -> None:
        self.tag_list.set_date(value)

    def tag(self, tag: TagIsh) -> None:
        self.tag_list.add_tag(tag)

    def untag(self, tag: TagIsh) -> None:
        self.tag_list.remove_tag(tag)

    def has_tag(self, tag: TagIsh) -> bool:
        return self.tag_list.has_tag(tag)

    def tags(self) -> List[Tag]:
        return self.tag_list.tags()

    def non_date_tags(self) -> List[Tag]:
        return self.tag_list.non_date_tags()

    def tag_line(self) -> str:
        """Returns the first line of the note's file, e.g. ``#2024-03-05 (Tuesday) #alpha #beta \\n``."""
        line = ''
        if self.has_date():
            line += f'#{self.date} ({self.date.day_name}) '
        for tag in self.non_date_tags():
            line += f'{tag} '
        return line + '\n'

    def full_content(self) -> str:
        """Returns the complete file content: the tag line, a blank line, and the text."""
        return self.tag_line() + '\n' + self._text

    def __repr__(self) -> str:
        return f'Snote(source_file={self.source_file!r}, tags={self.tags()!r})'


class Query:
    """Criteria for finding notes in a :class:`snotes.cache.SnoteCache`.

    See :meth:`snotes.cache.SnoteCache.execute_query` for how the criteria are combined.

    The year, month and day filters must be empty or exactly 4, 2 and 2 characters long respectively;
    setting anything else raises :exc:`ValidationError`.
    """

    def __init__(self, name: str = 'unnamed query', *, year_filter: str = '', month_filter: str = '',
                 day_filter: str = '', text_filter: str = '', case_sensitive: bool = False, tag_string: str = ''):
        self.name = name
        self.year_filter = year_filter
        self.month_filter = month_filter
        self.day_filter = day_filter
        self.text_filter = text_filter
        self.case_sensitive = case_sensitive
        self.tag_string = tag_string

    @staticmethod
    def _date_part(value: Optional[str], length: int, label: str) -> str:
        if value is None or not value.strip():
            return ''
        if len(value) != length:
            raise ValidationError(f'Invalid {label} filter: {value}')
        return value

    @property
    def year_filter(self) -> str:
        return self._year_filter

    @year_filter.setter
    def year_filter(self, value: Optional[str]) -> None:
        self._year_filter = self._date_part(value, 4, 'year')

    @property
    def month_filter(self) -> str:
        return self._month_filter

    @month_filter.setter
    def month_filter(self, value: Optional[str]) -> None:
        self._month_filter = self._date_part(value, 2, 'month')

    @property
    def day_filter(self) -> str:
        return self._day_filter

    @day_filter.setter
    def day_filter(self, value: Optional[str]) -> None:
        self._day_filter = self._date_part(value, 2, 'day')

    @property
    def text_filter(self) -> str:
        return self._text_filter

    @text_filter.setter
    def text_filter(self, value: Optional[str]) -> None:
        self._text_filter = (value or '').strip()

    @property
    def tag_string(self) -> str:
        """Space-separated tags that matching notes must all have."""
        return self._tag_string

    @tag_string.setter
    def tag_string(self, value: Optional[str]) -> None:
        self._tag_string = (value or '').strip()

    def tags(self) -> List[Tag]:
        """Returns a new list of the tags named in :attr:`tag_string`."""
        return [Tag(t) for t in self._tag_string.split()]

    def set_tags(self, tags: List[Tag]) -> None:
        self._tag_string = ' '.join(t.value for t in tags)

    def has_date_filter(self) -> bool:
        return bool(self._year_filter or self._month_filter or self._day_filter)

    def is_empty(self) -> bool:
        """True if the query has no criteria at all, and therefore matches every note."""
        return not (self._tag_string or self.has_date_filter() or self._text_filter)

    def copy(self) -> Query:
        return Query(self.name, year_filter=self._year_filter, month_filter=self._month_filter,
                     day_filter=self._day_filter, text_filter=self._text_filter,
                     case_sensitive=self.case_sensitive, tag_string=self._tag_string)

    def _fields(self) -> tuple:
        return (self.name, self._year_filter, self._month_filter, self._day_filter, self._text_filter,
                self.case_sensitive, self._tag_string)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Query):
            return NotImplemented
        return self._fields() == other._fields()

    def __repr__(self) -> str:
        return (f'Query(name={self.name!r}, year_filter={self._year_filter!r}, month_filter={self._month_filter!r},'
                f' day_filter={self._day_filter!r}, text_filter={self._text_filter!r},'
                f' case_sensitive={self.case_sensitive!r}, tag_string={self._tag_string!r})')

    def load_from_props(self, props: Props, prefix: str = '') -> None:
        """Replaces this query's settings with those stored under the given key prefix.

        Missing keys get default values. May raise :exc:`ValidationError` for bad stored date filters.
        """
        pfx = prefix or ''
        self.name = props.get_string(f'{pfx}name', self.name)
        self.year_filter = props.get_string(f'{pfx}yearFilter', '')
        self.month_filter = props.get_string(f'{pfx}monthFilter', '')
        self.day_filter = props.get_string(f'{pfx}dayFilter', '')
        self.text_filter = props.get_string(f'{pfx}textFilter', '')
        self.case_sensitive = props.get_bool(f'{pfx}isCaseSensitive', False)
        self.tag_string = props.get_string(f'{pfx}tagString', '')

    def save_to_props(self, props: Props, prefix: str = '') -> None:
        pfx = prefix or ''
        props.set_string(f'{pfx}name', self.name)
        props.set_string(f'{pfx}yearFilter', self._year_filter)
        props.set_string(f'{pfx}monthFilter', self._month_filter)
        props.set_string(f'{pfx}dayFilter', self._day_filter)
        props.set_string(f'{pfx}textFilter', self._text_filter)
        props.set_bool(f'{pfx}isCaseSensitive', self.case_sensitive)
        props.set_string(f'{pfx}tagString', self._tag_string)


class _LabeledEnum(Enum):
    def __new__(cls, label: str, *args):
        obj = object.__new__(cls)
        obj._value_ = label
        return obj

    @property
    def label(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str):
        """Returns the member with the given display label, or None."""
        for option in cls:
            if option.value == label:
                return option
        return None

    @classmethod
    def from_name(cls, name: str, default):
        try:
            return cls[name]
        except KeyError:
            logger.warning(f"Unknown {cls.__name__} '{name}'. Using {default.name} instead.")
            return default


class DateOption(_LabeledEnum):
    """How a :class:`Template` chooses the date of a new note."""
    NONE = 'No date'
    TODAY = 'Today'
    YESTERDAY = 'Yesterday'
    CUSTOM = 'Custom...'


class RowCountOption(_LabeledEnum):
    """How many of the last matching notes to return from a query."""
    ALL = ('All', None)
    MOST_RECENT1 = ('1 most recent', 1)
    MOST_RECENT3 = ('3 most recent', 3)
    MOST_RECENT5 = ('5 most recent', 5)
    MOST_RECENT10 = ('10 most recent', 10)

    def __init__(self, label: str, count: Optional[int]):
        self.count = count


class Template:
    """A starting point for quickly creating a new :class:`Snote`.

    A template supplies the new note's date and tags, optionally a :class:`Query` whose results are shown
    alongside the new note for context, and where the new note should be saved.
    """

    def __init__(self, name: str = 'unnamed template'):
        self._set_defaults(name)

    def _set_defaults(self, name: str) -> None:
        self.name = name
        self.date_option = DateOption.NONE
        self.custom_date: Optional[YMDDate] = None
        self._tags: List[Tag] = []
        self.context_query: Optional[Query] = None
        self.context_row_count = RowCountOption.ALL
        self.use_default_save_location = True
        self._custom_save_path = ''
        self._custom_save_filename = ''

    def has_custom_date(self) -> bool:
        return self.custom_date is not None

    def add_tag(self, tag: TagIsh) -> None:
        tag = _as_tag(tag)
        if tag not in self._tags:
            self._tags.append(tag)

    def remove_tag(self, tag: TagIsh) -> None:
        tag = _as_tag(tag)
        if tag in self._tags:
            self._tags.remove(tag)

    def tags(self) -> List[Tag]:
        return list(self._tags)

    def set_tags_from_string(self, tag_string: Optional[str]) -> None:
        self._tags.clear()
        for token in (tag_string or '').split():
            self.add_tag(token)

    def tags_as_string(self) -> str:
        return ' '.join(t.value for t in self._tags)

    def has_context_query(self) -> bool:
        return self.context_query is not None

    @property
    def custom_save_path(self) -> str:
        return self._custom_save_path

    @custom_save_path.setter
    def custom_save_path(self, value: Optional[str]) -> None:
        self._custom_save_path = (value or '').strip()

    @property
    def custom_save_filename(self) -> str:
        return self._custom_save_filename

    @custom_save_filename.setter
    def custom_save_filename(self, value: Optional[str]) -> None:
        self._custom_save_filename = (value or '').strip()

    def has_custom_save_path(self) -> bool:
        return bool(self._custom_save_path)

    def has_custom_save_filename(self) -> bool:
        return bool(self._custom_save_filename)

    def resolve_date(self, today: Optional[YMDDate] = None) -> Optional[YMDDate]:
        """Returns the date a new note should get, or None for an undated note.

        A CUSTOM option without a custom date falls back to today.
        """
        today = today or YMDDate.today()
        if self.date_option == DateOption.TODAY:
            return today
        if self.date_option == DateOption.YESTERDAY:
            return today.yesterday()
        if self.date_option == DateOption.CUSTOM:
            return self.custom_date or today
        return None

    def create_snote(self) -> Snote:
        """Returns a new, unsaved note with this template's date and tags."""
        snote = Snote()
        snote.set_date(self.resolve_date())
        for tag in self._tags:
            snote.tag(tag)
        return snote

    def context_snotes(self, cache) -> List[Snote]:
        """Runs the context query (if any) against the given :class:`snotes.cache.SnoteCache`."""
        if not self.context_query:
            return []
        return cache.execute_query(self.context_query, self.context_row_count)

    def save_directory(self, data_dir: str) -> str:
        """Returns the directory new notes should be saved in.

        The custom save path is only used while :attr:`use_default_save_location` is off; turning the flag
        on ignores any custom path or filename that is still set.
        """
        if self.use_default_save_location or not self._custom_save_path:
            return data_dir
        return os.path.join(data_dir, self._custom_save_path)

    def save_file(self, data_dir: str) -> Optional[str]:
        """Returns the full path new notes should be saved to, or None if the template doesn't name a file.

        Like :meth:`save_directory`, this is None whenever :attr:`use_default_save_location` is on, even if a
        custom filename is set.
        """
        if self.use_default_save_location or not self._custom_save_filename:
            return None
        return os.path.join(self.save_directory(data_dir), self._custom_save_filename)

    def load_from_props(self, props: Props, prefix: str = '') -> None:
        """Replaces this template's settings with those stored under the given key prefix.

        Unknown option names and invalid dates fall back to defaults. May raise :exc:`ValidationError`
        if the stored context query is invalid.
        """
        pfx = prefix or ''
        self._set_defaults(props.get_string(f'{pfx}name', self.name))
        self.date_option = DateOption.from_name(props.get_string(f'{pfx}dateOption', 'NONE'), DateOption.NONE)
        custom_date = props.get_string(f'{pfx}customDate', '')
        if YMDDate.is_valid_ymd(custom_date):
            self.custom_date = YMDDate.parse(custom_date)
        elif custom_date:
            logger.warning(f"Ignoring invalid custom date '{custom_date}' for template '{self.name}'.")
        self.set_tags_from_string(props.get_string(f'{pfx}tags', ''))
        if props.get_bool(f'{pfx}hasContextQuery', False):
            self.context_query = Query()
            self.context_query.load_from_props(props, f'{pfx}contextQuery.')
            self.context_row_count = RowCountOption.from_name(props.get_string(f'{pfx}contextRowCount', 'ALL'),
                                                              RowCountOption.ALL)
        self.use_default_save_location = props.get_bool(f'{pfx}useDefaultSaveLocation', True)
        self.custom_save_path = props.get_string(f'{pfx}customSavePath', '')
        self.custom_save_filename = props.get_string(f'{pfx}customSaveFilename', '')

    def save_to_props(self, props: Props, prefix: str = '') -> None:
        pfx = prefix or ''
        props.set_string(f'{pfx}name', self.name)
        props.set_string(f'{pfx}dateOption', self.date_option.name)
        props.set_string(f'{pfx}customDate', str(self.custom_date) if self.custom_date else '')
        props.set_string(f'{pfx}tags', self.tags_as_string())
        props.set_bool(f'{pfx}hasContextQuery', self.has_context_query())
        if self.context_query:
            self.context_query.save_to_props(props, f'{pfx}contextQuery.')
            props.set_string(f'{pfx}contextRowCount', self.context_row_count.name)
        props.set_bool(f'{pfx}useDefaultSaveLocation', self.use_default_save_location)
        props.set_string(f'{pfx}customSavePath', self._custom_save_path)
        props.set_string(f'{pfx}customSaveFilename', self._custom_save_filename)
