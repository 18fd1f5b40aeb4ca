"""Reads and writes note files.

A note file looks like this:

.. code-block:: text

   #2024-03-05 (Tuesday) #alpha #beta

   The body of the note starts here,
   and runs to the end of the file.

The first line holds the tags. If the first tag is a ``yyyy-MM-dd`` date it becomes the note's date; the
parenthesized day name written after it is optional and is ignored when reading. A blank second line is
skipped; every remaining line is part of the body.
"""

import re
from typing import List, Tuple

from snotes.accessors.base import Accessor, MalformedFileError
from snotes.models import Snote, Tag, YMDDate

DAY_NAME_RE = re.compile(r'\(.*\)')
LINE_BREAK_RE = re.compile(r'\r\n|\r|\n')


def _lines(text: str) -> List[str]:
    # only \n, \r and \r\n end a line; form feeds and Unicode separators belong to the body
    lines = LINE_BREAK_RE.split(text)
    if len(lines) > 1 and lines[-1] == '':
        lines.pop()
    return lines


def _tag_tokens(tag_line: str) -> List[Tuple[str, str]]:
    """Returns (raw, value) pairs for the tag line's tokens, where value has the '#' characters removed."""
    return [(raw, raw.replace('#', '')) for raw in tag_line.split(' ') if raw.replace('#', '')]


def parse_snote(text: str, path: str = None) -> Snote:
    """Parses the full content of a note file.

    Raises :exc:`MalformedFileError` if the file is empty, has fewer than two lines, has no tag line,
    or names more than one date.
    """
    if not text:
        raise MalformedFileError('File is empty.', path)
    lines = _lines(text)
    if len(lines) < 2:
        raise MalformedFileError('File has no content.', path)
    if '#' not in lines[0]:
        raise MalformedFileError('File is malformed or missing tag list.', path)

    snote = Snote(source_file=path)
    tokens = _tag_tokens(lines[0])
    index = 0
    if tokens and Tag.is_date_value(tokens[0][1]):
        snote.set_date(YMDDate.parse(tokens[0][1]))
        index = 1
        # the day name is written without a '#'; '#(draft)' is a tag
        if len(tokens) > 1 and not tokens[1][0].startswith('#') and DAY_NAME_RE.fullmatch(tokens[1][0]):
            index = 2
    for raw, value in tokens[index:]:
        if Tag.is_date_value(value):
            raise MalformedFileError('Multiple date tags found.', path)
        snote.tag(value)

    start = 2 if not lines[1].strip() else 1
    for line in lines[start:]:
        snote.append(line)
        snote.newline()
    return snote


class SnoteAccessor(Accessor):
    """Responsible for parsing and writing note (``.txt``) files.

    :meth:`read` returns a :class:`snotes.models.Snote` whose ``source_file`` is this accessor's path,
    and :meth:`write` saves a note's :meth:`snotes.models.Snote.full_content`.
    """
    def _load(self) -> None:
        self._snote = parse_snote(self._read_text(), self.path)

    def _read(self) -> Snote:
        return self._snote

    def _write(self, snote: Snote) -> None:
        self._write_text(snote.full_content())
