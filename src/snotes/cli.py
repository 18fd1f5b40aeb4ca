"""Command-line interface for snotes."""


import argparse
import json
import logging
import os.path
import sys
from typing import List
from terminaltables import AsciiTable
from snotes.api import Error, Snotes
from snotes.models import DateTag, Query, RowCountOption, Snote, ValidationError


ROW_COUNTS = {
    'all': RowCountOption.ALL,
    '1': RowCountOption.MOST_RECENT1,
    '3': RowCountOption.MOST_RECENT3,
    '5': RowCountOption.MOST_RECENT5,
    '10': RowCountOption.MOST_RECENT10,
}


def _snote_json(snote: Snote) -> dict:
    return {
        'path': snote.source_file,
        'date': str(snote.date) if snote.has_date() else None,
        'tags': [t.value for t in snote.non_date_tags()],
        'text': snote.text,
    }


def _print_snote(snote: Snote) -> None:
    print(f'path: {snote.source_file}')
    print(f'date: {snote.date or ""}')
    print(f'tags: {", ".join(t.value for t in snote.non_date_tags())}')
    print(snote.text, end='' if snote.text.endswith('\n') else '\n')


def _first_line(snote: Snote) -> str:
    for line in snote.text.splitlines():
        if line.strip():
            return line.strip()
    return ''


def _query(args, sn: Snotes) -> int:
    query = sn.saved_query(args.saved[0]).copy() if args.saved else Query()
    if args.tags:
        query.tag_string = args.tags[0]
    if args.year:
        query.year_filter = args.year[0]
    if args.month:
        query.month_filter = args.month[0]
    if args.day:
        query.day_filter = args.day[0]
    if args.text:
        query.text_filter = args.text[0]
    if args.case_sensitive:
        query.case_sensitive = True
    snotes = sn.query(query, ROW_COUNTS[args.limit])
    if args.json:
        print(json.dumps([_snote_json(s) for s in snotes]))
    elif args.table:
        data = [('Filename', 'Date', 'Tags', 'First line')]
        for snote in snotes:
            data.append((os.path.basename(snote.source_file),
                         str(snote.date) if snote.has_date() else '',
                         '\n'.join(t.value for t in snote.non_date_tags()),
                         _first_line(snote)))
        print(AsciiTable(data).table)
    else:
        for snote in snotes:
            print('--------------------')
            _print_snote(snote)
    return 0


def _tags(args, sn: Snotes) -> int:
    cache = sn.cache
    counts = {}
    for tag in cache.all_tags():
        if isinstance(tag, DateTag):
            found = cache.find_by_date(tag.date.year_str, tag.date.month_str, tag.date.day_str)
        else:
            found = cache.find_by_tag(tag)
        counts[tag.value] = len(found)
    if args.json:
        print(json.dumps(counts))
    else:
        data = [('Tag', 'Count')] + [(t, c) for t, c in counts.items()]
        table = AsciiTable(data)
        table.justify_columns[1] = 'right'
        print(table.table)
    return 0


def _new(args, sn: Snotes) -> int:
    text = args.text[0] if args.text else ''
    path = sn.new(args.template, text=text, dest=args.dest)
    print(f'Created {path}')
    return 0


def _show(args, sn: Snotes) -> int:
    snote = sn.cache.find_by_source_file(os.path.abspath(args.path[0]))
    if snote is None:
        print(f'Not a loaded note: {args.path[0]}', file=sys.stderr)
        return 1
    print(snote.full_content(), end='')
    return 0


def _rm(args, sn: Snotes) -> int:
    path = os.path.abspath(args.path[0])
    if sn.cache.find_by_source_file(path) is None:
        print(f'Not a loaded note: {args.path[0]}', file=sys.stderr)
        return 1
    sn.remove(path)
    return 0


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.set_defaults(func=None)
    parser.add_argument('-v', '--verbose', action='store_true', help='Show debug logging.')

    subs = parser.add_subparsers(title='Commands')

    p_q = subs.add_parser(
        'query',
        help='Find notes. Notes must have all the given tags; undated notes with those tags are included even '
             'when filtering by date. With no options, every note is listed.')
    p_q.add_argument('-g', '--tags', nargs=1, help='Space-separated tags the notes must all have.')
    p_q.add_argument('-y', '--year', nargs=1, help='Four-digit year, e.g. 2024.')
    p_q.add_argument('-m', '--month', nargs=1, help='Two-digit month, e.g. 03.')
    p_q.add_argument('-d', '--day', nargs=1, help='Two-digit day of the month, e.g. 05.')
    p_q.add_argument('-x', '--text', nargs=1, help='Text the note body must contain.')
    p_q.add_argument('-c', '--case-sensitive', action='store_true', help='Match --text case-sensitively.')
    p_q.add_argument('-n', '--limit', choices=list(ROW_COUNTS), default='all',
                     help='Only show this many of the last matching notes (ordered by path).')
    p_q.add_argument('-s', '--saved', nargs=1,
                     help='Start from the saved query with this name. Other options override its settings.')
    p_q_formats = p_q.add_mutually_exclusive_group()
    p_q_formats.add_argument('-j', '--json', help='Output as JSON.', action='store_true')
    p_q_formats.add_argument('-t', '--table', help='Format output as a table.', action='store_true')
    p_q.set_defaults(func=_query)

    p_tags = subs.add_parser('tags', help='Show every tag and date, with the number of notes that have each.')
    p_tags.add_argument('-j', '--json', action='store_true',
                        help='Output as JSON. The output is an object whose keys are tags and whose values '
                             'are the number of notes with that tag.')
    p_tags.set_defaults(func=_tags)

    p_new = subs.add_parser('new',
                            help='Create a new note, optionally from a saved template. '
                                 'This command will print the path of the newly created file.')
    p_new.add_argument('template', nargs='?', help='Name of a saved template.')
    p_new.add_argument('dest', nargs='?',
                       help='Destination filename. Adjusted if it conflicts with an existing file. '
                            'If omitted, the template decides.')
    p_new.add_argument('--text', nargs=1, help='Body text for the note.')
    p_new.set_defaults(func=_new)

    p_show = subs.add_parser('show', help='Print a note as it is stored on disk.')
    p_show.add_argument('path', nargs=1)
    p_show.set_defaults(func=_show)

    p_rm = subs.add_parser('rm', help='Delete a note.')
    p_rm.add_argument('path', nargs=1)
    p_rm.set_defaults(func=_rm)

    return parser


def main(args: List[str] = None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    if not args.func:
        parser.print_help()
        return 1
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    try:
        sn = Snotes.for_user()
        return args.func(args, sn)
    except (Error, ValidationError, OSError) as e:
        print(str(e), file=sys.stderr)
        return 1
