import pytest
from snotes.models import DateTag, Tag
from snotes.scanner import ProgressListener, RootAccessError, Scanner


class RecordingListener(ProgressListener):
    def __init__(self, stop_at=None):
        self.stop_at = stop_at
        self.events = []

    def begin(self, step_count):
        self.events.append(('begin', step_count))

    def update(self, step, label):
        self.events.append(('update', step, label))
        return step != self.stop_at

    def complete(self):
        self.events.append(('complete',))

    def canceled(self):
        self.events.append(('canceled',))


def test_load_collection(notes):
    collection = Scanner('/notes').load_collection()
    cache = collection.snotes
    assert [s.source_file for s in cache.all_snotes()] == [
        '/notes/2024/2024-03-05.txt',
        '/notes/2024/2024-03-07.txt',
        '/notes/2024/2024-04-01.txt',
        '/notes/ideas.txt',
    ]
    assert cache.unique_dates() == [DateTag('2024-03-05'), DateTag('2024-03-07'), DateTag('2024-04-01')]
    assert cache.non_date_tags() == [Tag('home'), Tag('ideas'), Tag('work')]
    assert cache.find_by_source_file('/notes/2024/2024-03-07.txt').text == 'Release went out.\nAll good.\n'
    assert collection.queries.names() == ['Work']
    assert collection.queries.get('Work').tag_string == 'work'
    assert collection.templates.names() == ['Journal']


def test_load_snote_cache(notes):
    assert Scanner('/notes').load_snote_cache().size() == 4


def test_ignored_and_unsupported(notes):
    notes.create_file('/notes/.hg/store/data.txt', contents='#x\n\nhidden\n')
    notes.create_file('/notes/to_import/pending.txt', contents='#x\n\npending\n')
    notes.create_file('/notes/2024/nested/to_import/deep.txt', contents='#x\n\npending\n')
    notes.create_file('/notes/readme.md', contents='#x\n\nnot a note\n')
    notes.create_symlink('/notes/link.txt', '/notes/ideas.txt')
    cache = Scanner('/notes').load_snote_cache()
    assert cache.size() == 4
    assert not cache.find_by_tag('x')


def test_custom_ignore(notes):
    cache = Scanner('/notes', ignore=lambda parent, name: name == '2024').load_snote_cache()
    assert [s.source_file for s in cache.all_snotes()] == ['/notes/ideas.txt']


def test_bad_files_skipped(notes, caplog):
    notes.create_file('/notes/empty.txt', contents='')
    notes.create_file('/notes/notags.txt', contents='no tags here\nat all\n')
    notes.create_file('/notes/twodates.txt', contents='#2024-01-01 #2024-01-02\n\nx\n')
    notes.create_file('/notes/bad.query.yml', contents="monthFilter: '123'\n")
    notes.create_file('/notes/binary.txt', contents=b'#x\n\n\xff\xfe')
    collection = Scanner('/notes').load_collection()
    assert collection.snotes.size() == 4
    assert len(collection.queries) == 1
    for name in ['empty.txt', 'notags.txt', 'twodates.txt', 'bad.query.yml', 'binary.txt']:
        assert name in caplog.text


def test_does_not_modify_files(notes):
    before = open('/notes/2024/2024-03-07.txt').read()
    Scanner('/notes').load_collection()
    assert open('/notes/2024/2024-03-07.txt').read() == before


def test_missing_root(fs):
    with pytest.raises(RootAccessError):
        Scanner('/nowhere').load_collection()


def test_root_is_file(fs):
    fs.create_file('/notes')
    with pytest.raises(RootAccessError, match='does not exist'):
        Scanner('/notes').load_collection()


def test_empty_root(fs):
    fs.create_dir('/notes')
    listener = RecordingListener()
    collection = Scanner('/notes').load_collection(listener)
    assert collection.snotes.size() == 0
    assert listener.events == [('begin', 0), ('complete',)]


def test_listener(notes):
    listener = RecordingListener()
    Scanner('/notes').load_collection(listener)
    assert listener.events[0] == ('begin', 6)
    assert listener.events[1] == ('update', 0, '.snotes/journal.template.yml')
    assert listener.events[3] == ('update', 2, '2024/2024-03-05.txt')
    assert listener.events[-1] == ('complete',)
    assert len(listener.events) == 8


def test_listener_cancel(notes):
    listener = RecordingListener(stop_at=3)
    collection = Scanner('/notes').load_collection(listener)
    assert listener.events[-1] == ('canceled',)
    assert ('complete',) not in listener.events
    assert [s.source_file for s in collection.snotes.all_snotes()] == ['/notes/2024/2024-03-05.txt']
    assert collection.queries.names() == ['Work']


def test_start(notes):
    listener = RecordingListener()
    future = Scanner('/notes').start(listener)
    collection = future.result(timeout=10)
    assert collection.snotes.size() == 4
    assert listener.events[-1] == ('complete',)


def test_start_missing_root(fs):
    future = Scanner('/nowhere').start()
    with pytest.raises(RootAccessError):
        future.result(timeout=10)
