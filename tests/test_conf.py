import os.path
import pytest
from snotes.api import Snotes
from snotes.conf import SnotesConf, default_ignore


def test_default_ignore():
    assert default_ignore('/notes', '.hg')
    assert default_ignore('/notes/sub', 'to_import')
    assert default_ignore(None, '.hg')

    assert not default_ignore('/notes', 'import')
    assert not default_ignore('/notes', '.hgignore')
    assert not default_ignore('/notes/to_import', 'file.txt')


def test_user_config_path():
    assert SnotesConf.user_config_path() == os.path.expanduser('~/.snotes.conf.py')


def test_for_user_no_file(fs):
    with pytest.raises(Exception, match=r'You need to create the config file: .*\.snotes\.conf\.py'):
        SnotesConf.for_user()


def test_for_user_no_conf(fs):
    fs.create_file(os.path.expanduser('~/.snotes.conf.py'), contents='x = 1\n')
    with pytest.raises(Exception, match='You need to assign an instance of SnotesConf'):
        SnotesConf.for_user()


def test_for_user(fs):
    confpy = """from snotes.conf import *
conf = SnotesConf(root_path='/notes', encoding='latin-1')"""
    fs.create_file(os.path.expanduser('~/.snotes.conf.py'), contents=confpy)
    conf = SnotesConf.for_user()
    assert conf == SnotesConf(root_path='/notes', encoding='latin-1')


def test_standardize(fs):
    fs.create_dir(os.path.expanduser('~/snotes'))
    conf = SnotesConf(root_path='~/snotes').standardize()
    assert conf.root_path == os.path.realpath(os.path.expanduser('~/snotes'))
    assert conf.definitions_path() == os.path.join(conf.root_path, '.snotes')


def test_instantiate(fs):
    fs.create_file('/notes/a.txt', contents='#x\n\nHi\n')
    sn = SnotesConf(root_path='/notes/../notes').instantiate()
    assert isinstance(sn, Snotes)
    assert sn.conf.root_path == '/notes'
    assert sn.cache.find_by_source_file('/notes/a.txt') is not None
