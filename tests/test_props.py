from pathlib import Path
import pytest
import yaml
from snotes.props import DictProps, YamlProps


def test_dict_props():
    props = DictProps({'a': 'x', 'n': 5, 'flag': 'TRUE', 'off': 'no'})
    assert props.get_string('a') == 'x'
    assert props.get_string('n') == '5'
    assert props.get_string('missing', 'fallback') == 'fallback'
    assert props.get_bool('flag')
    assert not props.get_bool('off', True)
    assert props.get_bool('missing', True)
    assert 'a' in props
    assert 'missing' not in props
    props.set_string('b', None)
    assert props.get_string('b', 'fallback') == ''
    props.set_bool('c', 1)
    assert props.values['c'] is True
    assert list(props.keys()) == ['a', 'b', 'c', 'flag', 'n', 'off']


def test_dump():
    props = DictProps({'z': 'last', 'a': "'quoted'", 'year': '2024'})
    assert yaml.safe_load(props.dump()) == {'z': 'last', 'a': "'quoted'", 'year': '2024'}
    assert props.dump().startswith('a: ')


def test_yaml_props(fs):
    fs.create_dir('/notes')
    props = YamlProps('/notes/x.yml')
    props.set_string('name', 'Thing')
    props.set_bool('on', True)
    props.save()
    assert yaml.safe_load(Path('/notes/x.yml').read_text()) == {'name': 'Thing', 'on': True}
    loaded = YamlProps('/notes/x.yml')
    loaded.load()
    assert loaded.get_string('name') == 'Thing'
    assert loaded.get_bool('on')


def test_yaml_props_empty(fs):
    fs.create_file('/notes/x.yml', contents='')
    props = YamlProps('/notes/x.yml')
    props.load()
    assert list(props.keys()) == []


def test_yaml_props_not_mapping(fs):
    fs.create_file('/notes/x.yml', contents='just a string\n')
    with pytest.raises(ValueError):
        YamlProps('/notes/x.yml').load()
