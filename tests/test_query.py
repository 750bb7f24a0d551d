import decimal
import enum

import pytest

from frozenurl import query
from frozenurl.errors import InvalidArgument
from frozenurl.query import ArrayStyle


class Color(enum.Enum):
    RED = 'red'
    BLUE = 'blue'


class Priority(enum.IntEnum):
    LOW = 1
    HIGH = 2


class Slug:
    def __init__(self, text: str):
        self.text = text

    def __str__(self) -> str:
        return self.text.lower().replace(' ', '-')


def test_collapse_scalars():
    assert query.collapse('x') == query.Single('x')
    assert query.collapse(3) == query.Single('3')
    assert query.collapse(1.5) == query.Single('1.5')
    assert query.collapse(decimal.Decimal('2.50')) == query.Single('2.50')
    assert query.collapse(True) == query.Single('1')
    assert query.collapse(False) == query.Single('0')
    assert query.collapse(Color.RED) == query.Single('red')
    assert query.collapse(Priority.HIGH) == query.Single('2')
    assert query.collapse(Slug('Hello World')) == query.Single('hello-world')


def test_collapse_sequences():
    assert query.collapse(['a', 1, True]) == query.Multi(['a', '1', '1'])
    assert query.collapse(('a',)) == query.Multi(['a'])
    assert query.collapse([]) == query.Multi([])


def test_collapse_passes_variants_through():
    single = query.Single('x')
    assert query.collapse(single) is single


@pytest.mark.parametrize('value', [None, b'bytes', {'a': 1}, {'a', 'b'}, [['nested']], object()])
def test_collapse_rejects_unconvertible_values(value):
    with pytest.raises(InvalidArgument):
        query.collapse(value)


def test_mapping_interface():
    params = query.QueryParameters({'q': 'python', 'tag': ['a', 'b']})
    assert params['q'] == 'python'
    assert params['tag'] == ('a', 'b')
    assert 'q' in params
    assert 'missing' not in params
    assert params.get('missing') is None
    assert list(params) == ['q', 'tag']
    assert len(params) == 2
    with pytest.raises(KeyError):
        params['missing']


def test_with_replaces_and_keeps_position():
    params = query.QueryParameters({'a': '1', 'b': '2'})
    updated = params.with_('a', ['3', '4'])
    assert list(updated.items()) == [('a', ('3', '4')), ('b', '2')]
    assert params['a'] == '1'


def test_with_appends_new_names_last():
    params = query.QueryParameters({'a': '1'}).with_('b', 2)
    assert list(params) == ['a', 'b']


def test_with_all_merges():
    params = query.QueryParameters({'a': '1', 'b': '2'})
    merged = params.with_all({'b': '3', 'c': '4'})
    assert merged.to_dict() == {'a': '1', 'b': '3', 'c': '4'}
    assert params.to_dict() == {'a': '1', 'b': '2'}
    assert params.with_all(query.QueryParameters({'a': '9'}))['a'] == '9'


def test_without_removes_named_and_ignores_unknown():
    params = query.QueryParameters({'a': '1', 'b': '2'})
    assert params.without('a').to_dict() == {'b': '2'}
    assert params.without('unknown') == params
    assert params.without('unknown') is not params
    assert params.without().to_dict() == {'a': '1', 'b': '2'}
    with pytest.raises(InvalidArgument):
        params.without('')


def test_without_all():
    params = query.QueryParameters({'a': '1'})
    assert len(params.without_all()) == 0
    assert len(params) == 1


def test_from_pairs_groups_repeated_names():
    params = query.QueryParameters.from_pairs([('a', '1'), ('b', '2'), ('a', 3)])
    assert params.to_dict() == {'a': ['1', '3'], 'b': '2'}
    assert list(params) == ['a', 'b']


def test_to_string_repeat_style():
    params = query.QueryParameters({'q': 'a b&c', 'tag': ['x', 'y']})
    assert str(params) == 'q=a+b%26c&tag=x&tag=y'
    assert params.pairs() == [('q', 'a b&c'), ('tag', 'x'), ('tag', 'y')]


def test_to_string_bracket_style():
    params = query.QueryParameters({'tag': ['x', 'y']})
    assert params.to_string(ArrayStyle.BRACKETS) == 'tag%5B%5D=x&tag%5B%5D=y'
    assert params.to_string('BRACKETS') == 'tag%5B%5D=x&tag%5B%5D=y'
    with pytest.raises(InvalidArgument):
        params.to_string('commas')
    with pytest.raises(InvalidArgument):
        params.to_string(None)


def test_default_array_style_is_repeat():
    params = query.QueryParameters({'tag': ['x', 'y'], 'flag': [True, False]})
    assert params.to_string() == params.to_string(ArrayStyle.REPEAT) == 'tag=x&tag=y&flag=1&flag=0'


def test_empty_multi_is_not_serialized():
    params = query.QueryParameters({'empty': [], 'a': '1'})
    assert str(params) == 'a=1'


def test_equality_and_hash():
    params = query.QueryParameters({'a': ['1', '2'], 'b': 3})
    assert params == {'a': ('1', '2'), 'b': '3'}
    assert params == {'a': ['1', '2'], 'b': 3}
    assert params != {'a': '1'}
    assert params != {'a': None}
    assert params == query.QueryParameters(params)
    assert hash(params) == hash(query.QueryParameters({'a': ('1', '2'), 'b': '3'}))


def test_equality_respects_order():
    params = query.QueryParameters({'a': '1', 'b': '2'})
    reordered = query.QueryParameters({'b': '2', 'a': '1'})
    assert params != reordered
    assert params != {'b': '2', 'a': '1'}
    assert params == {'a': '1', 'b': '2'}
    assert str(params) != str(reordered)


def test_rejects_non_mapping_and_bad_names():
    with pytest.raises(InvalidArgument):
        query.QueryParameters([('a', '1')])
    with pytest.raises(InvalidArgument):
        query.QueryParameters({'': '1'})
    with pytest.raises(InvalidArgument):
        query.QueryParameters({1: '1'})


def test_repr():
    assert repr(query.QueryParameters({'a': ['1']})) == "QueryParameters({'a': ['1']})"
