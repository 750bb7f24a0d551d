import collections.abc
import decimal
import enum
import logging
import typing
from urllib.parse import urlencode

import pydantic

from frozenurl.errors import InvalidArgument

Collapsed = typing.Union[str, tuple[str, ...]]


class ArrayStyle(enum.Enum):
    """How a multi-valued query parameter is written out.

    REPEAT renders ``a=1&a=2``, BRACKETS renders ``a[]=1&a[]=2``.
    """

    REPEAT = 'repeat'
    BRACKETS = 'brackets'


class Single(pydantic.BaseModel):
    value: str
    model_config = pydantic.ConfigDict(frozen=True, strict=True)

    def __init__(self, value: str, **kwargs):
        super().__init__(value=value, **kwargs)

    @property
    def collapsed(self) -> str:
        return self.value

    def as_list(self) -> list[str]:
        return [self.value]

    def pairs(self, name: str, array_style: ArrayStyle) -> list[tuple[str, str]]:
        return [(name, self.value)]


class Multi(pydantic.BaseModel):
    values: tuple[str, ...]
    model_config = pydantic.ConfigDict(frozen=True)

    def __init__(self, values: typing.Iterable[str], **kwargs):
        super().__init__(values=tuple(values), **kwargs)

    @property
    def collapsed(self) -> tuple[str, ...]:
        return self.values

    def as_list(self) -> list[str]:
        return list(self.values)

    def pairs(self, name: str, array_style: ArrayStyle) -> list[tuple[str, str]]:
        key = f'{name}[]' if array_style is ArrayStyle.BRACKETS else name
        return [(key, value) for value in self.values]


QueryValue = typing.Union[Single, Multi]

_UNCOLLAPSIBLE = (bytes, bytearray, collections.abc.Mapping, collections.abc.Set, collections.abc.Sequence)


def _has_own_str(value: typing.Any) -> bool:
    return type(value).__str__ is not object.__str__


def _scalar_to_string(value: typing.Any) -> str:
    # bool is checked before int, it is a subclass
    if isinstance(value, bool):
        return '1' if value else '0'
    if isinstance(value, enum.Enum):
        return _scalar_to_string(value.value)
    if isinstance(value, (str, int, float, decimal.Decimal)):
        return str(value)
    if _has_own_str(value) and not isinstance(value, _UNCOLLAPSIBLE):
        return str(value)
    raise InvalidArgument(
        f'{type(value).__name__} value does not collapse to a string', argument='value', value=value
    )


def collapse(value: typing.Any) -> QueryValue:
    """Convert a query parameter value to a Single or Multi.

    Strings, numbers, booleans ('1'/'0'), enums and objects with their own
    ``__str__`` become a Single. A list or tuple of those becomes a Multi,
    nested sequences are rejected. Raises InvalidArgument for anything else.
    """
    if isinstance(value, (Single, Multi)):
        return value
    try:
        if isinstance(value, (list, tuple)):
            return Multi(_scalar_to_string(item) for item in value)
        return Single(_scalar_to_string(value))
    except InvalidArgument:
        logging.debug(f'Rejected query parameter value {value!r}')
        raise


def check_name(name: typing.Any) -> str:
    if not isinstance(name, str) or not name:
        logging.debug(f'Rejected query parameter name {name!r}')
        raise InvalidArgument('query parameter name must be a non-empty string', argument='name', value=name)
    return name


def resolve_array_style(array_style: ArrayStyle | str) -> ArrayStyle:
    if isinstance(array_style, ArrayStyle):
        return array_style
    try:
        return ArrayStyle(array_style.lower())
    except (ValueError, AttributeError) as e:
        raise InvalidArgument(str(e), argument='array_style', value=array_style) from e


class QueryParameters(collections.abc.Mapping):
    """Immutable, ordered query parameter container.

    Reading works like a read-only dict whose values are either ``str`` or
    ``tuple[str, ...]``. Every ``with_``/``without`` call returns a new
    container and leaves this one untouched.

        >>> params = QueryParameters({'q': 'python', 'tag': ['a', 'b']})
        >>> str(params.with_('page', 2))
        'q=python&tag=a&tag=b&page=2'
    """

    __slots__ = ('_params',)

    def __init__(self, params: collections.abc.Mapping[str, typing.Any] | None = None):
        if isinstance(params, QueryParameters):
            self._params = params._params
            return
        if params is not None and not isinstance(params, collections.abc.Mapping):
            raise InvalidArgument('query parameters must be a mapping', argument='params', value=params)
        collapsed: dict[str, QueryValue] = {}
        for name, value in (params or {}).items():
            collapsed[check_name(name)] = collapse(value)
        self._params = collapsed

    @classmethod
    def _from_collapsed(cls, params: dict[str, QueryValue]) -> 'QueryParameters':
        instance = cls.__new__(cls)
        instance._params = params
        return instance

    @classmethod
    def from_pairs(cls, pairs: typing.Iterable[tuple[str, typing.Any]]) -> 'QueryParameters':
        """Build a container from (name, value) pairs, repeated names become a Multi."""
        grouped: dict[str, list[str]] = {}
        for name, value in pairs:
            grouped.setdefault(check_name(name), []).extend(collapse(value).as_list())
        return cls._from_collapsed(
            {name: Single(values[0]) if len(values) == 1 else Multi(values) for name, values in grouped.items()}
        )

    def __getitem__(self, name: str) -> Collapsed:
        return self._params[name].collapsed

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def with_(self, name: str, value: typing.Any) -> 'QueryParameters':
        return self._from_collapsed({**self._params, check_name(name): collapse(value)})

    def with_all(self, params: collections.abc.Mapping[str, typing.Any]) -> 'QueryParameters':
        if isinstance(params, QueryParameters):
            return self._from_collapsed({**self._params, **params._params})
        updates = {check_name(name): collapse(value) for name, value in params.items()}
        return self._from_collapsed({**self._params, **updates})

    def without(self, *names: str) -> 'QueryParameters':
        for name in names:
            check_name(name)
        return self._from_collapsed({k: v for k, v in self._params.items() if k not in names})

    def without_all(self) -> 'QueryParameters':
        return self._from_collapsed({})

    def to_dict(self) -> dict[str, str | list[str]]:
        return {
            name: value.value if isinstance(value, Single) else value.as_list() for name, value in self._params.items()
        }

    def pairs(self, array_style: ArrayStyle | str = ArrayStyle.REPEAT) -> list[tuple[str, str]]:
        style = resolve_array_style(array_style)
        result: list[tuple[str, str]] = []
        for name, value in self._params.items():
            result.extend(value.pairs(name, style))
        return result

    def to_string(self, array_style: ArrayStyle | str = ArrayStyle.REPEAT) -> str:
        return urlencode(self.pairs(array_style))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f'QueryParameters({self.to_dict()!r})'

    # order is part of the value, it decides the serialized form
    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryParameters):
            return list(self._params.items()) == list(other._params.items())
        if isinstance(other, collections.abc.Mapping):
            try:
                return self == QueryParameters(other)
            except InvalidArgument:
                return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._params.items()))
