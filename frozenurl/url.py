import collections.abc
import logging
import typing
from urllib.parse import quote

import pydantic

from frozenurl.authority import Authority
from frozenurl.errors import InvalidArgument
from frozenurl.query import Collapsed
from frozenurl.query import QueryParameters
from frozenurl.query import check_name
from frozenurl.query import ArrayStyle

PATH_SAFE = "/:@!$&'()*+,;=~%"


class Url(pydantic.BaseModel):
    """Immutable URL value.

    Every ``with_*``/``without_*`` call validates and returns a new Url,
    the instance it was called on never changes. Unchanged authority and
    query objects are shared between the old and the new instance.

        >>> url = Url('https', 'example.com').with_path('/a').with_query_parameter('q', 1)
        >>> str(url.with_fragment('frag'))
        'https://example.com/a?q=1#frag'
    """

    scheme: str = pydantic.Field(..., min_length=1)
    host: str = pydantic.Field(..., min_length=1)
    authority: Authority | None = None
    path: str | None = None
    query: QueryParameters = pydantic.Field(default_factory=QueryParameters)
    fragment: str | None = None
    model_config = pydantic.ConfigDict(frozen=True, strict=True, extra='forbid', arbitrary_types_allowed=True)

    def __init__(self, scheme: str, host: str, **kwargs):
        authority = kwargs.get('authority')
        if isinstance(authority, dict):
            kwargs['authority'] = Authority.create(**authority)
        query = kwargs.get('query')
        if query is not None and not isinstance(query, QueryParameters):
            kwargs['query'] = QueryParameters(query)
        try:
            super().__init__(scheme=scheme, host=host, **kwargs)
        except pydantic.ValidationError as e:
            logging.debug(f'Rejected url fields scheme={scheme!r} host={host!r} {kwargs!r}')
            raise InvalidArgument.from_validation_error(e) from e

    def _replace(self, **changes) -> 'Url':
        fields = {name: getattr(self, name) for name in type(self).model_fields}
        fields.update(changes)
        return type(self)(**fields)

    def with_scheme(self, scheme: str) -> 'Url':
        return self._replace(scheme=scheme)

    def with_host(self, host: str) -> 'Url':
        return self._replace(host=host)

    def with_authority(self, authority: Authority) -> 'Url':
        if not isinstance(authority, Authority):
            raise InvalidArgument('authority must be an Authority', argument='authority', value=authority)
        return self._replace(authority=authority)

    def remove_authority(self) -> 'Url':
        return self._replace(authority=None)

    @property
    def user(self) -> str | None:
        return self.authority.user if self.authority is not None else None

    def with_user(self, user: str) -> 'Url':
        if self.authority is None:
            return self._replace(authority=Authority.create(user=user))
        return self._replace(authority=self.authority.with_user(user))

    @property
    def password(self) -> str | None:
        return self.authority.password if self.authority is not None else None

    def with_password(self, password: str) -> 'Url':
        if self.authority is None:
            return self._replace(authority=Authority.create(password=password))
        return self._replace(authority=self.authority.with_password(password))

    @property
    def port(self) -> int | None:
        return self.authority.port if self.authority is not None else None

    def with_port(self, port: int) -> 'Url':
        if self.authority is None:
            return self._replace(authority=Authority.create(port=port))
        return self._replace(authority=self.authority.with_port(port))

    def get_path(self, default: str | None = '/') -> str | None:
        """Return the path, or ``default`` when no path was ever set.

        An empty path set through ``with_path('')`` is returned as is.
        """
        return self.path if self.path is not None else default

    def with_path(self, path: str) -> 'Url':
        return self._replace(path=path)

    def without_path(self) -> 'Url':
        return self._replace(path=None)

    def with_query_parameters_object(self, query: QueryParameters) -> 'Url':
        if not isinstance(query, QueryParameters):
            raise InvalidArgument('query must be a QueryParameters instance', argument='query', value=query)
        return self._replace(query=query)

    def with_query_parameters(self, parameters: collections.abc.Mapping[str, typing.Any]) -> 'Url':
        """Replace the whole query with one built from ``parameters``."""
        return self._replace(query=QueryParameters(parameters))

    def get_query_parameter(self, name: str, default: Collapsed | None = '') -> Collapsed | None:
        """Return a str for single values, a tuple of str for repeated ones.

        A parameter that is not set returns ``default``, an empty string
        unless told otherwise.
        """
        return self.query.get(check_name(name), default)

    def with_query_parameter(self, name: str, value: typing.Any) -> 'Url':
        return self._replace(query=self.query.with_(name, value))

    def without_query_parameters(self, *names: str) -> 'Url':
        return self._replace(query=self.query.without(*names))

    def without_query_parameter(self) -> 'Url':
        """Remove ALL query parameters. Use ``without_query_parameters`` to drop named ones."""
        return self.clear_query_parameters()

    def clear_query_parameters(self) -> 'Url':
        return self._replace(query=self.query.without_all())

    def with_fragment(self, fragment: str) -> 'Url':
        return self._replace(fragment=fragment)

    def without_fragment(self) -> 'Url':
        return self._replace(fragment=None)

    def to_string(self, array_style: ArrayStyle | str = ArrayStyle.REPEAT) -> str:
        text = f'{self.scheme}://'
        if self.authority is not None and self.authority.userinfo is not None:
            text += f'{self.authority.userinfo}@'
        text += self.host
        if self.port is not None:
            text += f':{self.port}'
        if self.path:
            path = quote(self.path, safe=PATH_SAFE)
            text += path if path.startswith('/') else f'/{path}'
        query = self.query.to_string(array_style)
        if query:
            text += f'?{query}'
        if self.fragment is not None:
            # a leading '#' supplied by the caller is kept and not doubled
            text += self.fragment if self.fragment.startswith('#') else f'#{self.fragment}'
        return text

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Url('{self}')"
