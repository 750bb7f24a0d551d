import logging
from urllib.parse import quote

import pydantic

from frozenurl.errors import InvalidArgument


class Authority(pydantic.BaseModel):
    """User, password and port of a URL. The host lives on the Url itself.

    Any combination of fields is accepted, a password without a user included.
    """

    user: str | None = None
    password: str | None = None
    port: int | None = pydantic.Field(default=None, ge=0, le=65535)
    model_config = pydantic.ConfigDict(frozen=True, strict=True, extra='forbid')

    @classmethod
    def create(cls, **fields) -> 'Authority':
        try:
            return cls(**fields)
        except pydantic.ValidationError as e:
            logging.debug(f'Rejected authority fields {fields!r}')
            raise InvalidArgument.from_validation_error(e) from e

    def _replace(self, **changes) -> 'Authority':
        return self.create(**{**self.model_dump(), **changes})

    def with_user(self, user: str) -> 'Authority':
        return self._replace(user=user)

    def with_password(self, password: str) -> 'Authority':
        return self._replace(password=password)

    def with_port(self, port: int) -> 'Authority':
        return self._replace(port=port)

    @property
    def userinfo(self) -> str | None:
        if self.user is None and self.password is None:
            return None
        userinfo = quote(self.user or '', safe='')
        if self.password is not None:
            userinfo += ':' + quote(self.password, safe='')
        return userinfo
