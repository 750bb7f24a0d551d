import typing

import pydantic


class InvalidArgument(ValueError):
    def __init__(self, message: str, argument: str | None = None, value: typing.Any = None):
        self.message = message
        self.argument = argument
        self.value = value
        super().__init__(message)

    @classmethod
    def from_validation_error(cls, error: pydantic.ValidationError) -> 'InvalidArgument':
        # report the first failing field, pydantic keeps the rest in the chained error
        first = error.errors()[0]
        location = '.'.join(str(part) for part in first['loc']) or None
        message = f'{location}: {first["msg"]}' if location else first['msg']
        return cls(message, argument=location, value=first.get('input'))
