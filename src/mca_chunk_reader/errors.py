"""Exceptions raised while reading region files and NBT data."""


class NBTError(ValueError):
    """Base class for every error raised by this package."""


class DecodeError(NBTError):
    """The NBT byte stream could not be decoded."""

    def __init__(self, message: str, *, position: int | None = None, path: list | None = None):
        self.position = position
        self.path = list(path) if path else []
        self.reason = message
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [self.reason]
        if self.position is not None:
            parts.append(f'at byte {self.position}')
        if self.path:
            parts.append('in ' + '/'.join(str(p) for p in self.path))
        return ' '.join(parts)

    def located(self, position: int, path: list) -> 'DecodeError':
        """Attach the byte position and tag path if not already known."""
        if self.position is None:
            self.position = position
        if not self.path:
            self.path = list(path)
        self.args = (self._format(),)
        return self


class UnexpectedEnd(DecodeError):
    pass


class InvalidEncoding(DecodeError):
    pass


class InvalidLength(DecodeError):
    pass


class NestingTooDeep(DecodeError):
    pass


class UnknownTagType(DecodeError):
    def __init__(self, type_code: int, **kwargs):
        self.type_code = type_code
        super().__init__(f'Unknown NBT tag type: {type_code}', **kwargs)


class RegionError(NBTError):
    """A chunk record in the region file is unreadable."""

    def __init__(self, message: str, *, offset: int | None = None):
        self.offset = offset
        if offset is not None:
            message = f'{message} (chunk at byte {offset})'
        super().__init__(message)


class UnsupportedCompression(RegionError):
    def __init__(self, scheme: int, **kwargs):
        self.scheme = scheme
        super().__init__(f'Unsupported compression scheme: {scheme}', **kwargs)


class Truncated(RegionError):
    pass


class DecompressionFailed(RegionError):
    pass


class AccessError(NBTError):
    """A traversal found structure other than what it asked for."""


class MissingField(AccessError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Compound has no member named {name!r}')


class TypeMismatch(AccessError):
    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f'Expected {expected.name} tag, found {actual.name}')
