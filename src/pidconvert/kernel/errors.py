from typing import Optional


class PidError(Exception):
    """Base class for every failure of a single conversion."""


class FormatError(PidError, ValueError):
    pass


class InvalidSignatureError(FormatError):
    def __init__(self, signature: int) -> None:
        super().__init__(f'Expected PID signature 10 but got {signature}')
        self.signature = signature


class InvalidGeometryError(FormatError):
    def __init__(self, width: int, height: int) -> None:
        super().__init__(f'Invalid image geometry: width={width} height={height}')
        self.width = width
        self.height = height


class TruncatedError(FormatError, EOFError):
    def __init__(self, what: str, expected: int, given: int) -> None:
        super().__init__(f'Truncated {what}: expected {expected} bytes but got {given}')
        self.what = what
        self.expected = expected
        self.given = given


class UnsupportedFormatError(FormatError):
    def __init__(self, format_id: Optional[str]) -> None:
        super().__init__(f'Unsupported target format: {format_id}')
        self.format_id = format_id


class DecodeError(PidError, EOFError):
    def __init__(self, expected: int, given: int) -> None:
        super().__init__(
            f'Pixel stream exhausted: expected {expected} indices but got {given}'
        )
        self.expected = expected
        self.given = given


class EncodeError(PidError):
    def __init__(self, target: str, reason: str) -> None:
        super().__init__(f'{target}: {reason}')
        self.target = target
        self.reason = reason
