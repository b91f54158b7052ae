import struct
from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

from .stream import Stream, read_exact

T_Record = TypeVar('T_Record')


@dataclass(frozen=True)
class StructuredTuple(Generic[T_Record]):
    """Fixed binary layout mapped onto named fields of a record type.

    Field order follows the layout, so records may declare fields
    in any order (and with defaults).
    """

    _fields: Sequence[str]
    _structure: struct.Struct
    _factory: Callable[..., T_Record]

    @property
    def size(self) -> int:
        return self._structure.size

    def unpack(self, stream: Stream, what: str = 'structure') -> T_Record:
        values = self._structure.unpack(read_exact(stream, self.size, what))
        return self._factory(**dict(zip(self._fields, values)))

    def pack(self, record: T_Record) -> bytes:
        return self._structure.pack(*(getattr(record, field) for field in self._fields))
