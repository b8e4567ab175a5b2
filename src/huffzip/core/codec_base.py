from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from huffzip.core.code_table import CodeTable


@dataclass(frozen=True)
class Packed:
    """Output of a compress call: everything decompress needs, nothing else."""

    packed: bytes
    codes: CodeTable
    n_symbols: int
    nbits: int

    @property
    def bits_per_symbol(self) -> float:
        if self.n_symbols == 0:
            return 0.0
        return self.nbits / self.n_symbols


class Codec(ABC):
    """
    Interfaccia minima per codec a codebook esplicito.

    The codebook is a value returned by compress and handed back to
    decompress; a codec keeps no state between calls.
    """

    codec_id: str

    @abstractmethod
    def compress(self, data: bytes) -> Packed:
        raise NotImplementedError

    @abstractmethod
    def decompress(self, packed: bytes, codes: CodeTable, n_symbols: int) -> bytes:
        raise NotImplementedError
