# File: pyPipeSimLib/mem/data_memory.py
# --------------------------------------------------------------------
# Word-addressed data memory that remembers which words changed since
# the last report.
#
# Date  \ 19 Oct 2026

from pyPipeSimLib.arch.exceptions import InvalidAddressError
from pyPipeSimLib.arch.isa.mips_subset import MAX_MEMORY, MAX_WORDS


def checkAddress(addr, ninsts, tokens=()):
    """
    Validate a byte address against the memory layout and return its
    word index. The first 4*ninsts bytes hold the program itself.
    """
    if addr % 4 != 0:
        raise InvalidAddressError(tokens, f"address {addr} is not word aligned")
    if addr < 4 * ninsts:
        raise InvalidAddressError(tokens, f"address {addr} overlaps the program")
    if addr >= MAX_MEMORY:
        raise InvalidAddressError(tokens, f"address {addr} is out of bounds")
    return addr // 4


class DataMemory:
    def __init__(self, nwords=MAX_WORDS):
        self.nwords = nwords

        # Storage
        self.words = [0] * nwords

        # Words written with a new value since the last drain
        self.delta = {}

        # Last event marker for linetrace (R/W/W=)
        self.last_event = ''

    def read(self, word):
        self.last_event = f"R[{word}]"
        return self.words[word]

    def write(self, word, value):
        if self.words[word] != value:
            self.delta[word] = value
            self.last_event = f"W[{word}]"
        else:
            self.last_event = f"W=[{word}]"
        self.words[word] = value

    def drain(self):
        """Hand back the changed words in write order and forget them."""
        changes = list(self.delta.items())
        self.delta.clear()
        return changes

    def nonzero(self):
        return {i: v for i, v in enumerate(self.words) if v != 0}

    def tick(self):
        self.last_event = ''

    def linetrace(self):
        return f"{self.last_event:<10}"
