# File: pyPipeSimLib/predictor/saturating.py
# --------------------------------------------------------------------
# PC-indexed table of 2-bit saturating counters.
#
# Date  \ 19 Oct 2026

from pyPipeSimLib.predictor.base import (
    PC_MASK,
    BranchPredictor,
    check_counter,
    counter_taken,
    saturate,
)


class SaturatingBranchPredictor(BranchPredictor):
    name = 'Saturating'

    def __init__(self, init=2):
        super().__init__()
        check_counter(init)
        self.table_size = PC_MASK + 1
        self.table      = [init] * self.table_size

    def index(self, pc: int) -> int:
        return pc & PC_MASK

    def predict(self, pc: int) -> bool:
        return counter_taken(self.table[self.index(pc)])

    def update(self, pc: int, taken: bool):
        idx = self.index(pc)
        self.table[idx] = saturate(self.table[idx], taken)
