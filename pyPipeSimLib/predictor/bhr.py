# File: pyPipeSimLib/predictor/bhr.py
# --------------------------------------------------------------------
# Global branch-history predictor: the last two outcomes select one of
# four 2-bit counters. The PC is not used.
#
# Date  \ 19 Oct 2026

from pyPipeSimLib.predictor.base import (
    BHR_MASK,
    BranchPredictor,
    check_counter,
    counter_taken,
    saturate,
    shift_history,
)


class BHRBranchPredictor(BranchPredictor):
    name = 'BHR'

    def __init__(self, init=2):
        super().__init__()
        check_counter(init)
        self.bhrTable = [init] * (BHR_MASK + 1)
        # The history register starts from the same 2-bit pattern
        self.bhr      = init & BHR_MASK

    def predict(self, pc: int) -> bool:
        return counter_taken(self.bhrTable[self.bhr])

    def update(self, pc: int, taken: bool):
        idx = self.bhr
        self.bhrTable[idx] = saturate(self.bhrTable[idx], taken)
        self.bhr = shift_history(self.bhr, taken)
