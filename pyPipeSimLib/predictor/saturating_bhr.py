# File: pyPipeSimLib/predictor/saturating_bhr.py
# --------------------------------------------------------------------
# Combined predictor: one 2-bit counter per (PC bucket, history) pair.
# The PC-only and history-only tables are trained alongside so other
# policies can share the same state object.
#
# Date  \ 19 Oct 2026

from pyPipeSimLib.predictor.base import (
    BHR_MASK,
    PC_MASK,
    BranchPredictor,
    check_counter,
    counter_taken,
    saturate,
    shift_history,
)

MAX_COMBINED_SIZE = 1 << 16


class SaturatingBHRBranchPredictor(BranchPredictor):
    """
    One counter per (PC bucket, history) pair. The table holds at least one
    bucket of four history slots, so sizes below 4 are rejected along with
    sizes above 2^16.
    """
    name = 'Saturating+BHR'

    def __init__(self, init=2, size=MAX_COMBINED_SIZE):
        super().__init__()
        check_counter(init)
        if not (BHR_MASK + 1) <= size <= MAX_COMBINED_SIZE:
            raise ValueError(f"combined table size must be in [4, {MAX_COMBINED_SIZE}], got {size}")

        self.size        = size
        self.pc_buckets  = size // (BHR_MASK + 1)
        self.combination = [init] * size
        self.table       = [init] * (PC_MASK + 1)
        self.bhrTable    = [init] * (BHR_MASK + 1)
        self.bhr         = init & BHR_MASK

    def index(self, pc: int) -> int:
        bucket = (pc & PC_MASK) % self.pc_buckets
        return bucket * (BHR_MASK + 1) + self.bhr

    def predict(self, pc: int) -> bool:
        return counter_taken(self.combination[self.index(pc)])

    def predict_pc(self, pc: int) -> bool:
        return counter_taken(self.table[pc & PC_MASK])

    def predict_history(self) -> bool:
        return counter_taken(self.bhrTable[self.bhr])

    def update(self, pc: int, taken: bool):
        comb_idx = self.index(pc)
        sat_idx  = pc & PC_MASK
        bhr_idx  = self.bhr

        self.combination[comb_idx] = saturate(self.combination[comb_idx], taken)
        self.table[sat_idx]        = saturate(self.table[sat_idx], taken)
        self.bhrTable[bhr_idx]     = saturate(self.bhrTable[bhr_idx], taken)

        self.bhr = shift_history(self.bhr, taken)
