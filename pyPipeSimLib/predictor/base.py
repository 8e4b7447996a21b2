# File: pyPipeSimLib/predictor/base.py
# --------------------------------------------------------------------
# Common contract and counter helpers for the branch predictors.
#
# Date  \ 19 Oct 2026

COUNTER_MAX = 3
PC_MASK     = 0x3fff
BHR_MASK    = 0x3


def check_counter(value: int) -> int:
    if not 0 <= value <= COUNTER_MAX:
        raise ValueError(f"2-bit counter value must be in [0, 3], got {value}")
    return value


def saturate(value: int, taken: bool) -> int:
    """Move a 2-bit counter one step toward the outcome, never wrapping."""
    if taken:
        if value < COUNTER_MAX: value += 1
    else:
        if value > 0: value -= 1
    return value


def counter_taken(value: int) -> bool:
    # High bit of the counter
    return bool(value & 0x2)


def shift_history(bhr: int, taken: bool) -> int:
    return ((bhr << 1) | int(taken)) & BHR_MASK


class BranchPredictor:
    name = 'base'

    def __init__(self):
        # Stats
        self.predictions    = 0
        self.mispredictions = 0

    def predict(self, pc: int) -> bool:
        raise NotImplementedError

    def update(self, pc: int, taken: bool):
        raise NotImplementedError

    def report(self) -> str:
        if self.predictions == 0:
            return f"{self.name}: no branches predicted"
        correct = self.predictions - self.mispredictions
        acc = 100.0 * correct / self.predictions
        return f"{self.name}: {correct}/{self.predictions} correct ({acc:.2f}% accuracy)"
