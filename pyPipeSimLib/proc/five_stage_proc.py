# File: pyPipeSimLib/proc/five_stage_proc.py
# --------------------------------------------------------------------
# Processor wrapper: picks a core and, for the speculative core,
# attaches a branch predictor.
#
# Date  \ 19 Oct 2026

from pyPipeSimLib.predictor          import PREDICTORS, SaturatingBHRBranchPredictor
from pyPipeSimLib.proc.core          import (
    FiveStageBypassCore,
    SingleCycleCore,
    SpeculativeBypassCore,
)

CORE_TYPES = ('bypass', 'speculative', 'single')


class FiveStageBypassProcessor:
    def __init__(self,
                 memory          = None,
                 core_type:  str = 'bypass',
                 bp_type:    str = 'saturating',
                 bp_init:    int = 2,
                 bp_size:    int = 1 << 16):
        if core_type not in CORE_TYPES:
            raise ValueError(f"unknown core type '{core_type}'")
        if bp_type not in PREDICTORS:
            raise ValueError(f"unknown branch predictor '{bp_type}'")

        # 1) Branch predictor
        if bp_type == 'saturating-bhr':
            self.bp = SaturatingBHRBranchPredictor(init=bp_init, size=bp_size)
        else:
            self.bp = PREDICTORS[bp_type](init=bp_init)

        # 2) Core
        self.core_type = core_type
        if core_type == 'speculative':
            self.core = SpeculativeBypassCore(memory=memory, bp=self.bp)
        elif core_type == 'single':
            self.core = SingleCycleCore(memory=memory)
        else:
            self.core = FiveStageBypassCore(memory=memory)

    def loadProgram(s, program): s.core.loadProgram(program)

    # Architectural state
    def registers(s):          return list(s.core.rf)
    def cycleCount(s):         return s.core.cycle_count
    def retiredCount(s):       return s.core.retired

    # Flags / exit
    def isDone(s):             return s.core.isDone()
    def instCompletionFlag(s): return s.core.instCompletionFlag()

    # Advance one cycle
    def tick(s):
        s.core.tick()

    def linetrace(s):
        return s.core.linetrace()

    def report(s):
        if s.core_type != 'speculative':
            return ''
        return s.bp.report()
