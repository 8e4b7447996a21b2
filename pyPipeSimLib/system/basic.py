# File: pyPipeSimLib/system/basic.py
# --------------------------------------------------------------------
# A basic system with a pipelined processor and a data memory, plus
# the per-cycle register / memory-delta report.
#
# Date  \ 19 Oct 2026

from dataclasses import dataclass

from pyPipeSimLib.mem  import DataMemory
from pyPipeSimLib.proc import FiveStageBypassProcessor


def formatReport(registers, delta):
  """
  Two lines per cycle: the 32 registers, then the number of changed
  memory words and each (word index, value) pair. Every value is
  followed by a single space.
  """
  regs    = ''.join(f"{r} " for r in registers)
  changes = f"{len(delta)} " + ''.join(f"{w} {v} " for w, v in delta)
  return f"{regs}\n{changes}\n"


@dataclass(frozen=True)
class RunResult:
  cycles:   int
  retired:  int
  finished: bool


class BasicSystem:
  def __init__(s,
               doLinetrace:       bool   = False,
               core_type:         str    = 'bypass',
               bp_type:           str    = 'saturating',
               bp_init:           int    = 2,
               bp_size:           int    = 1 << 16):
    # 1) Data memory
    s.mem = DataMemory()

    # 2) Processor
    s.proc = FiveStageBypassProcessor(
      memory    = s.mem,
      core_type = core_type,
      bp_type   = bp_type,
      bp_init   = bp_init,
      bp_size   = bp_size
    )

    # 3) Linetrace?
    s.doLinetrace = doLinetrace

    s.cycle = 0

  def loader(s, program):
    s.proc.loadProgram(program)

  def isDone(s):             return s.proc.isDone()
  def registers(s):          return s.proc.registers()
  def instCompletionFlag(s): return s.proc.instCompletionFlag()

  def tick(s):
    s.mem .tick()
    s.proc.tick()
    s.cycle = s.cycle + 1

  def report(s):
    return formatReport(s.proc.registers(), s.mem.drain())

  def linetrace(s):
    if not s.doLinetrace: return ''
    return f"{s.cycle:>6}: {s.proc.linetrace()} | >>=||=>> | {s.mem.linetrace()} |"

  def run(s, out=None, trace=None, max_cycles=None):
    """
    Report the initial state, then tick until the pipeline drains,
    reporting after every cycle. Failures propagate as
    SimulationError; nothing is reported for the failing cycle.
    """
    reports = []
    emit    = out.write if out is not None else reports.append

    emit(s.report())
    while not s.isDone():
      if max_cycles is not None and s.cycle >= max_cycles:
        return RunResult(s.cycle, s.proc.retiredCount(), False), reports

      s.tick()

      if s.doLinetrace and trace is not None:
        trace.write(s.linetrace() + '\n')
      emit(s.report())

    return RunResult(s.cycle, s.proc.retiredCount(), True), reports
