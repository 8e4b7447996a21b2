# single_cycle_core.py
# --------------------------------------------------------------------
# Non-pipelined reference interpreter: one instruction per cycle, no
# hazards. Pipelined cores must end in the same architectural state.
#
# Date  \ 19 Oct 2026

from pyPipeSimLib.arch.isa import mips_subset
from pyPipeSimLib.arch.isa.mips_subset import controlSignals
from pyPipeSimLib.loader.asm_loader import Program
from pyPipeSimLib.mem.data_memory import DataMemory, checkAddress


class SingleCycleCore():
  def __init__(s, program=None, memory=None):
    s.cycle_count = 0

    s.arch    = mips_subset.arch()
    s.program = program if program is not None else Program()
    s.mem     = memory  if memory  is not None else DataMemory()

    s.pc = 0
    s.rf = [0 for _ in range(s.arch['nregs'])]

    s.inst_c  = False
    s.retired = 0
    s.lt_buf  = ''

  def loadProgram(s, program):
    s.program = program

  def isDone(s):
    return s.pc >= len(s.program)

  def instCompletionFlag(s):
    return s.inst_c

  def tick(s):
    s.inst_c = False
    s.lt_buf = ''
    if s.isDone():
      return

    inst  = s.program[s.pc]
    ctrl  = controlSignals(inst.mnemonic, inst.tokens)
    funct = s.arch['insts'][inst.mnemonic]['funct']
    npc   = s.pc + 1

    rs_data = s.rf[inst.rs]
    rt_data = inst.imm if inst.kind == 'arith_imm' else s.rf[inst.rt]

    if inst.kind == 'mem':
      base = s.rf[inst.base] if inst.base is not None else 0
      word = checkAddress(base + s.program.offset(inst), len(s.program), inst.tokens)
      if ctrl.mem_write:
        s.mem.write(word, rt_data)
      else:
        s.rf[inst.dest] = s.mem.read(word)

    elif inst.kind in ('branch', 'jump'):
      target = s.program.target(inst)
      if funct(rs_data, rt_data) == 0:
        npc = target

    else:
      s.rf[inst.dest] = funct(rs_data, rt_data)

    s.lt_buf = f"{s.pc:<10} | {inst.mnemonic:<8}"

    s.pc          = npc
    s.retired     = s.retired + 1
    s.inst_c      = True
    s.cycle_count = s.cycle_count + 1

  def linetrace(s):
    return s.lt_buf
