# five_stage_core.py
# --------------------------------------------------------------------
# Five-stage in-order core with full operand forwarding. Control
# hazards are handled by stalling fetch while a branch or jump is in
# flight, so no wrong-path instruction is ever fetched.
#
# Date  \ 19 Oct 2026

from pyPipeSimLib.arch.exceptions import AsmSyntaxError, InvalidAddressError, InvalidLabelError
from pyPipeSimLib.arch.isa import mips_subset
from pyPipeSimLib.arch.isa.mips_subset import controlSignals
from pyPipeSimLib.loader.asm_loader import Program
from pyPipeSimLib.mem.data_memory import DataMemory, checkAddress
from pyPipeSimLib.proc.core.scoreboard import CONTROL, Scoreboard


class FiveStageBypassCore():
  def __init__(s, program=None, memory=None):
    # Cycle Count
    s.cycle_count = 0

    s.arch = mips_subset.arch()

    # Program store and data memory
    s.program = program if program is not None else Program()
    s.mem     = memory  if memory  is not None else DataMemory()

    # Pipeline Registers
    s.f2d = None
    s.d2x = None
    s.x2m = None
    s.m2w = None

    # Fetch state
    s.pc          = 0
    s.seq         = 0
    s.redirect_pc = None

    # Execution state
    s.rf = [0 for _ in range(s.arch['nregs'])]

    # Scoreboard / forwarding table
    s.scoreboard = Scoreboard(s.arch['nregs'])

    # Flags
    s.inst_c  = False
    s.retired = 0
    s.lt_buf  = ''

  def loadProgram(s, program):
    s.program = program

  def isDone(s):
    empty = (s.f2d is None and s.d2x is None and
             s.x2m is None and s.m2w is None)
    return empty and s.redirect_pc is None and s.pc >= len(s.program)

  def instCompletionFlag(s):
    return s.inst_c

  #======================
  # Control-hazard policy
  #======================
  def controlBlocked(s):
    return s.scoreboard.controlBlocked()

  def claimControl(s, seq):
    s.scoreboard.claim(CONTROL, seq)

  def predictNext(s, fetch):
    """Fetch stays sequential here; the speculative core overrides this."""

  def resolveControl(s, dinst):
    s.scoreboard.complete(dinst['seq'])
    if dinst['zero']:
      s.redirect_pc = dinst['target']

  def fault(s, dinst, exc):
    raise exc

  # Stages are implemented as functions
  #=====================================================================
  # Fetch Stage
  #=====================================================================
  def f(s):
    lt_buf = ''

    # Only fetch if fetch->decode register is empty
    if s.f2d is None:
      if s.controlBlocked():
        lt_buf = f"{'S br':<10}"
      else:
        if s.redirect_pc is not None:
          s.pc          = s.redirect_pc
          s.redirect_pc = None

        if s.pc < len(s.program):
          ppc   = s.pc
          s.seq = s.seq + 1
          s.scoreboard.allocate(s.seq, ppc)

          s.f2d = {'seq': s.seq, 'pc': ppc, 'npc': ppc + 1, 'pred_taken': False}
          s.predictNext(s.f2d)

          s.pc   = s.f2d['npc']
          lt_buf = f"{ppc:<10}"
        else:
          lt_buf = f"{'':<10}"
    else:
      # Decode is holding this slot
      lt_buf = f"{'S <<<':<10}"

    return lt_buf

  #=====================================================================
  # Decode Stage
  #=====================================================================
  ### Aux methods and functions
  def makeDinst(s, fetch):
    inst = s.program[fetch['pc']]

    dinst = {}
    dinst['seq'       ] = fetch['seq']
    dinst['pc'        ] = fetch['pc']
    dinst['npc'       ] = fetch['npc']
    dinst['pred_taken'] = fetch['pred_taken']
    dinst['inst'      ] = inst
    dinst['mnemonic'  ] = inst.mnemonic
    dinst['ctrl'      ] = controlSignals(inst.mnemonic, inst.tokens)
    dinst['rs_data'   ] = 0
    dinst['rt_data'   ] = 0
    dinst['imm'       ] = 0
    dinst['target'    ] = None
    dinst['rd'        ] = 0
    dinst['alu_res'   ] = 0
    dinst['zero'      ] = False
    dinst['mem_data'  ] = 0
    dinst['fault'     ] = None

    return dinst

  def operandReads(s, inst):
    """Registers read at decode, as (latch field, register) pairs."""
    kind = inst.kind
    if   kind == 'arith'    : return [('rs_data', inst.rs), ('rt_data', inst.rt)]
    elif kind == 'arith_imm': return [('rs_data', inst.rs)]
    elif kind == 'branch'   : return [('rs_data', inst.rs), ('rt_data', inst.rt)]
    elif kind == 'mem':
      reads = []
      if inst.base is not None:
        reads.append(('rs_data', inst.base))
      if inst.mnemonic == 'sw':
        reads.append(('rt_data', inst.rt))
      return reads
    return []

  def resolveOperands(s, dinst):
    """
    Read operands through the scoreboard and fill the decode->execute
    record. Returns False when a producer has not computed its result
    yet; nothing is claimed in that case.
    """
    inst = dinst['inst']
    ctrl = dinst['ctrl']
    seq  = dinst['seq']

    values = {}
    for field, reg in s.operandReads(inst):
      ready, value = s.scoreboard.lookup(reg, s.rf)
      if not ready:
        return False
      values[field] = value
    dinst.update(values)

    if inst.kind == 'arith_imm':
      # The literal travels in the second read-data slot
      dinst['rt_data'] = inst.imm

    elif inst.kind == 'mem':
      try:
        dinst['imm'] = s.program.offset(inst)
        checkAddress(dinst['rs_data'] + dinst['imm'], len(s.program), inst.tokens)
      except (AsmSyntaxError, InvalidAddressError) as exc:
        s.fault(dinst, exc)

    elif inst.kind in ('branch', 'jump'):
      try:
        dinst['target'] = s.program.target(inst)
      except InvalidLabelError as exc:
        s.fault(dinst, exc)

    # update scoreboard
    if ctrl.reg_write:
      dinst['rd'] = inst.dest
      s.scoreboard.claim(inst.dest, seq)
    if ctrl.branch:
      s.claimControl(seq)

    return True

  ### Decode stage itself
  def d(s):
    lt_buf = ''

    if s.f2d is not None and s.d2x is None:
      dinst = s.makeDinst(s.f2d)

      if s.resolveOperands(dinst):
        s.d2x  = dinst
        s.f2d  = None
        lt_buf = f"{dinst['mnemonic']:<8}"
      else:
        lt_buf = f"{'S raw':<8}"
    elif s.f2d is not None and s.d2x is not None:
      lt_buf = f"{'S <<<':<8}"
    else:
      lt_buf = f"{'':<8}"

    return lt_buf

  #=====================================================================
  # Execute Stage
  #=====================================================================
  def x(s):
    if   s.d2x is not None and s.x2m is     None:
      dinst = s.d2x
      ctrl  = dinst['ctrl']

      op1 = dinst['rs_data']
      op2 = dinst['imm'] if ctrl.alu_src else dinst['rt_data']

      funct  = s.arch['insts'][dinst['mnemonic']]['funct']
      result = funct(op1, op2)

      dinst['alu_res'] = result
      dinst['zero'   ] = (result == 0)

      # Loads only know their result after memory
      if not (ctrl.mem_read or ctrl.mem_write):
        s.scoreboard.produce(dinst['seq'], result)

      # Go forward
      s.x2m = dinst
      s.d2x = None

      return '{: <8}'.format(dinst['mnemonic'])
    elif s.d2x is not None and s.x2m is not None:
      return '{: <8}'.format('S <<<')
    else:
      return '{: <8}'.format(' ')

  #=====================================================================
  # Memory Stage
  #=====================================================================
  def m(s):
    if   s.x2m is not None and s.m2w is     None:
      dinst = s.x2m
      ctrl  = dinst['ctrl']
      seq   = dinst['seq']

      if dinst['fault'] is not None:
        raise dinst['fault']

      if ctrl.branch and not ctrl.mem_read:
        s.resolveControl(dinst)

      if ctrl.mem_write:
        word = dinst['alu_res'] // 4
        s.mem.write(word, dinst['rt_data'])
        s.scoreboard.produce(seq, dinst['rt_data'])
        s.scoreboard.complete(seq)

      if ctrl.mem_read:
        word = dinst['alu_res'] // 4
        dinst['mem_data'] = s.mem.read(word)
        s.scoreboard.produce(seq, dinst['mem_data'])

      # Go forward
      s.m2w = dinst
      s.x2m = None

      return '{: <8}'.format(dinst['mnemonic'])
    elif s.x2m is not None and s.m2w is not None:
      return '{: <8}'.format('S <<<')
    else:
      return '{: <8}'.format(' ')

  #=====================================================================
  # Writeback Stage
  #=====================================================================
  def w(s):
    lt_buf = ''

    if s.m2w is not None:
      dinst = s.m2w
      ctrl  = dinst['ctrl']

      if ctrl.mem_to_reg:
        wb_data = dinst['mem_data']
      else:
        wb_data = dinst['alu_res']

      if ctrl.reg_write:
        s.rf[dinst['rd']] = wb_data

      s.scoreboard.complete(dinst['seq'])
      s.scoreboard.retire(dinst['seq'])

      # We completed an instruction
      s.retired = s.retired + 1
      s.inst_c  = True
      lt_buf    = dinst['mnemonic']

      # Keep ticking...
      s.m2w = None

    # Linetracing
    return '{: <8}'.format(lt_buf)

  #=====================================================================
  # Tick
  #=====================================================================
  def tick(s):
    # Reset
    s.inst_c = False

    # Tick backwards: each stage consumes its input latch before the
    # stage behind it overwrites it
    lt_array = []
    lt_array.insert(0, s.w())
    lt_array.insert(0, s.m())
    lt_array.insert(0, s.x())
    lt_array.insert(0, s.d())
    lt_array.insert(0, s.f())

    s.cycle_count = s.cycle_count + 1

    # Linetrace
    s.lt_buf = ''
    for i, lt in enumerate(lt_array):
      if i != 0: s.lt_buf += " | "
      s.lt_buf += lt

  def linetrace(s):
    return s.lt_buf
