# File: pyPipeSimLib/arch/isa/mips_subset.py
# --------------------------------------------------------------------
# The ten-instruction MIPS subset: register names, instruction table,
# control signals and the ALU semantic functions.
#
# Date  \ 19 Oct 2026

from dataclasses import dataclass
from typing import Optional, Tuple

from pyPipeSimLib.arch.exceptions import AsmSyntaxError

# Byte-addressed memory bound; instructions and data share it
MAX_MEMORY = 1 << 20
MAX_WORDS  = MAX_MEMORY >> 2
NUM_REGS   = 32

#=====================================================================
# Registers
#=====================================================================
def _register_map():
  regs = {f"${i}": i for i in range(NUM_REGS)}
  regs['$zero'] = 0
  regs['$at'  ] = 1
  regs['$v0'  ] = 2
  regs['$v1'  ] = 3
  for i in range(4):
    regs[f"$a{i}"] = i + 4
  for i in range(8):
    regs[f"$t{i}"] = i + 8
    regs[f"$s{i}"] = i + 16
  regs['$t8'  ] = 24
  regs['$t9'  ] = 25
  regs['$k0'  ] = 26
  regs['$k1'  ] = 27
  regs['$gp'  ] = 28
  regs['$sp'  ] = 29
  regs['$s8'  ] = 30
  regs['$ra'  ] = 31
  return regs

REGISTERS = _register_map()

#=====================================================================
# 32-bit helpers
#=====================================================================
def to_signed_32(value):
  v = value & 0xffffffff
  if v & 0x80000000:
    return v - 0x100000000
  return v

#=====================================================================
# ALU semantic functions
#=====================================================================
def alu_add(a, b):
  return to_signed_32(a + b)

def alu_sub(a, b):
  return to_signed_32(a - b)

def alu_mul(a, b):
  return to_signed_32(a * b)

def alu_slt(a, b):
  return 1 if a < b else 0

# Branch tests report zero when the branch is taken
def alu_beq(a, b):
  return 0 if (a - b) == 0 else 1

def alu_bne(a, b):
  return 1 if (a - b) == 0 else 0

def alu_addr(a, b):
  return a + b

def alu_jump(a, b):
  return 0

#=====================================================================
# Control signals
#=====================================================================
@dataclass(frozen=True)
class ControlSignals:
  reg_dst:    int = 0
  alu_op:     int = 0  # ALUOp[1:0]
  alu_src:    int = 0
  branch:     int = 0
  mem_read:   int = 0
  mem_write:  int = 0
  reg_write:  int = 0
  mem_to_reg: int = 0

  def bits(s):
    return (f"{s.reg_dst}{s.alu_op:02b}{s.alu_src}{s.branch}"
            f"{s.mem_read}{s.mem_write}{s.reg_write}{s.mem_to_reg}")

# Control classes
CTRL_RFORMAT = 0
CTRL_LOAD    = 1
CTRL_STORE   = 2
CTRL_BRANCH  = 3
CTRL_JUMP    = 4

CONTROL_TABLE = {
  CTRL_RFORMAT: ControlSignals(reg_dst=1, alu_op=0b10, reg_write=1),
  CTRL_LOAD   : ControlSignals(alu_src=1, mem_read=1, reg_write=1, mem_to_reg=1),
  CTRL_STORE  : ControlSignals(alu_src=1, mem_write=1),
  CTRL_BRANCH : ControlSignals(alu_op=0b01, branch=1),
  CTRL_JUMP   : ControlSignals(branch=1),
}

#=====================================================================
# Instruction table
#=====================================================================
# Syntax letters:
#   d: destination register    s: first source register
#   t: second source register  i: immediate literal
#   l: label                   m: memory operand, offset(base) or address
def arch():
  insts = {}
  insts['add' ] = {'kind': 'arith',     'syntax': 'd,s,t', 'ctrl': CTRL_RFORMAT, 'funct': alu_add }
  insts['sub' ] = {'kind': 'arith',     'syntax': 'd,s,t', 'ctrl': CTRL_RFORMAT, 'funct': alu_sub }
  insts['mul' ] = {'kind': 'arith',     'syntax': 'd,s,t', 'ctrl': CTRL_RFORMAT, 'funct': alu_mul }
  insts['slt' ] = {'kind': 'arith',     'syntax': 'd,s,t', 'ctrl': CTRL_RFORMAT, 'funct': alu_slt }
  insts['addi'] = {'kind': 'arith_imm', 'syntax': 'd,s,i', 'ctrl': CTRL_RFORMAT, 'funct': alu_add }
  insts['beq' ] = {'kind': 'branch',    'syntax': 's,t,l', 'ctrl': CTRL_BRANCH,  'funct': alu_beq }
  insts['bne' ] = {'kind': 'branch',    'syntax': 's,t,l', 'ctrl': CTRL_BRANCH,  'funct': alu_bne }
  insts['lw'  ] = {'kind': 'mem',       'syntax': 't,m',   'ctrl': CTRL_LOAD,    'funct': alu_addr}
  insts['sw'  ] = {'kind': 'mem',       'syntax': 't,m',   'ctrl': CTRL_STORE,   'funct': alu_addr}
  insts['j'   ] = {'kind': 'jump',      'syntax': 'l',     'ctrl': CTRL_JUMP,    'funct': alu_jump}

  return {
    'name' : 'mips-subset',
    'nregs': NUM_REGS,
    'regs' : REGISTERS,
    'insts': insts,
  }

_ARCH = arch()

def controlSignals(mnemonic, tokens=()):
  if mnemonic not in _ARCH['insts']:
    raise AsmSyntaxError(tokens, f"unknown mnemonic '{mnemonic}'")
  return CONTROL_TABLE[_ARCH['insts'][mnemonic]['ctrl']]

#=====================================================================
# Decoded instruction
#=====================================================================
@dataclass(frozen=True)
class Instruction:
  mnemonic: str
  tokens:   Tuple[str, ...] = ()
  line:     int = 0
  rd:       int = 0
  rs:       int = 0
  rt:       int = 0
  imm:      int = 0
  base:     Optional[int] = None
  offset:   Optional[str] = None  # raw offset token of a memory operand
  label:    Optional[str] = None

  @property
  def kind(s):
    return _ARCH['insts'][s.mnemonic]['kind']

  @property
  def dest(s):
    if controlSignals(s.mnemonic).reg_dst:
      return s.rd
    return s.rt

  def __str__(s):
    return ' '.join(s.tokens) if s.tokens else s.mnemonic
