# File: pyPipeSimLib/loader/asm_loader.py
# --------------------------------------------------------------------
# Assembly loader: turns source text into the program store (decoded
# instruction list plus label table).
#
# Date  \ 19 Oct 2026

import re
from dataclasses import dataclass, field
from typing import Dict, List

from pyPipeSimLib.arch.exceptions import (
  AsmSyntaxError,
  InvalidLabelError,
  InvalidRegisterError,
  MemoryLimitError,
)
from pyPipeSimLib.arch.isa.mips_subset import (
  MAX_WORDS,
  Instruction,
  arch,
  controlSignals,
)
from pyPipeSimLib.mem.data_memory import checkAddress

# A label defined more than once maps here; any use of it fails
LABEL_REDEFINED = -1

TOKEN_SEP_RE = re.compile(r"[,\s]+")
LITERAL_RE   = re.compile(r"^[+-]?\d+$")
LABEL_RE     = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")
MEM_EXPR_RE  = re.compile(r"^(?P<offset>[^()]*)\((?P<base>[^()]*)\)$")


@dataclass
class Program:
  instructions: List[Instruction] = field(default_factory=list)
  labels:       Dict[str, int]    = field(default_factory=dict)

  def __len__(s):
    return len(s.instructions)

  def __getitem__(s, idx):
    return s.instructions[idx]

  def target(s, inst):
    """Resolve the label of a branch or jump to an instruction index."""
    idx = s.labels.get(inst.label, LABEL_REDEFINED)
    if idx == LABEL_REDEFINED:
      raise InvalidLabelError(inst.tokens, f"label '{inst.label}'")
    return idx

  def offset(s, inst):
    """
    Byte offset of a memory operand. The literal is only parsed here, at
    first use, so a malformed one fails when its instruction is decoded.
    """
    if not LITERAL_RE.match(inst.offset):
      raise AsmSyntaxError(inst.tokens, f"bad literal '{inst.offset}'")
    return int(inst.offset)


class AsmLoader:
  def __init__(s):
    s.arch = arch()

  def loadFile(s, path):
    with open(path, 'r') as f:
      return s.load(f.read())

  def load(s, text):
    program = Program()

    for lineno, line in enumerate(text.splitlines(), start=1):
      s.parseLine(program, line, lineno)

    if len(program) >= MAX_WORDS:
      raise MemoryLimitError(program[MAX_WORDS - 1].tokens,
                             f"{len(program)} instructions")

    # Absolute addresses can only be checked once the footprint is known
    for inst in program.instructions:
      if inst.kind == 'mem' and inst.base is None and LITERAL_RE.match(inst.offset):
        checkAddress(inst.imm, len(program), inst.tokens)

    return program

  #=====================================================================
  # Lines and labels
  #=====================================================================
  def tokenize(s, line):
    line = line.split('#', 1)[0]
    return [t for t in TOKEN_SEP_RE.split(line) if t]

  def defineLabel(s, program, label, tokens):
    if not LABEL_RE.match(label) or label in s.arch['insts']:
      raise AsmSyntaxError(tokens, f"bad label '{label}'")
    if label in program.labels:
      program.labels[label] = LABEL_REDEFINED
    else:
      program.labels[label] = len(program)

  def parseLine(s, program, line, lineno=0):
    tokens = s.tokenize(line)
    if not tokens:
      return

    full = tuple(tokens)

    # label:  |  label: inst ...  |  label:inst ...
    if ':' in tokens[0]:
      label, rest = tokens[0].split(':', 1)
      s.defineLabel(program, label, full)
      tokens = ([rest] if rest else []) + tokens[1:]
    # label : inst ...  |  label :inst ...
    elif len(tokens) > 1 and tokens[1].startswith(':'):
      s.defineLabel(program, tokens[0], full)
      rest = tokens[1][1:]
      tokens = ([rest] if rest else []) + tokens[2:]

    if not tokens:
      return

    program.instructions.append(s.parseInstruction(tokens, lineno))

  #=====================================================================
  # Instructions
  #=====================================================================
  def parseInstruction(s, tokens, lineno=0):
    tokens   = tuple(tokens)
    mnemonic = tokens[0]
    controlSignals(mnemonic, tokens)  # rejects unknown mnemonics
    syntax   = s.arch['insts'][mnemonic]['syntax'].split(',')

    if len(tokens) - 1 != len(syntax):
      raise AsmSyntaxError(tokens, f"'{mnemonic}' takes {len(syntax)} operands")

    fields = {}
    for op, tok in zip(syntax, tokens[1:]):
      if   op == 'd': fields['rd'   ] = s.register(tok, tokens)
      elif op == 's': fields['rs'   ] = s.register(tok, tokens)
      elif op == 't': fields['rt'   ] = s.register(tok, tokens)
      elif op == 'i': fields['imm'  ] = s.literal(tok, tokens)
      elif op == 'l': fields['label'] = s.labelRef(tok, tokens)
      elif op == 'm':
        fields['base'], fields['offset'] = s.memoryOperand(tok, tokens)
        if LITERAL_RE.match(fields['offset']):
          fields['imm'] = int(fields['offset'])

    return Instruction(mnemonic=mnemonic, tokens=tokens, line=lineno, **fields)

  def register(s, tok, tokens):
    if tok not in s.arch['regs']:
      raise InvalidRegisterError(tokens, f"register '{tok}'")
    return s.arch['regs'][tok]

  def literal(s, tok, tokens):
    if not LITERAL_RE.match(tok):
      raise AsmSyntaxError(tokens, f"bad literal '{tok}'")
    return int(tok)

  def labelRef(s, tok, tokens):
    if not LABEL_RE.match(tok) or tok in s.arch['insts']:
      raise AsmSyntaxError(tokens, f"bad label '{tok}'")
    return tok

  def memoryOperand(s, tok, tokens):
    """Return (base register or None, raw offset token)."""
    m = MEM_EXPR_RE.match(tok)
    if m is None:
      return None, tok
    base = s.register(m.group('base'), tokens)
    return base, (m.group('offset') or '0')
