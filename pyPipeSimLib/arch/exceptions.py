# File: pyPipeSimLib/arch/exceptions.py
# --------------------------------------------------------------------
# Exit codes and the failures that end a simulation run.
#
# Date  \ 19 Oct 2026

from enum import IntEnum


class ExitCode(IntEnum):
  SUCCESS          = 0
  INVALID_REGISTER = 1
  INVALID_LABEL    = 2
  INVALID_ADDRESS  = 3
  SYNTAX_ERROR     = 4
  MEMORY_ERROR     = 5


class SimulationError(Exception):
  """
  Base class for every fatal condition of a run. Carries the exit code of
  its category and the source tokens of the offending instruction.
  """
  code    = None
  message = ''

  def __init__(s, tokens=(), detail=None):
    s.tokens = tuple(tokens)
    s.detail = detail
    text = s.message
    if detail:
      text = f"{text} ({detail})"
    super().__init__(text)

  def diagnostic(s):
    lines  = [s.message]
    lines += ['Error encountered at:']
    lines += [''.join(f"{t} " for t in s.tokens)]
    return '\n'.join(lines) + '\n'


class InvalidRegisterError(SimulationError):
  code    = ExitCode.INVALID_REGISTER
  message = 'Invalid register provided or syntax error in providing register'


class InvalidLabelError(SimulationError):
  code    = ExitCode.INVALID_LABEL
  message = 'Label used not defined or defined too many times'


class InvalidAddressError(SimulationError):
  code    = ExitCode.INVALID_ADDRESS
  message = 'Unaligned or invalid memory address specified'


class AsmSyntaxError(SimulationError):
  code    = ExitCode.SYNTAX_ERROR
  message = 'Syntax error encountered'


class MemoryLimitError(SimulationError):
  code    = ExitCode.MEMORY_ERROR
  message = 'Memory limit exceeded'
