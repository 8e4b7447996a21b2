from pyPipeSimLib.arch.exceptions import (
  ExitCode,
  SimulationError,
  InvalidRegisterError,
  InvalidLabelError,
  InvalidAddressError,
  AsmSyntaxError,
  MemoryLimitError,
)
