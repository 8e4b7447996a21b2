#!/usr/bin/env python3
# File: pyPipeSim.py
# --------------------------------------------------------------------
# Command-line driver: load an assembly file, run it through the
# selected core and print the per-cycle register / memory report.
#
# Date  \ 19 Oct 2026

import argparse
import sys

from pyPipeSimLib.arch   import ExitCode, SimulationError
from pyPipeSimLib.loader import AsmLoader
from pyPipeSimLib.predictor import PREDICTORS
from pyPipeSimLib.proc   import CORE_TYPES
from pyPipeSimLib.system import BasicSystem


def build_parser():
  parser = argparse.ArgumentParser(description="5-stage bypassing MIPS pipeline simulator")
  parser.add_argument('asm_file', type=argparse.FileType('r'), help="Assembly program")
  parser.add_argument('--core', choices=CORE_TYPES, default='bypass',
                      help="Pipeline model (default: bypass)")
  parser.add_argument('--bp', choices=sorted(PREDICTORS), default='saturating',
                      help="Branch predictor for the speculative core")
  parser.add_argument('--bp-init', type=int, default=2, metavar='N',
                      help="Initial 2-bit counter value (0-3)")
  parser.add_argument('--bp-size', type=int, default=1 << 16, metavar='N',
                      help="Combined predictor table size")
  parser.add_argument('--max-cycles', type=int, default=None, metavar='N',
                      help="Stop after N cycles")
  parser.add_argument('--linetrace', action='store_true',
                      help="Print a per-cycle pipeline trace to stderr")
  return parser


def main(argv=None):
  parser = build_parser()
  args   = parser.parse_args(argv)

  try:
    system = BasicSystem(
      doLinetrace = args.linetrace,
      core_type   = args.core,
      bp_type     = args.bp,
      bp_init     = args.bp_init,
      bp_size     = args.bp_size
    )
  except ValueError as e:
    parser.error(str(e))

  with args.asm_file as f:
    source = f.read()

  try:
    system.loader(AsmLoader().load(source))
    result, _ = system.run(out=sys.stdout, trace=sys.stderr, max_cycles=args.max_cycles)
  except SimulationError as e:
    sys.stdout.write('\n')
    sys.stdout.flush()
    sys.stderr.write(e.diagnostic())
    return int(e.code)

  # The last report already ends stdout with its newline
  if not result.finished:
    sys.stderr.write(f"Cycle limit reached after {result.cycles} cycles\n")
  else:
    sys.stderr.write(f"Simulation finished after {result.cycles} cycles\n")
  bp_report = system.proc.report()
  if bp_report:
    sys.stderr.write(bp_report + '\n')

  return int(ExitCode.SUCCESS)


if __name__ == '__main__':
  sys.exit(main())
