import os

from pyPipeSimLib.loader import AsmLoader
from pyPipeSimLib.system import BasicSystem

ASMS_DIR = os.path.join(os.path.dirname(__file__), "asms")


def load(text):
    return AsmLoader().load(text)


def run_source(text, max_cycles=100000, out=None, **kwargs):
    """Load and run a program; returns (system, result, reports)."""
    system = BasicSystem(**kwargs)
    system.loader(load(text))
    result, reports = system.run(out=out, max_cycles=max_cycles)
    return system, result, reports


def parse_report(report: str) -> tuple[list[int], list[tuple[int, int]]]:
    """Split one cycle's report into (registers, memory delta pairs)."""
    reg_line, delta_line = report.split("\n")[:2]
    regs = [int(v) for v in reg_line.split()]
    fields = [int(v) for v in delta_line.split()]
    count, pairs = fields[0], fields[1:]
    assert len(pairs) == 2 * count, f"Malformed delta line: {delta_line!r}"
    return regs, list(zip(pairs[0::2], pairs[1::2]))


def iter_asm_tests(asms_dir: str = ASMS_DIR):
    for entry in sorted(os.listdir(asms_dir)):
        if not entry.endswith(".asm"):
            continue
        name = entry[: -len(".asm")]
        out_path = os.path.join(asms_dir, name + ".out")
        if os.path.isfile(out_path):
            yield name


def read_expected(name: str, asms_dir: str = ASMS_DIR):
    """Parse `reg <name> <value>` and `mem <word> <value>` lines."""
    regs, mem = {}, {}
    with open(os.path.join(asms_dir, name + ".out"), "r") as f:
        for line in f:
            parts = line.split()
            if not parts:
                continue
            if parts[0] == "reg":
                regs[parts[1]] = int(parts[2])
            elif parts[0] == "mem":
                mem[int(parts[1])] = int(parts[2])
    return regs, mem


def read_asm(name: str, asms_dir: str = ASMS_DIR) -> str:
    with open(os.path.join(asms_dir, name + ".asm"), "r") as f:
        return f.read()
