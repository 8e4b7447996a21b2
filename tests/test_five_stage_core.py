import io
from dataclasses import dataclass, field

import pytest

from pyPipeSimLib.arch import AsmSyntaxError, InvalidAddressError, InvalidLabelError
from pyPipeSimLib.arch.isa.mips_subset import REGISTERS
from pyPipeSimLib.mem import DataMemory
from pyPipeSimLib.proc.core import CONTROL, FiveStageBypassCore
from tests.utils import load, parse_report, read_asm, run_source


@dataclass
class CycleCase:
    name: str
    source: str
    cycles: int
    regs: dict = field(default_factory=dict)


HAZARD_FREE = """
    addi $t0, $zero, 5
    addi $t1, $zero, 7
    addi $t2, $zero, 9
"""

FORWARD = """
    addi $t0, $zero, 5
    add  $t1, $t0, $t0
"""

LOAD_USE = """
    addi $t0, $zero, 42
    sw   $t0, 1000($zero)
    lw   $t1, 1000($zero)
    add  $t2, $t1, $t1
"""

BRANCH_NOT_TAKEN = """
      addi $t0, $zero, 1
      beq  $t0, $zero, skip
      addi $t1, $zero, 2
skip: addi $t2, $zero, 3
"""

BRANCH_TAKEN = """
      addi $t0, $zero, 1
      beq  $t0, $t0, skip
      addi $t1, $zero, 2
skip: addi $t2, $zero, 3
"""

JUMP = """
     j    end
     addi $t0, $zero, 1
end: addi $t1, $zero, 2
"""

CASES = [
    # N instructions without hazards finish in N + 4 cycles
    CycleCase("hazard_free", HAZARD_FREE, 7, {"$t0": 5, "$t1": 7, "$t2": 9}),
    CycleCase("forward_ex", FORWARD, 6, {"$t0": 5, "$t1": 10}),
    # one bubble between lw and its consumer
    CycleCase("load_use", LOAD_USE, 9, {"$t0": 42, "$t1": 42, "$t2": 84}),
    # every branch/jump costs two bubbles
    CycleCase("branch_not_taken", BRANCH_NOT_TAKEN, 10, {"$t0": 1, "$t1": 2, "$t2": 3}),
    CycleCase("branch_taken", BRANCH_TAKEN, 9, {"$t0": 1, "$t1": 0, "$t2": 3}),
    CycleCase("jump", JUMP, 8, {"$t0": 0, "$t1": 2}),
]


@pytest.mark.parametrize("case", CASES, ids=lambda c: c.name)
def test_cycle_counts(case):
    system, result, reports = run_source(case.source)
    assert result.finished
    assert result.cycles == case.cycles, f"{case.name}: expected {case.cycles} cycles, got {result.cycles}"
    # cycle 0 is reported too
    assert len(reports) == case.cycles + 1

    regs = system.registers()
    for reg, value in case.regs.items():
        assert regs[REGISTERS[reg]] == value, f"{case.name}: {reg}"


def test_empty_program_reports_initial_state_only():
    _, result, reports = run_source("# nothing here\n\n")
    assert result.cycles == 0
    assert reports == ["0 " * 32 + "\n0 \n"]


def test_store_delta_reported_in_commit_cycle():
    _, _, reports = run_source(LOAD_USE)
    deltas = [parse_report(r)[1] for r in reports]
    # sw is fetched in cycle 2 and reaches memory in cycle 5
    assert deltas[5] == [(250, 42)]
    assert all(d == [] for i, d in enumerate(deltas) if i != 5)


def test_store_of_unchanged_value_is_not_reported():
    system, _, reports = run_source("sw $zero, 400($zero)\nsw $zero, 404($zero)\n")
    assert all(parse_report(r)[1] == [] for r in reports)
    assert system.mem.nonzero() == {}


def test_register_values_visible_after_writeback():
    _, _, reports = run_source(FORWARD)
    t0 = REGISTERS["$t0"]
    values = [parse_report(r)[0][t0] for r in reports]
    # addi writes back in cycle 5
    assert values == [0, 0, 0, 0, 0, 5, 5]


def test_fetch_blocked_while_branch_outstanding():
    core = FiveStageBypassCore(program=load(BRANCH_NOT_TAKEN), memory=DataMemory())
    fetched, traces = [], []
    while not core.isDone():
        core.tick()
        fetched.append(core.seq)
        traces.append(core.linetrace())
    # the branch is fetched in cycle 2 and resolves in memory in cycle 5
    assert fetched[:6] == [1, 2, 2, 2, 3, 4]
    assert traces[2].startswith("S br")
    assert traces[3].startswith("S br")
    assert not traces[4].startswith("S br")


def test_control_marker_cleared_after_resolution():
    core = FiveStageBypassCore(program=load(BRANCH_TAKEN), memory=DataMemory())
    for _ in range(3):
        core.tick()
    assert core.scoreboard.writer[CONTROL] == 2
    assert core.scoreboard.controlBlocked()
    core.tick()
    assert core.scoreboard.controlBlocked()
    core.tick()
    assert not core.scoreboard.controlBlocked()


def test_forwarding_reads_pending_slot_not_register_file():
    core = FiveStageBypassCore(program=load(FORWARD), memory=DataMemory())
    for _ in range(3):
        core.tick()
    # add has been decoded while addi has not written back
    assert core.rf[REGISTERS["$t0"]] == 0
    assert core.d2x["mnemonic"] == "add"
    assert core.d2x["rs_data"] == 5
    assert core.d2x["rt_data"] == 5


def test_writeback_only_clears_own_scoreboard_entry():
    source = """
        addi $t0, $zero, 1
        addi $t0, $zero, 2
        add  $t1, $t0, $zero
    """
    system, _, _ = run_source(source)
    regs = system.registers()
    assert regs[REGISTERS["$t0"]] == 2
    assert regs[REGISTERS["$t1"]] == 2
    assert system.proc.core.scoreboard.pendingWriters() == {}


def test_undefined_label_fails_at_decode():
    out = io.StringIO()
    with pytest.raises(InvalidLabelError) as info:
        run_source("j nowhere\n", out=out)
    assert info.value.tokens == ("j", "nowhere")
    # cycles 0 and 1 were reported before decode failed in cycle 2
    assert out.getvalue().count("\n") == 4


def test_redefined_label_fails_on_use():
    source = """
    a:  addi $t0, $zero, 1
    a:  addi $t1, $zero, 1
        j a
    """
    with pytest.raises(InvalidLabelError):
        run_source(source)


def test_redefined_label_unused_is_harmless():
    source = """
    a:  addi $t0, $zero, 1
    a:  addi $t1, $zero, 1
    """
    _, result, _ = run_source(source)
    assert result.finished


def test_unaligned_runtime_address():
    source = """
        addi $t0, $zero, 2
        lw   $t1, 400($t0)
    """
    with pytest.raises(InvalidAddressError) as info:
        run_source(source)
    assert info.value.tokens == ("lw", "$t1", "400($t0)")


def test_runtime_address_inside_program_footprint():
    with pytest.raises(InvalidAddressError):
        run_source("addi $t0, $zero, 4\nlw $t1, 0($t0)\n")


def test_runtime_address_beyond_memory():
    source = """
        addi $t0, $zero, 1048576
        sw   $t0, 0($t0)
    """
    with pytest.raises(InvalidAddressError):
        run_source(source)


def test_cycle_limit_stops_infinite_loop():
    _, result, reports = run_source("loop: j loop\n", max_cycles=50)
    assert not result.finished
    assert result.cycles == 50
    assert len(reports) == 51


def test_runs_are_deterministic():
    source = read_asm("fib")
    first = run_source(source)[2]
    second = run_source(source)[2]
    assert first == second


def test_completion_flag_set_in_writeback_cycles():
    system = run_source("")[0]
    system.loader(load(FORWARD))
    flags = []
    while not system.isDone():
        system.tick()
        flags.append(system.instCompletionFlag())
    assert flags == [False, False, False, False, True, True]


def test_malformed_offset_fails_at_decode_after_earlier_cycles():
    source = """
        addi $t0, $zero, 4
        addi $t1, $zero, 8
        lw   $t2, abc($t0)
    """
    out = io.StringIO()
    with pytest.raises(AsmSyntaxError) as info:
        run_source(source, out=out)
    assert info.value.tokens == ("lw", "$t2", "abc($t0)")
    # lw reaches decode in cycle 4; cycles 0-3 were reported
    assert out.getvalue().count("\n") == 2 * 4


@pytest.mark.parametrize("core_type", ["single", "bypass", "speculative"])
def test_zero_destination_commits_like_any_register(core_type):
    source = """
        addi $zero, $zero, 5
        add  $t0, $zero, $zero
    """
    system, result, _ = run_source(source, core_type=core_type)
    assert result.finished
    regs = system.registers()
    assert regs[0] == 5, f"{core_type}: $zero"
    assert regs[REGISTERS["$t0"]] == 10, f"{core_type}: forwarded $zero"
