# File: pyPipeSimLib/proc/core/scoreboard.py
# --------------------------------------------------------------------
# Scoreboard and forwarding table. Forwarding is a lookup by producer
# identity (sequence number), not by distance in the pipeline.
#
# Date  \ 19 Oct 2026

# Reserved key for the outstanding branch/jump
CONTROL = -1

# "No pending writer"
NONE = 0


class Scoreboard():
  def __init__(s, nregs=32):
    # Latest in-flight writer per register (and for CONTROL)
    s.writer = {r: NONE for r in range(nregs)}
    s.writer[CONTROL] = NONE

    # Per sequence number
    s.pending   = {}  # seq -> produced value, None until produced
    s.completed = {}  # seq -> completion flag
    s.origin    = {}  # seq -> program index it was fetched from
    s.dest      = {}  # seq -> key it claimed
    s.prev      = {}  # seq -> writer it displaced from that key

  def allocate(s, seq, pc):
    s.pending  [seq] = None
    s.completed[seq] = False
    s.origin   [seq] = pc

  def inFlight(s, seq):
    return seq in s.origin

  def claim(s, key, seq):
    s.prev[seq]   = s.writer[key]
    s.dest[seq]   = key
    s.writer[key] = seq

  def lookup(s, reg, rf):
    """
    Return (ready, value) for a register operand. A register with a
    pending writer is read from the writer's result slot, never from
    the register file.
    """
    seq = s.writer[reg]
    if seq == NONE:
      return True, rf[reg]
    value = s.pending.get(seq)
    if value is None:
      return False, None
    return True, value

  def produce(s, seq, value):
    s.pending[seq] = value

  def complete(s, seq):
    s.completed[seq] = True

  def isComplete(s, seq):
    return s.completed.get(seq, False)

  def controlBlocked(s):
    seq = s.writer[CONTROL]
    return seq != NONE and not s.isComplete(seq)

  def retire(s, seq):
    """Release a committed sequence number."""
    key = s.dest.get(seq)
    if key is not None and s.writer[key] == seq:
      s.writer[key] = NONE
    s.drop(seq)

  def drop(s, seq):
    s.pending  .pop(seq, None)
    s.completed.pop(seq, None)
    s.origin   .pop(seq, None)
    s.dest     .pop(seq, None)
    s.prev     .pop(seq, None)

  def invalidateYounger(s, seq):
    """
    Forget every in-flight sequence number younger than seq, youngest
    first, handing each claimed key back to the writer it displaced if
    that writer is still in flight.
    """
    younger = sorted((y for y in s.origin if y > seq), reverse=True)
    for y in younger:
      key = s.dest.get(y)
      if key is not None and s.writer[key] == y:
        prev = s.prev[y]
        s.writer[key] = prev if s.inFlight(prev) else NONE
      s.drop(y)
    return younger

  def pendingWriters(s):
    return {k: v for k, v in s.writer.items() if v != NONE}
