# speculative_core.py
# --------------------------------------------------------------------
# Five-stage core that fetches past branches along the predicted path.
# Branches resolve in the memory stage; a misprediction discards every
# younger instruction and restarts fetch at the corrected target.
#
# Date  \ 19 Oct 2026

from pyPipeSimLib.loader.asm_loader import LABEL_REDEFINED
from pyPipeSimLib.predictor.saturating import SaturatingBranchPredictor
from pyPipeSimLib.proc.core.five_stage_core import FiveStageBypassCore


class SpeculativeBypassCore(FiveStageBypassCore):
  def __init__(s, program=None, memory=None, bp=None):
    super().__init__(program, memory)

    # Branch predictor
    s.bp = bp if bp is not None else SaturatingBranchPredictor()

    # Stats
    s.squashes = 0

  #======================
  # Control-hazard policy
  #======================
  def controlBlocked(s):
    return False

  def claimControl(s, seq):
    pass

  def fault(s, dinst, exc):
    # Possibly on a wrong path; only raised once it reaches memory
    if dinst['fault'] is None:
      dinst['fault'] = exc

  def predictNext(s, fetch):
    inst = s.program[fetch['pc']]
    if inst.kind not in ('branch', 'jump'):
      return

    target = s.program.labels.get(inst.label, LABEL_REDEFINED)
    if target == LABEL_REDEFINED:
      # Decode records the failure
      return

    if inst.kind == 'jump':
      taken = True
    else:
      taken = s.bp.predict(fetch['pc'])

    fetch['pred_taken'] = taken
    if taken:
      fetch['npc'] = target

  def train_bp(s, pc, predicted, taken):
    s.bp.predictions += 1
    if predicted != taken:
      s.bp.mispredictions += 1
    s.bp.update(pc, taken)

  def resolveControl(s, dinst):
    s.scoreboard.complete(dinst['seq'])

    taken = dinst['zero']
    npc   = dinst['target'] if taken else dinst['pc'] + 1

    if dinst['inst'].kind == 'branch':
      s.train_bp(dinst['pc'], dinst['pred_taken'], taken)

    if npc != dinst['npc']:
      s.squash(dinst['seq'], npc)

  #======================
  # Squash
  #======================
  def squash(s, seq, npc):
    # Everything still in IF/ID and ID/EX is younger than seq
    s.f2d = None
    s.d2x = None
    s.scoreboard.invalidateYounger(seq)

    s.pc       = npc
    s.squashes = s.squashes + 1
