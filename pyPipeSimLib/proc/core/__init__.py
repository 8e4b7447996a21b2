from pyPipeSimLib.proc.core.scoreboard        import Scoreboard, CONTROL
from pyPipeSimLib.proc.core.five_stage_core   import FiveStageBypassCore
from pyPipeSimLib.proc.core.speculative_core  import SpeculativeBypassCore
from pyPipeSimLib.proc.core.single_cycle_core import SingleCycleCore
