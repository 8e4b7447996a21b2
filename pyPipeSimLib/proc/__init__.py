from pyPipeSimLib.proc.five_stage_proc import FiveStageBypassProcessor, CORE_TYPES
