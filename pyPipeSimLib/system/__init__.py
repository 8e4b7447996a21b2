from pyPipeSimLib.system.basic import BasicSystem, RunResult, formatReport
