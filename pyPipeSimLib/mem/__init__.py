from pyPipeSimLib.mem.data_memory import DataMemory, checkAddress
