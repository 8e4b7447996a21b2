from pyPipeSimLib.arch.isa import mips_subset
