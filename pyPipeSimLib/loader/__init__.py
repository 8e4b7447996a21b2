from pyPipeSimLib.loader.asm_loader import AsmLoader, Program, LABEL_REDEFINED
