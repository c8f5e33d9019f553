"""
CHIP-8 Emulator Errors
Fatal conditions raised by the memory, stack and instruction engine
"""


class Chip8Error(Exception):
    """Base class for every fatal emulator condition"""


class UnknownOpcodeError(Chip8Error):
    """Raised when a fetched word matches no instruction pattern"""

    def __init__(self, opcode, pc=None):
        self.opcode = opcode
        self.pc = pc
        if pc is None:
            super().__init__(f"Unknown opcode : 0x{opcode:04X}")
        else:
            super().__init__(f"Unknown opcode : 0x{opcode:04X} at PC 0x{pc:03X}")


class MemoryAccessError(Chip8Error):
    """Raised when an address falls outside the 4K address space"""

    def __init__(self, address, length=1):
        self.address = address
        self.length = length
        if length == 1:
            super().__init__(f"Memory access out of range : 0x{address:X}")
        else:
            super().__init__(
                f"Memory access out of range : 0x{address:X} (+{length} bytes)"
            )


class StackOverflowError(Chip8Error):
    """Raised when a call would push past the stack capacity"""


class StackUnderflowError(Chip8Error):
    """Raised when a return pops an empty stack"""


class ProgramLoadError(Chip8Error):
    """Raised when a program image cannot be read or does not fit in memory"""


class EngineHaltedError(Chip8Error):
    """Raised when stepping an engine that already stopped on a fatal error"""
