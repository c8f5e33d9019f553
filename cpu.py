"""
CHIP-8 CPU Emulator
Fetch/decode/execute engine for the 34 CHIP-8 instructions
"""

import random

from errors import Chip8Error, EngineHaltedError, MemoryAccessError, UnknownOpcodeError
from fontset import glyph_address
from memory import MAX_ADDRESS, PROGRAM_START, CallStack, Memory
from opcodes import INSTRUCTIONS, decode, mnemonic
from registers import RegisterFile, Timers
from utils import debug_print, format_trace


class CPU:
    def __init__(self, display, keypad, memory=None, rng=None):
        # Collaborators
        self.display = display
        self.keypad = keypad
        self.rng = rng if rng is not None else random.Random()

        # Owned machine state
        self.memory = memory if memory is not None else Memory()
        self.registers = RegisterFile()
        self.stack = CallStack()
        self.timers = Timers()
        self.PC = PROGRAM_START  # Program Counter

        # Per-cycle state
        self.opcode = 0  # Last fetched instruction word
        self.jumped = False  # Set by handlers that assign PC themselves

        # Cycle tracking
        self.cycles = 0
        self.halted = False

        # Pattern key -> bound handler
        self.instruction_dispatch = {
            key: getattr(self, f"execute_{name}")
            for key, (name, _) in INSTRUCTIONS.items()
        }

    def reset(self):
        """Power-on state: cleared memory with the font installed, PC at 0x200"""
        self.memory.clear()
        self.memory.install_fontset()
        self.registers.reset()
        self.stack.reset()
        self.timers.reset()
        self.PC = PROGRAM_START
        self.opcode = 0
        self.jumped = False
        self.cycles = 0
        self.halted = False
        self.display.clear()

    def step(self):
        """Run one cycle

        Returns True to keep running and False when the input source asked
        to quit. Fatal conditions raise a Chip8Error and halt the engine.
        """
        if self.halted:
            raise EngineHaltedError("CPU halted after a fatal error; reset before stepping")

        # Refresh keys and check for a quit request before fetching
        if not self.keypad.poll():
            debug_print("CPU: termination requested by input source")
            return False

        try:
            return self.run_instruction()
        except Chip8Error:
            self.halted = True
            raise

    def run_instruction(self):
        """Fetch, decode and execute the instruction at PC"""
        pc = self.PC
        self.opcode = self.memory.read_word(pc)

        try:
            instruction = decode(self.opcode)
        except UnknownOpcodeError:
            raise UnknownOpcodeError(self.opcode, pc) from None

        debug_print(format_trace(pc, self.opcode, mnemonic(instruction)))

        self.jumped = False
        if self.instruction_dispatch[instruction.key](instruction) is False:
            # Quit arrived while blocked on a key press
            return False

        if not self.jumped:
            self.PC += 2

        self.timers.tick()
        self.cycles += 1
        return True

    def execute(self, opcode):
        """Decode and execute a single opcode against the current state

        No fetch, no PC advance and no timer tick; handlers that redirect
        control flow leave PC at their target.
        """
        instruction = decode(opcode)
        self.opcode = instruction.opcode
        self.jumped = False
        return self.instruction_dispatch[instruction.key](instruction)

    def _jump(self, target):
        self.PC = target
        self.jumped = True

    def _skip(self):
        """Step over the next instruction"""
        self.PC += 2

    # ------------------------ Flow control ------------------------
    def execute_cls(self, op):
        self.display.clear()

    def execute_ret(self, op):
        # Back to the call site; the normal advance moves past the CALL
        self.PC = self.stack.pop()

    def execute_jp(self, op):
        self._jump(op.nnn)

    def execute_call(self, op):
        self.stack.push(self.PC)
        self._jump(op.nnn)

    def execute_jp_v0(self, op):
        target = self.registers[0] + op.nnn
        if target > MAX_ADDRESS:
            raise MemoryAccessError(target)
        self._jump(target)

    # ------------------------ Conditional skips ------------------------
    def execute_se_byte(self, op):
        if self.registers[op.x] == op.nn:
            self._skip()

    def execute_sne_byte(self, op):
        if self.registers[op.x] != op.nn:
            self._skip()

    def execute_se_reg(self, op):
        if self.registers[op.x] == self.registers[op.y]:
            self._skip()

    def execute_sne_reg(self, op):
        if self.registers[op.x] != self.registers[op.y]:
            self._skip()

    def execute_skp(self, op):
        if self.keypad.is_key_down(self.registers[op.x]):
            self._skip()

    def execute_sknp(self, op):
        if not self.keypad.is_key_down(self.registers[op.x]):
            self._skip()

    # ------------------------ Register loads ------------------------
    def execute_ld_byte(self, op):
        self.registers[op.x] = op.nn

    def execute_add_byte(self, op):
        # Wraps at 8 bits, VF untouched
        self.registers[op.x] = self.registers[op.x] + op.nn

    def execute_ld_reg(self, op):
        self.registers[op.x] = self.registers[op.y]

    # ------------------------ ALU ------------------------
    def execute_or(self, op):
        self.registers[op.x] = self.registers[op.x] | self.registers[op.y]

    def execute_and(self, op):
        self.registers[op.x] = self.registers[op.x] & self.registers[op.y]

    def execute_xor(self, op):
        self.registers[op.x] = self.registers[op.x] ^ self.registers[op.y]

    def execute_add_reg(self, op):
        total = self.registers[op.x] + self.registers[op.y]
        self.registers.set_flag(1 if total > 0xFF else 0)
        self.registers[op.x] = total

    def execute_sub(self, op):
        # VF = NOT borrow
        result = self.registers[op.x] - self.registers[op.y]
        self.registers.set_flag(0 if result < 0 else 1)
        self.registers[op.x] = result

    def execute_shr(self, op):
        vx = self.registers[op.x]
        self.registers.set_flag(vx & 0x01)
        self.registers[op.x] = vx >> 1

    def execute_subn(self, op):
        vx = self.registers[op.x]
        vy = self.registers[op.y]
        self.registers.set_flag(1 if vy > vx else 0)
        self.registers[op.x] = vy - vx

    def execute_shl(self, op):
        vx = self.registers[op.x]
        self.registers.set_flag(vx & 0x80)
        self.registers[op.x] = vx << 1

    def execute_rnd(self, op):
        self.registers[op.x] = self.rng.getrandbits(8) & op.nn

    # ------------------------ Index register / memory ------------------------
    def execute_ld_i(self, op):
        self.registers.I = op.nnn

    def execute_add_i(self, op):
        total = self.registers.I + self.registers[op.x]
        self.registers.set_flag(1 if total > MAX_ADDRESS else 0)
        self.registers.I = total

    def execute_ld_f(self, op):
        self.registers.I = glyph_address(self.registers[op.x])

    def execute_ld_b(self, op):
        value = self.registers[op.x]
        self.memory.write_block(
            self.registers.I, (value // 100, (value // 10) % 10, value % 10)
        )

    def execute_ld_mem_regs(self, op):
        self.memory.write_block(self.registers.I, self.registers.V[: op.x + 1])

    def execute_ld_regs_mem(self, op):
        data = self.memory.read_block(self.registers.I, op.x + 1)
        self.registers.V[: op.x + 1] = data

    # ------------------------ Display ------------------------
    def execute_drw(self, op):
        # Fetch every row first so a bad I faults before anything is drawn
        sprite = self.memory.read_block(self.registers.I, op.n)
        x = self.registers[op.x]
        y = self.registers[op.y]

        collision = False
        for row, byte in enumerate(sprite):
            if self.display.draw_sprite_byte(x, y + row, byte):
                collision = True

        self.registers.set_flag(1 if collision else 0)

    # ------------------------ Timers / input ------------------------
    def execute_ld_vx_dt(self, op):
        self.registers[op.x] = self.timers.delay

    def execute_ld_dt_vx(self, op):
        self.timers.delay = self.registers[op.x]

    def execute_ld_st_vx(self, op):
        self.timers.sound = self.registers[op.x]

    def execute_ld_vx_k(self, op):
        key = self.keypad.wait_for_key()
        if key is None:
            return False
        self.registers[op.x] = key

    # ------------------------ Test / debug hooks ------------------------
    def get_register(self, index):
        return self.registers[index]

    def set_register(self, index, value):
        self.registers[index] = value

    def push_stack(self, addr):
        self.stack.push(addr)

    def top_stack(self):
        return self.stack.peek()

    def get_display(self):
        return self.display.snapshot()

    def set_display(self, buffer):
        self.display.restore(buffer)

    def get_state(self):
        """Get CPU state for debugging"""
        return {
            "PC": self.PC,
            "I": self.registers.I,
            "V": list(self.registers.V),
            "SP": self.stack.sp,
            "stack": self.stack.slots[: self.stack.sp],
            "DT": self.timers.delay,
            "ST": self.timers.sound,
            "opcode": self.opcode,
            "cycles": self.cycles,
            "halted": self.halted,
        }
