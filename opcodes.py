"""
CHIP-8 instruction decoding
Splits a 16-bit word into nibbles and maps it onto one instruction pattern
"""

from collections import namedtuple

from errors import UnknownOpcodeError

Instruction = namedtuple("Instruction", ["opcode", "key", "x", "y", "n", "nn", "nnn"])

# Bits of the opcode that select the instruction, per high nibble.
# Everything outside the mask is operand (x, y, n, nn or nnn).
PATTERN_MASKS = {
    0x0: 0xFFFF,
    0x1: 0xF000,
    0x2: 0xF000,
    0x3: 0xF000,
    0x4: 0xF000,
    0x5: 0xF00F,
    0x6: 0xF000,
    0x7: 0xF000,
    0x8: 0xF00F,
    0x9: 0xF00F,
    0xA: 0xF000,
    0xB: 0xF000,
    0xC: 0xF000,
    0xD: 0xF000,
    0xE: 0xF0FF,
    0xF: 0xF0FF,
}

# Pattern key: (handler name, mnemonic template)
INSTRUCTIONS = {
    0x00E0: ("cls", "CLS"),
    0x00EE: ("ret", "RET"),
    0x1000: ("jp", "JP 0x{nnn:03X}"),
    0x2000: ("call", "CALL 0x{nnn:03X}"),
    0x3000: ("se_byte", "SE V{x:X}, 0x{nn:02X}"),
    0x4000: ("sne_byte", "SNE V{x:X}, 0x{nn:02X}"),
    0x5000: ("se_reg", "SE V{x:X}, V{y:X}"),
    0x6000: ("ld_byte", "LD V{x:X}, 0x{nn:02X}"),
    0x7000: ("add_byte", "ADD V{x:X}, 0x{nn:02X}"),
    0x8000: ("ld_reg", "LD V{x:X}, V{y:X}"),
    0x8001: ("or", "OR V{x:X}, V{y:X}"),
    0x8002: ("and", "AND V{x:X}, V{y:X}"),
    0x8003: ("xor", "XOR V{x:X}, V{y:X}"),
    0x8004: ("add_reg", "ADD V{x:X}, V{y:X}"),
    0x8005: ("sub", "SUB V{x:X}, V{y:X}"),
    0x8006: ("shr", "SHR V{x:X}"),
    0x8007: ("subn", "SUBN V{x:X}, V{y:X}"),
    0x800E: ("shl", "SHL V{x:X}"),
    0x9000: ("sne_reg", "SNE V{x:X}, V{y:X}"),
    0xA000: ("ld_i", "LD I, 0x{nnn:03X}"),
    0xB000: ("jp_v0", "JP V0, 0x{nnn:03X}"),
    0xC000: ("rnd", "RND V{x:X}, 0x{nn:02X}"),
    0xD000: ("drw", "DRW V{x:X}, V{y:X}, {n}"),
    0xE09E: ("skp", "SKP V{x:X}"),
    0xE0A1: ("sknp", "SKNP V{x:X}"),
    0xF007: ("ld_vx_dt", "LD V{x:X}, DT"),
    0xF00A: ("ld_vx_k", "LD V{x:X}, K"),
    0xF015: ("ld_dt_vx", "LD DT, V{x:X}"),
    0xF018: ("ld_st_vx", "LD ST, V{x:X}"),
    0xF01E: ("add_i", "ADD I, V{x:X}"),
    0xF029: ("ld_f", "LD F, V{x:X}"),
    0xF033: ("ld_b", "LD B, V{x:X}"),
    0xF055: ("ld_mem_regs", "LD [I], V{x:X}"),
    0xF065: ("ld_regs_mem", "LD V{x:X}, [I]"),
}


def pattern_key(opcode):
    """Mask off the operand bits, leaving the pattern that selects a handler"""
    return opcode & PATTERN_MASKS[(opcode >> 12) & 0xF]


def decode(opcode):
    """Decode a 16-bit word into an Instruction

    Raises UnknownOpcodeError when no pattern matches.
    """
    opcode &= 0xFFFF
    key = pattern_key(opcode)
    if key not in INSTRUCTIONS:
        raise UnknownOpcodeError(opcode)
    return Instruction(
        opcode=opcode,
        key=key,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        n=opcode & 0x000F,
        nn=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )


def mnemonic(instruction):
    """Assembly text for a decoded instruction"""
    _, template = INSTRUCTIONS[instruction.key]
    return template.format(**instruction._asdict())


def disassemble_word(opcode):
    """Assembly text for a raw word; unknown words render as data"""
    try:
        return mnemonic(decode(opcode))
    except UnknownOpcodeError:
        return f".word 0x{opcode:04X}"
