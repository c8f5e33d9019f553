#!/usr/bin/env python3
"""
Test memory, call stack, registers and timers
"""

import pytest

from errors import MemoryAccessError, ProgramLoadError, StackOverflowError, StackUnderflowError
from fontset import FONTSET, FONTSET_LOCATION, glyph_address
from memory import MAX_PROGRAM_SIZE, MEMORY_SIZE, PROGRAM_START, CallStack, Memory
from registers import RegisterFile, Timers


def test_basic_memory():
    memory = Memory()

    memory.write(0x0000, 0x42)
    assert memory.read(0x0000) == 0x42

    memory.write(0x0FFF, 0x1AB)  # Values are truncated to a byte
    assert memory.read(0x0FFF) == 0xAB


@pytest.mark.parametrize("addr", [-1, MEMORY_SIZE, 0x1234])
def test_out_of_range_access(addr):
    memory = Memory()
    with pytest.raises(MemoryAccessError):
        memory.read(addr)
    with pytest.raises(MemoryAccessError):
        memory.write(addr, 0)


def test_read_word_is_big_endian():
    memory = Memory()
    memory.write_block(0x200, [0xA2, 0xF0])
    assert memory.read_word(0x200) == 0xA2F0

    with pytest.raises(MemoryAccessError):
        memory.read_word(0xFFF)


def test_write_block_checks_whole_range_first():
    memory = Memory()
    with pytest.raises(MemoryAccessError) as excinfo:
        memory.write_block(0xFFD, [1, 2, 3, 4])
    assert excinfo.value.address == 0xFFD
    assert memory.read_block(0xFFD, 3) == bytes(3)


def test_load_program():
    memory = Memory()
    memory.load_program(b"\x12\x34\x56")
    assert memory.read_block(PROGRAM_START, 3) == b"\x12\x34\x56"
    assert memory.read(PROGRAM_START - 1) == 0


def test_load_program_size_limit():
    memory = Memory()
    memory.load_program(bytes([0xAA]) * MAX_PROGRAM_SIZE)
    assert memory.read(0xFFF) == 0xAA

    with pytest.raises(ProgramLoadError):
        Memory().load_program(bytes(MAX_PROGRAM_SIZE + 1))


def test_install_fontset_and_clear():
    memory = Memory()
    memory.install_fontset()
    assert memory.read_block(FONTSET_LOCATION, len(FONTSET)) == bytes(FONTSET)
    assert memory.read_block(glyph_address(0xF), 5) == bytes([0xF0, 0x80, 0xF0, 0x80, 0x80])

    memory.clear()
    assert not any(memory.ram)


def test_dump():
    memory = Memory()
    memory.write_block(0x200, [0x00, 0xE0])
    assert memory.dump(0x200, 2) == "0x200: 00 E0"


def test_call_stack_push_pop():
    stack = CallStack()
    stack.push(0x200)
    stack.push(0x300)
    assert stack.peek() == 0x300
    assert len(stack) == 2

    assert stack.pop() == 0x300
    assert stack.pop() == 0x200
    assert stack.depth == 0


def test_call_stack_limits():
    stack = CallStack()
    for i in range(16):
        stack.push(0x200 + 2 * i)

    with pytest.raises(StackOverflowError):
        stack.push(0x400)
    assert stack.sp == 16

    stack.reset()
    with pytest.raises(StackUnderflowError):
        stack.pop()
    with pytest.raises(StackUnderflowError):
        stack.peek()


def test_register_file():
    registers = RegisterFile()
    registers[3] = 0x1FF
    assert registers[3] == 0xFF

    registers.set_flag(1)
    registers.set_flag(0)
    assert registers.flag == 0

    registers.I = 0x1234  # Never masked
    assert registers.I == 0x1234

    registers.reset()
    assert registers.snapshot() == bytes(16)
    assert registers.I == 0


def test_timers_tick():
    timers = Timers()
    timers.delay = 2
    timers.sound = 1
    assert timers.sound_active

    timers.tick()
    assert (timers.delay, timers.sound) == (1, 0)
    assert not timers.sound_active

    timers.tick()
    timers.tick()
    assert (timers.delay, timers.sound) == (0, 0)
