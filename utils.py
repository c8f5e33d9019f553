DEBUG_MODE = False  # Default to quiet; enable via set_debug(True) or --debug


def set_debug(value):
    """
    Set debug mode on/off

    Args:
        value (bool): True to enable instruction tracing, False to disable
    """
    global DEBUG_MODE
    DEBUG_MODE = bool(value)


def is_debug():
    """Return whether tracing is enabled"""
    return DEBUG_MODE


def debug_print(text):
    """
    Prints the given text to the console for debugging purposes.

    Args:
        text (str): The text to print.
    """
    if DEBUG_MODE:
        print(text)


def format_trace(pc, opcode, text):
    """
    Format one instruction trace line.

    Args:
        pc (int): Address the opcode was fetched from.
        opcode (int): The raw 16-bit instruction word.
        text (str): Disassembled mnemonic.
    """
    return f"CPU: PC=0x{pc:03X} | Instruction=0x{opcode:04X} | {text}"
