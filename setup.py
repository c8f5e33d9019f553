from setuptools import setup

modules = [
    "errors",
    "fontset",
    "memory",
    "registers",
    "opcodes",
    "cpu",
    "display",
    "keypad",
    "chip8",
    "config",
    "utils",
    "main",
    "headless_run",
    "disasm",
]

setup(
    name="chip8-sdl",
    version="0.1.0",
    description="CHIP-8 virtual machine emulator with an SDL2 front end",
    python_requires=">=3.8",
    py_modules=modules,
    install_requires=[
        "pysdl2",
        "pysdl2-dll",
        "Pillow",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "chip8=main:main",
            "chip8-headless=headless_run:main",
            "chip8-disasm=disasm:main",
        ],
    },
)
