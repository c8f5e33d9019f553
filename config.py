"""
Configuration for the CHIP-8 emulator
Default settings, overridable from the command line
"""

from utils import debug_print

# Window / presentation
DISPLAY_SETTINGS = {
    "title": "CHIP-8",
    "scale": 10,  # Window pixels per CHIP-8 pixel
    "foreground": (255, 255, 255),
    "background": (0, 0, 0),
}

# Emulation loop
EMULATION_SETTINGS = {
    "programs_dir": "games",
    "default_program": "TICTAC",
    "cycles_per_frame": 10,  # Instructions executed per presented frame
    "target_fps": 60,
    "key_wait_interval": 0.001,  # Sleep between polls while FX0A waits
}


def load_settings(**overrides):
    """Merge overrides into the defaults

    Overrides set to None keep the default. Unknown keys raise KeyError.
    """
    settings = {}
    settings.update(DISPLAY_SETTINGS)
    settings.update(EMULATION_SETTINGS)

    for key, value in overrides.items():
        if key not in settings:
            raise KeyError(f"Unknown setting: {key}")
        if value is not None:
            settings[key] = value

    return settings


def describe_settings(settings):
    """Print the effective settings when debugging"""
    debug_print("Settings:")
    for key in sorted(settings):
        debug_print(f"  {key}: {settings[key]}")
