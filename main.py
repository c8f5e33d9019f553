"""
CHIP-8 Emulator with SDL2 Graphics
Main entry point for the emulator
"""

import argparse
import os
import sys
import time

import sdl2

from chip8 import Chip8, read_program_image
from config import describe_settings, load_settings
from display import HEIGHT, WIDTH, FrameBuffer
from errors import Chip8Error, ProgramLoadError
from keypad import KEYPAD_LAYOUT, Keypad
from utils import debug_print, set_debug


class SDLDisplay(FrameBuffer):
    """Frame buffer that mirrors itself into an SDL streaming texture"""

    def __init__(self, renderer, texture, foreground, background):
        self.renderer = renderer
        self.texture = texture
        # ABGR8888 on little-endian is laid out R, G, B, A in memory
        self.on_pixel = bytes((*foreground, 255))
        self.off_pixel = bytes((*background, 255))
        self.dirty = True
        super().__init__()

    def present(self):
        """Mark the frame for upload; refresh() does the SDL work"""
        super().present()
        self.dirty = True

    def refresh(self):
        """Upload the buffer and present it if anything changed"""
        if not self.dirty:
            return
        pixels = b"".join(self.on_pixel if p else self.off_pixel for p in self.pixels)
        sdl2.SDL_UpdateTexture(self.texture, None, pixels, WIDTH * 4)

        sdl2.SDL_RenderClear(self.renderer)
        sdl2.SDL_RenderCopy(self.renderer, self.texture, None, None)
        sdl2.SDL_RenderPresent(self.renderer)
        self.dirty = False


class SDLKeypad(Keypad):
    """Keypad fed from the SDL event queue and keyboard state"""

    def __init__(self, hotkeys=None, wait_interval=0.001, on_idle=None):
        super().__init__()
        self.hotkeys = hotkeys or {}  # SDL keycode -> callable
        self.wait_interval = wait_interval
        self.on_idle = on_idle  # Called on every poll round while FX0A blocks
        self.event = sdl2.SDL_Event()
        self.scancodes = {
            sdl2.SDL_GetScancodeFromKey(getattr(sdl2, f"SDLK_{name}")): key
            for name, key in KEYPAD_LAYOUT.items()
        }

    def poll(self):
        while sdl2.SDL_PollEvent(self.event):
            if self.event.type == sdl2.SDL_QUIT:
                return False

            elif self.event.type == sdl2.SDL_KEYDOWN:
                sym = self.event.key.keysym.sym
                if sym == sdl2.SDLK_ESCAPE:
                    return False
                if sym in self.hotkeys:
                    self.hotkeys[sym]()

        state = sdl2.SDL_GetKeyboardState(None)
        for scancode, key in self.scancodes.items():
            self.pressed_keys[key] = bool(state[scancode])
        return True

    def can_wait(self):
        if self.on_idle:
            self.on_idle()
        return True


class Chip8Emulator:
    def __init__(self, settings, screenshot=None):
        self.settings = settings
        self.screenshot = screenshot  # Saved on exit when set
        self.machine = None
        self.running = False

        # Display settings
        self.scale = settings["scale"]
        self.window_width = WIDTH * self.scale
        self.window_height = HEIGHT * self.scale

        # SDL components
        self.window = None
        self.renderer = None
        self.texture = None
        self.display = None
        self.keypad = None

        # Timing
        self.target_fps = settings["target_fps"]
        self.frame_time = 1.0 / self.target_fps

    def initialize_sdl(self):
        """Initialize SDL2"""
        if sdl2.SDL_Init(sdl2.SDL_INIT_VIDEO | sdl2.SDL_INIT_EVENTS) != 0:
            print(f"SDL2 initialization failed: {sdl2.SDL_GetError()}")
            return False

        # Create window
        self.window = sdl2.SDL_CreateWindow(
            self.settings["title"].encode(),
            sdl2.SDL_WINDOWPOS_CENTERED,
            sdl2.SDL_WINDOWPOS_CENTERED,
            self.window_width,
            self.window_height,
            sdl2.SDL_WINDOW_SHOWN,
        )

        if not self.window:
            print(f"Window creation failed: {sdl2.SDL_GetError()}")
            return False

        # Create renderer
        self.renderer = sdl2.SDL_CreateRenderer(
            self.window, -1, sdl2.SDL_RENDERER_ACCELERATED
        )

        if not self.renderer:
            print(f"Renderer creation failed: {sdl2.SDL_GetError()}")
            return False

        # Texture at the logical resolution, scaled up by SDL_RenderCopy
        self.texture = sdl2.SDL_CreateTexture(
            self.renderer,
            sdl2.SDL_PIXELFORMAT_ABGR8888,
            sdl2.SDL_TEXTUREACCESS_STREAMING,
            WIDTH,
            HEIGHT,
        )

        if not self.texture:
            print(f"Texture creation failed: {sdl2.SDL_GetError()}")
            return False

        debug_print("SDL2 initialized successfully")
        return True

    def cleanup_sdl(self):
        """Clean up SDL2 resources"""
        if self.screenshot and self.display:
            self.take_screenshot(self.screenshot)

        if self.texture:
            sdl2.SDL_DestroyTexture(self.texture)
        if self.renderer:
            sdl2.SDL_DestroyRenderer(self.renderer)
        if self.window:
            sdl2.SDL_DestroyWindow(self.window)
        sdl2.SDL_Quit()

    def take_screenshot(self, filename=None):
        """Save the logical screen as an image"""
        if filename is None:
            filename = f"screenshot_{int(time.time())}.png"
        try:
            saved = self.display.save_screenshot(
                filename,
                scale=self.scale,
                foreground=self.settings["foreground"],
                background=self.settings["background"],
            )
        except OSError as e:
            print(f"Error taking screenshot: {e}")
            return False
        print(f"Screenshot saved as: {saved}")
        return True

    def run(self, program):
        """Run the emulator until quit; returns the process exit code"""
        if not self.initialize_sdl():
            self.cleanup_sdl()
            return 1

        self.display = SDLDisplay(
            self.renderer,
            self.texture,
            self.settings["foreground"],
            self.settings["background"],
        )
        self.keypad = SDLKeypad(
            hotkeys={sdl2.SDLK_F12: self.take_screenshot},
            wait_interval=self.settings["key_wait_interval"],
            on_idle=self.display.refresh,
        )
        self.machine = Chip8(self.keypad, self.display)
        self.machine.load_program(program)

        print("Starting emulator...")
        print("Controls:")
        print("  1 2 3 4 / Q W E R / A S D F / Z X C V: keypad")
        print("  F12: Take screenshot")
        print("  Escape: Quit")

        cycles_per_frame = self.settings["cycles_per_frame"]
        frame_count = 0
        start_time = time.time()
        self.running = True

        try:
            while self.running:
                frame_start = time.time()

                for _ in range(cycles_per_frame):
                    if not self.machine.step():
                        self.running = False
                        break

                self.display.refresh()
                frame_count += 1

                if frame_count % 120 == 0:
                    elapsed = time.time() - start_time
                    fps = frame_count / elapsed if elapsed > 0 else 0
                    debug_print(f"FPS: {fps:.1f}")

                frame_duration = time.time() - frame_start
                if frame_duration < self.frame_time:
                    sleep_time = self.frame_time - frame_duration
                    if sleep_time > 0.001:  # Only sleep if significant time remains
                        time.sleep(sleep_time)
        except Chip8Error as e:
            print(f"An error occured : {e}")
            return 1
        finally:
            self.cleanup_sdl()

        return 0


def build_parser():
    parser = argparse.ArgumentParser(description="CHIP-8 emulator")
    parser.add_argument(
        "program",
        nargs="?",
        default=None,
        help="Program image name, relative to the programs directory",
    )
    parser.add_argument("--programs-dir", default=None, help="Directory holding program images")
    parser.add_argument("--scale", type=int, default=None, help="Window pixels per CHIP-8 pixel")
    parser.add_argument(
        "--cycles-per-frame", type=int, default=None, help="Instructions executed per frame"
    )
    parser.add_argument("--fps", type=int, default=None, help="Target frames per second")
    parser.add_argument("--screenshot", default=None, help="Save a screenshot here on exit")
    parser.add_argument("--debug", action="store_true", help="Trace every instruction")
    return parser


def main(argv=None):
    """Main entry point"""
    args = build_parser().parse_args(argv)
    set_debug(args.debug)

    settings = load_settings(
        programs_dir=args.programs_dir,
        scale=args.scale,
        cycles_per_frame=args.cycles_per_frame,
        target_fps=args.fps,
    )
    describe_settings(settings)

    name = args.program or settings["default_program"]
    rom_path = os.path.join(settings["programs_dir"], name)

    try:
        program = read_program_image(rom_path)
    except ProgramLoadError as e:
        print(f"Could not load game! : {e}")
        return 1
    print(f"Game loaded! ({len(program)} bytes)")

    emulator = Chip8Emulator(settings, screenshot=args.screenshot)

    try:
        return emulator.run(program)
    except KeyboardInterrupt:
        print("\nEmulator stopped by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
