"""
CHIP-8 Display
64x32 monochrome frame buffer with XOR sprite compositing and collision detection
"""

from PIL import Image, ImageOps

from utils import debug_print

# original CHIP-8 resolution
WIDTH = 64
HEIGHT = 32

FOREGROUND = (255, 255, 255)
BACKGROUND = (0, 0, 0)


class FrameBuffer:
    """Logical screen; subclasses push frames to a real window via present()"""

    def __init__(self):
        self.pixels = bytearray(WIDTH * HEIGHT)  # 1 = lit, row-major
        self.frames_presented = 0

    def clear(self):
        """Clear the buffer and the screen"""
        self.pixels[:] = bytes(WIDTH * HEIGHT)
        self.present()

    def draw_sprite_byte(self, x, y, byte):
        """XOR one 8-pixel sprite row onto the screen at (x, y)

        Both coordinates wrap around the screen edges. Returns True if any
        lit pixel was switched off.
        """
        y %= HEIGHT
        row_base = y * WIDTH
        collision = False
        for col in range(8):
            if not (byte >> (7 - col)) & 0x01:
                continue
            index = row_base + (x + col) % WIDTH
            if self.pixels[index]:
                collision = True
            self.pixels[index] ^= 1

        self.present()
        return collision

    def get_pixel(self, x, y):
        return self.pixels[(y % HEIGHT) * WIDTH + (x % WIDTH)]

    def snapshot(self):
        """Copy of the pixel buffer"""
        return bytes(self.pixels)

    def restore(self, buffer):
        """Replace the pixel buffer with a previous snapshot"""
        if len(buffer) != WIDTH * HEIGHT:
            raise ValueError(
                f"Display buffer must hold {WIDTH * HEIGHT} pixels, got {len(buffer)}"
            )
        self.pixels[:] = bytes(1 if p else 0 for p in buffer)
        self.present()

    def present(self):
        """Push the buffer to the screen; the bare buffer has no screen"""
        self.frames_presented += 1

    def render_text(self, on="#", off="."):
        """Render the screen as text, one line per pixel row"""
        lines = []
        for y in range(HEIGHT):
            row = self.pixels[y * WIDTH:(y + 1) * WIDTH]
            lines.append("".join(on if p else off for p in row))
        return "\n".join(lines)

    def to_image(self, scale=1, foreground=FOREGROUND, background=BACKGROUND):
        """Convert the screen to an RGB PIL image"""
        gray = Image.frombytes(
            "L", (WIDTH, HEIGHT), bytes(255 if p else 0 for p in self.pixels)
        )
        if scale > 1:
            gray = gray.resize((WIDTH * scale, HEIGHT * scale), Image.NEAREST)
        return ImageOps.colorize(gray, black=background, white=foreground)

    def save_screenshot(self, filename, scale=10, foreground=FOREGROUND, background=BACKGROUND):
        """Save the screen as PNG (or JPEG, from the file extension)"""
        img = self.to_image(scale, foreground, background)
        if filename.lower().endswith((".jpg", ".jpeg")):
            img.save(filename, "JPEG", quality=95)
        else:
            if not filename.lower().endswith(".png"):
                filename += ".png"
            img.save(filename, "PNG")
        debug_print(f"Display: screenshot saved as {filename}")
        return filename
