from chip8.constants import SCREEN_HEIGHT, SCREEN_WIDTH


class Framebuffer:
    """monochrome pixel grid, origin (0,0) at the top-left corner, 1 is ON and 0 is OFF"""
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT):
        self.w, self.h = w, h
        self.buffer = bytearray(w * h)

    def __repr__(self):
        return f"Framebuffer({self.w}x{self.h}, lit={sum(self.buffer)})"

    def flip_pixel(self, x, y):
        """XOR the pixel with ON, return True if it was erased (collision)"""
        idx = y * self.w + x
        self.buffer[idx] ^= 1
        return self.buffer[idx] == 0

    def clear(self):
        self.buffer[:] = bytes(self.w * self.h)

    def snapshot(self):
        """read-only copy of the screen as a tuple of rows, each row being `w` bytes"""
        return tuple(bytes(self.buffer[y*self.w:(y+1)*self.w]) for y in range(self.h))
