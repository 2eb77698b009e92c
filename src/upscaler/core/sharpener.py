import numpy as np
import torch
import torch.nn.functional as F

from upscaler.core.buffer import as_pixels, check_pixels, row_bands, run_bands
from upscaler.core.errors import BufferTooSmall

MIN_SIZE = 3


class Sharpener:
    def __init__(self, device="cpu", workers=1):
        """
        Initialize the image sharpener
        Args:
            device (str): Torch device the convolution runs on (default: "cpu")
            workers (int): Number of threads splitting the image rows (default: 1)
        """
        self.device = device
        self.workers = workers

        # Define sharpening kernel
        self.kernel = torch.tensor([
            [0, -1, 0],
            [-1, 5, -1],
            [0, -1, 0]
        ], dtype=torch.float32, device=device).view(1, 1, 3, 3)

    def sharpen(self, src, width, height):
        """
        Sharpen a flat RGBA buffer
        Args:
            src: bytes-like RGBA buffer of length width * height * 4
            width (int): Image width in pixels
            height (int): Image height in pixels
        Returns:
            bytes: Sharpened RGBA buffer with the same dimensions
        """
        pixels = as_pixels(src, width, height)
        return self.sharpen_array(pixels).tobytes()

    def sharpen_array(self, pixels):
        """
        Sharpen an (H, W, 4) uint8 array into a new array
        Border pixels and the alpha channel are copied unchanged.
        """
        height, width = check_pixels(pixels).shape[:2]
        if width < MIN_SIZE or height < MIN_SIZE:
            raise BufferTooSmall(
                f"Sharpening needs at least {MIN_SIZE}x{MIN_SIZE} pixels, got {width}x{height}"
            )

        out = pixels.copy()

        def fill_rows(start, stop):
            # Rows start-1 .. stop hold every tap for interior rows start .. stop-1
            out[start:stop, 1:-1, :3] = self._apply_sharpening(pixels[start - 1:stop + 1])

        run_bands(fill_rows, row_bands(1, height - 1, self.workers), self.workers)
        return out

    def _apply_sharpening(self, rows):
        """
        Convolve the RGB channels of a row band, keeping only fully covered pixels
        """
        rgb = torch.from_numpy(np.ascontiguousarray(rows[..., :3], dtype=np.float32))
        # (H, W, 3) -> (3, 1, H, W): one single-channel image per color
        rgb = rgb.permute(2, 0, 1).unsqueeze(1).to(self.device)

        with torch.no_grad():
            sharpened = F.conv2d(rgb, self.kernel)

        # Clip values to valid range
        sharpened = torch.clamp(sharpened, 0, 255)
        return sharpened.squeeze(1).permute(1, 2, 0).cpu().numpy().astype(np.uint8)

    def __call__(self, src, width, height):
        """
        Make the class callable
        """
        return self.sharpen(src, width, height)


def sharpen(src, width, height, workers=1, device="cpu"):
    """Sharpen a flat RGBA buffer with the fixed 3x3 kernel. See Sharpener.sharpen."""
    return Sharpener(device=device, workers=workers).sharpen(src, width, height)
