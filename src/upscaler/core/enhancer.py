import time
from pathlib import Path

from tqdm import tqdm

from upscaler.core.buffer import PixelBuffer, as_pixels, validate_scale
from upscaler.core.image_io import (
    decode_image,
    encode_png,
    guess_mime,
    is_image_mime,
    output_filename,
)
from upscaler.core.resampler import resample_array
from upscaler.core.sharpener import Sharpener


def enhance(src, width, height, scale=2, workers=1, device="cpu"):
    """
    Upscale then sharpen a flat RGBA buffer.

    The resampler runs to completion before the sharpener starts. Any error
    aborts the whole call, so a result is either complete or not returned.

    Args:
        src: bytes-like RGBA buffer of length width * height * 4
        width: Source width in pixels
        height: Source height in pixels
        scale: Integer scale factor in [2, 4]
        workers: Number of threads used inside each stage
        device: Torch device for the sharpening convolution

    Returns:
        PixelBuffer: Enhanced image of size (width * scale) x (height * scale)
    """
    return Enhancer(scale=scale, workers=workers, device=device).enhance(src, width, height)


class Enhancer:
    def __init__(self, scale=2, workers=1, device="cpu"):
        self.scale = validate_scale(scale)
        self.workers = workers
        self.device = device
        self.sharpener = Sharpener(device=device, workers=workers)

    def enhance(self, src, width, height):
        pixels = as_pixels(src, width, height)
        upscaled = resample_array(pixels, self.scale, workers=self.workers)
        return PixelBuffer.from_array(self.sharpener.sharpen_array(upscaled))

    def enhance_buffer(self, buffer):
        return self.enhance(buffer.data, buffer.width, buffer.height)

    def enhance_bytes(self, data):
        """Decode image bytes, enhance them and return PNG bytes."""
        return encode_png(self.enhance_buffer(decode_image(data)))

    def enhance_image(self, image_path, output_path=None):
        try:
            data = Path(image_path).read_bytes()
            png = self.enhance_bytes(data)

            if output_path:
                Path(output_path).write_bytes(png)

            return png, True
        except Exception as e:
            print(f"Error processing {image_path}: {str(e)}")
            return None, False

    def batch_process(self, input_dir, output_dir):
        """
        Enhance every image in a directory

        Args:
            input_dir (str): Directory containing input images
            output_dir (str): Directory to save enhanced PNG images

        Returns:
            tuple: (successful, failed) counts
        """
        input_dir = Path(input_dir)
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        # Only files whose type is image/*
        image_files = sorted(
            f for f in input_dir.glob('*') if f.is_file() and is_image_mime(guess_mime(f))
        )

        if not image_files:
            print(f"No supported images found in {input_dir}")
            return 0, 0

        print(f"Found {len(image_files)} images to process")

        start_time = time.time()
        successful = 0
        failed = 0

        for img_path in tqdm(image_files, desc=f"Enhancing {self.scale}x"):
            output_path = output_dir / f"{img_path.stem}_{output_filename(self.scale)}"

            _, success = self.enhance_image(img_path, output_path)
            if success:
                successful += 1
            else:
                failed += 1

        total_time = time.time() - start_time
        print("\nProcessing complete!")
        print(f"Total images processed: {len(image_files)}")
        print(f"Successful: {successful}, Failed: {failed}")
        print(f"Average processing time per image: {total_time / len(image_files):.2f} seconds")

        return successful, failed

    @classmethod
    def from_config(cls, config, device="cpu"):
        """
        Create an enhancer from configuration dictionary.

        Args:
            config: Enhancer configuration dict
            device: Device to use ('cpu' or 'cuda')

        Returns:
            Configured Enhancer instance
        """
        return cls(
            scale=config.get("scale", 2),
            workers=config.get("workers", 1),
            device=device
        )
