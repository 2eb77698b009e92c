"""Main controller script for upscaler - enhances a single image or a folder."""

import argparse
import sys
from pathlib import Path

from utils import get_device, load_config
from upscaler.core.enhancer import Enhancer
from upscaler.core.errors import EnhanceError
from upscaler.core.image_io import guess_mime, is_image_mime, output_filename


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Upscale images 2x-4x and sharpen edges",
        epilog="Without an image argument, every image in [enhancer].input_dir is processed."
    )
    parser.add_argument("image", nargs="?", help="Single image to enhance")
    parser.add_argument("-c", "--config", help="Path to config.toml (default: bundled example)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    # A single image only needs output_dir
    config = load_config(args.config, require_dirs=args.image is None)
    device = get_device(config)

    cfg = config["enhancer"]
    try:
        enhancer = Enhancer.from_config(cfg, device)
    except EnhanceError as e:
        print(f"Error: {e}")
        return 1

    print(f"Using device: {device}")

    # Single image mode
    if args.image:
        image_path = Path(args.image)
        if not is_image_mime(guess_mime(image_path)):
            print(f"Error: {image_path} is not an image")
            return 1

        output_path = Path(cfg.get("output_dir", ".")) / output_filename(enhancer.scale)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        _, success = enhancer.enhance_image(image_path, output_path)
        if success:
            print(f"Image saved to {output_path}")
        return 0 if success else 1

    # Folder mode
    _, failed = enhancer.batch_process(
        input_dir=cfg["input_dir"],
        output_dir=cfg["output_dir"]
    )
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
