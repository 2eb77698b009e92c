"""Example script demonstrating batch upscaling and sharpening of a folder."""

from utils import get_device, load_config
from upscaler.core.enhancer import Enhancer


def main(config_path=None):
    config = load_config(config_path)
    enhancer_config = config["enhancer"]
    device = get_device(config)

    # Initialize the enhancer
    enhancer = Enhancer(
        scale=enhancer_config.get("scale", 2),
        workers=enhancer_config.get("workers", 1),
        device=device
    )

    # Process every image in the folder
    return enhancer.batch_process(
        input_dir=enhancer_config["input_dir"],
        output_dir=enhancer_config["output_dir"]
    )


if __name__ == "__main__":
    main()
