"""Config and device helpers for the upscaler example scripts."""

import sys
from pathlib import Path

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

DEFAULT_CONFIG = Path(__file__).parent.parent / "upscaler" / "examples" / "config.toml"
DEVICES = ("auto", "cpu", "cuda")


def _fail(message):
    print(f"Error: {message}")
    sys.exit(1)


def load_config(config_path=None, require_dirs=True):
    """Load and check config.toml.

    Args:
        config_path: Optional path to config file. Defaults to the config.toml
                    next to the example scripts.
        require_dirs: Whether [enhancer] must name input_dir and output_dir

    Returns:
        dict: Configuration dictionary from config.toml

    Raises:
        SystemExit: If the file is missing or the [enhancer] section is incomplete
    """
    config_path = DEFAULT_CONFIG if config_path is None else Path(config_path)

    if not config_path.exists():
        _fail(f"config.toml not found at {config_path}")

    with open(config_path, "rb") as f:
        config = tomllib.load(f)

    enhancer = config.get("enhancer")
    if not isinstance(enhancer, dict):
        _fail(f"No [enhancer] section found in {config_path}")

    if require_dirs:
        missing = [key for key in ("input_dir", "output_dir") if key not in enhancer]
        if missing:
            _fail(f"[enhancer] in {config_path} is missing: {', '.join(missing)}")

    return config


def get_device(config):
    """Resolve the [device] setting to a torch device string.

    "auto" picks cuda when available. "cuda" or "cuda:N" without a GPU, and any
    other value, stop the script with an error.
    """
    import torch

    device_setting = str(config.get("device", {}).get("device", "auto"))
    kind = device_setting.split(":", 1)[0]

    if kind not in DEVICES:
        _fail(f"Unknown device {device_setting!r}, expected one of: {', '.join(DEVICES)}")

    if device_setting == "auto":
        return "cuda" if torch.cuda.is_available() else "cpu"

    if kind == "cuda" and not torch.cuda.is_available():
        _fail(f"Device {device_setting!r} requested but CUDA is not available")

    return device_setting
