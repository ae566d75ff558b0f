"""Allow ``python -m pad_dragger``."""
from pad_dragger.cli import cli


if __name__ == "__main__":
    cli(prog_name="pad-dragger")
