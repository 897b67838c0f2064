import argparse
from pathlib import Path

from resource_versions.config import get_settings
from resource_versions.main import main


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="resource-versions",
        description="Serve the stored version count of resources in an S3 bucket.",
    )
    parser.add_argument("--profile", help="development or production (overrides ENVIRONMENT)")
    parser.add_argument("--config-dir", type=Path, help="directory holding the profile TOML files")
    return parser.parse_args(argv)


def run(argv=None) -> int:
    args = parse_args(argv)
    overrides = {}
    if args.profile:
        overrides["ENVIRONMENT"] = args.profile
    if args.config_dir:
        overrides["CONFIG_DIR"] = args.config_dir
    settings = get_settings().model_copy(update=overrides)
    return main(settings)


if __name__ == "__main__":
    raise SystemExit(run())
