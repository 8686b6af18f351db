import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from ..config import ThemeConfig, BuildOptions
from ..exceptions import ThemeBuildError
from ..pipeline.build_theme import ThemeBuilder

# Load environment variables first
load_dotenv()

logger = logging.getLogger(__name__)

HELP_TEXT = {
    "help": (
        "`help`         - Show the entire help message.\n"
        "`help word`    - Show related to the word."
    ),
    "build": (
        "`build`        - Build the basic static rEFInd Theme. Very Boring.\n"
        "`build [args]` - Configure the build process.\n"
        "List of extra args:\n"
        "    `bakeBg`              - Bakes the provided number of icons to the wallpaper,\n"
        "                            to give the illusion of button presses.\n"
        "    `bakeBg.osIcons=N`    - Specify how many OS Icons to bake.\n"
        "    `bakeBg.otherIcons=N` - Specify how many Other Icons to bake."
    ),
    "clean": "`clean`        - Delete the build folder",
}


def help_text(topic: Optional[str] = None) -> str:
    if topic is None:
        return "\n\n".join(HELP_TEXT.values())
    return HELP_TEXT.get(topic.strip().lower(), "What's that?")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="theme-builder", description="Build the rEFInd theme assets.")
    ap.add_argument("-v", "--verbose", action="store_true", help="log every file read and written")
    sub = ap.add_subparsers(dest="command")

    p_help = sub.add_parser("help", help="show help, optionally for one command")
    p_help.add_argument("topic", nargs="?")

    p_build = sub.add_parser("build", help="build the theme into the build folder")
    p_build.add_argument("args", nargs="*", help="bakeBg, bakeBg.osIcons=N, bakeBg.otherIcons=N")

    sub.add_parser("clean", help="delete the build folder")
    return ap


def configure_logging(verbose: bool = False) -> None:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.command is None:
        print(help_text())
        return 0
    if args.command == "help":
        print(help_text(args.topic))
        return 0

    try:
        # Options are parsed before anything touches the disk
        options = BuildOptions.from_args(args.args) if args.command == "build" else None
        builder = ThemeBuilder(ThemeConfig.from_env())

        if args.command == "build":
            written = builder.build(options)
            logger.info(f"Build complete: {len(written)} file(s) in {builder.config.build_dir}")
        else:
            builder.clean()
    except (ThemeBuildError, OSError) as err:
        logger.error(f"{args.command} failed: {err}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
