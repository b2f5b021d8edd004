"""notitlebar - hide the title bar of maximized windows (cli & daemon)."""

import asyncio
import sys

from .ansi import BOLD, GREEN, RED, colorize
from .logging_setup import get_logger, init_logger, is_debug
from .manager import run_daemon
from .models import ConfigError, ExitCode
from .version import VERSION

__all__ = ["main"]

HELP = """Syntax: notitlebar [options] [command]

If the command is omitted, runs the daemon.

Commands:
 validate             Check the configuration file.
 quickstart           Interactive configuration wizard (--dry-run, --output PATH).
 version              Show the version.
 help                 Show this help.

Options:
 --debug              Enable debug logging.
 --config PATH        Use another configuration file or directory.
 --log FILE           Also write the logs to FILE.
"""


def use_param(argv: list[str], txt: str) -> str:
    """Check if parameter `txt` is in argv.

    If found, removes it from argv & returns the argument value
    """
    v = ""
    if txt in argv:
        i = argv.index(txt)
        if i + 1 >= len(argv):
            msg = f"{txt} expects a value"
            raise ValueError(msg)
        v = argv[i + 1]
        del argv[i : i + 2]
    return v


def use_flag(argv: list[str], txt: str) -> bool:
    """Check if flag `txt` is in argv, removing it."""
    if txt in argv:
        argv.remove(txt)
        return True
    return False


async def run_validate(config_filename: str = "") -> ExitCode:
    """Validate the configuration file without starting the daemon."""
    # pylint: disable=import-outside-toplevel
    from .config_loader import ConfigLoader  # noqa: PLC0415
    from .settings import Settings  # noqa: PLC0415

    log = get_logger("validate")
    try:
        section = await ConfigLoader(log).load(config_filename)
    except ConfigError:
        return ExitCode.CONFIG_ERROR

    problems = Settings(section, logger=log).validate()
    if problems:
        for problem in problems:
            print(f"  {colorize(problem, RED, stream=sys.stdout)}")
        print(colorize(f"Found {len(problems)} problem(s)", RED, BOLD, stream=sys.stdout))
        return ExitCode.USAGE_ERROR
    print(colorize("Configuration is valid!", GREEN, stream=sys.stdout))
    return ExitCode.SUCCESS


def run_command(argv: list[str]) -> ExitCode:  # noqa: PLR0911
    """Run the command described by `argv` (program name excluded)."""
    try:
        debug = use_flag(argv, "--debug")
        log_file = use_param(argv, "--log")
        config_filename = use_param(argv, "--config")
    except ValueError as e:
        print(e, file=sys.stderr)
        return ExitCode.USAGE_ERROR

    init_logger(filename=log_file or None, force_debug=debug or is_debug())
    log = get_logger("startup")

    command = argv[0] if argv else ""
    if command in {"help", "--help", "-h"}:
        print(HELP)
        return ExitCode.SUCCESS
    if command == "version":
        print(VERSION)
        return ExitCode.SUCCESS
    if command == "validate":
        return asyncio.run(run_validate(config_filename))
    if command == "quickstart":
        from .quickstart import main as quickstart_main  # noqa: PLC0415  # pylint: disable=import-outside-toplevel

        return quickstart_main(argv[1:])
    if command:
        log.error("Unknown command: %s", command)
        print(HELP, file=sys.stderr)
        return ExitCode.USAGE_ERROR

    try:
        asyncio.run(run_daemon(config_filename))
    except KeyboardInterrupt:
        pass
    except ConfigError:
        log.critical("Failed to load the configuration.")
        return ExitCode.CONFIG_ERROR
    except OSError as e:
        log.critical("Cannot start: %s", e)
        return ExitCode.ENV_ERROR
    except Exception:  # pylint: disable=W0718
        log.critical("Unhandled exception:", exc_info=True)
        return ExitCode.ENV_ERROR
    return ExitCode.SUCCESS


def main() -> None:
    """Run the command."""
    sys.exit(run_command(sys.argv[1:]))


if __name__ == "__main__":
    main()
