"""dver - .NET SDK version manager

    Returns:
        int: Exit code (0 success, 1 resolution/validation error, 2 I/O or installer error)
"""
import logging
import sys

from args import parse_args
from cli_config import load_settings
from cli_sdk import COMMANDS, build_context
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from versioning.errors import DverError


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    try:
        configure_logging(
            level=getattr(args, "LOG_LEVEL", None),
            log_file=getattr(args, "LOG_FILE", None),
            quiet=getattr(args, "QUIET", False),
        )
    except OSError as exc:
        # console handler is already installed
        logger.error("Cannot open log file %s: %s", args.LOG_FILE, exc)
        sys.exit(ExitCodes.IO_ERROR.value)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    settings = load_settings(args)
    ctx = build_context(settings)
    handler = COMMANDS[args.action]

    try:
        code = handler(args, ctx)
    except DverError as exc:
        logger.error("%s", exc)
        if exc.hint:
            logger.error("Hint: %s", exc.hint)
        code = exc.exit_code.value
    except KeyboardInterrupt:
        logger.error("Interrupted.")
        code = ExitCodes.IO_ERROR.value

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action=args.action,
                outcome="success" if code == ExitCodes.SUCCESS.value else "failure",
                exit_code=code,
            )
        )
    sys.exit(code)


if __name__ == "__main__":
    main()
