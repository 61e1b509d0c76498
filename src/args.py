"""Argument parsing functionality for dver."""

import argparse
from constants import Constants


def _add_directory_arg(parser):
    parser.add_argument("--directory",
                        dest="DIRECTORY",
                        help="Directory whose global.json applies (default: current directory)",
                        action="store",
                        type=str,
                        default=None)


def build_parser():
    """Builds the top-level parser with one subparser per command."""
    parser = argparse.ArgumentParser(
        prog=Constants.PROG_NAME,
        description=(
            "dver - .NET SDK version manager"
        ),
        add_help=True,
    )

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS,
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    parser.add_argument("--install-dir",
                        dest="INSTALL_DIR",
                        help="SDK install root (default: ~/.dotnet)",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Only report errors on the console.",
                        action="store_true")

    sub = parser.add_subparsers(dest="action", metavar="<command>")
    sub.required = True

    current = sub.add_parser("current", help="Show the SDK version in effect")
    _add_directory_arg(current)

    sub.add_parser("list", help="List installed SDK versions")

    use = sub.add_parser("use", help="Pin an SDK version via global.json")
    use.add_argument("VERSION",
                     help="Full version, major (8) or major.minor (8.0)",
                     type=str)
    _add_directory_arg(use)

    install = sub.add_parser("install", help="Install an SDK version")
    install_group = install.add_mutually_exclusive_group(required=True)
    install_group.add_argument("--version",
                               dest="VERSION",
                               help="Version to install (full, major or major.minor)",
                               action="store",
                               type=str)
    install_group.add_argument("--lts",
                               dest="LTS",
                               help="Install the latest LTS SDK",
                               action="store_true")

    uninstall = sub.add_parser("uninstall", help="Remove installed SDK versions")
    uninstall_group = uninstall.add_mutually_exclusive_group(required=True)
    uninstall_group.add_argument("--version",
                                 dest="VERSION",
                                 help="Version to remove (full or major)",
                                 action="store",
                                 type=str)
    uninstall_group.add_argument("--all",
                                 dest="ALL",
                                 help="Remove every SDK in the install root",
                                 action="store_true")

    doctor = sub.add_parser("doctor", help="Check for common issues")
    _add_directory_arg(doctor)

    remote = sub.add_parser("remote", help="List SDK versions available for download")
    remote.add_argument("--lts",
                        dest="LTS",
                        help="Show only LTS channels",
                        action="store_true")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
