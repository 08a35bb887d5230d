# -*- coding:utf-8 -*-
# Author: Kei Choi(hanul93@gmail.com)


# -------------------------------------------------------------------------
# Actual import modules
# -------------------------------------------------------------------------
import datetime
import json
import logging
import os
import sys
from optparse import OptionParser

from rich.console import Console
from rich.logging import RichHandler

# Configuration is automatically loaded by iscore.config module
# when it is imported. The .env file is loaded from ~/.isextract/.env
from isextract import __version__ as ISX_VERSION
from isextract import __last_update__ as ISX_BUILDDATE
from isextract.iscore import Extractor, get_config

# -------------------------------------------------------------------------
# Main constants
# -------------------------------------------------------------------------
_parts = ISX_BUILDDATE.split()
ISX_BUILDDATE_SHORT = f"{_parts[1]} {int(_parts[2])} {_parts[4]}"
ISX_LASTYEAR = _parts[4]

g_options = None  # Options
g_delta_time = None  # Extraction time

# -------------------------------------------------------------------------
# Classes and functions for colored output on console (using rich)
# -------------------------------------------------------------------------
console = Console()

# Color style constants for rich
STYLE_RED = "bold red"
STYLE_GREEN = "green"
STYLE_YELLOW = "yellow"
STYLE_CYAN = "bright_cyan"
STYLE_GREY = "white"
STYLE_GREY_BOLD = "bold white"

STATUS_STYLE = {
    "complete": STYLE_GREEN,
    "partial": STYLE_YELLOW,
    "unsupported": STYLE_GREY,
    "failed": STYLE_RED,
}


def cprint(msg, style):
    """Print colored message using rich console."""
    console.print(msg, style=style, end="", highlight=False, markup=False)


def print_error(msg):
    cprint("Error: ", STYLE_RED)
    print(msg)


# -------------------------------------------------------------------------
# print_isx_logo()
# -------------------------------------------------------------------------
def print_isx_logo():
    logo = f"""InstallShield Extractor (for {sys.platform.upper()}) Ver {ISX_VERSION} ({ISX_BUILDDATE_SHORT})
Copyright (C) 1995-{ISX_LASTYEAR} Kei Choi. All rights reserved.
"""

    print("------------------------------------------------------------")
    cprint(logo, STYLE_CYAN)
    print("------------------------------------------------------------")


# -------------------------------------------------------------------------
# Redefines Python's option parser.
# Allows fine-tuned error messages.
# -------------------------------------------------------------------------
class OptionParsingError(RuntimeError):
    def __init__(self, msg):
        self.msg = msg


class OptionParsingExit(Exception):
    def __init__(self, status, msg):
        self.msg = msg
        self.status = status


class ModifiedOptionParser(OptionParser):
    def error(self, msg):
        raise OptionParsingError(msg)

    def exit(self, status=0, msg=None):
        raise OptionParsingExit(status, msg)


# -------------------------------------------------------------------------
# define_options()
# Defines the extractor options.
# -------------------------------------------------------------------------
def define_options():
    usage = "Usage: %prog path[s] [options]"
    parser = ModifiedOptionParser(add_help_option=False, usage=usage)

    parser.add_option("-l", "--list", action="store_true", dest="opt_list", default=False)
    parser.add_option("-o", "--output", metavar="DIR", dest="output_path")
    parser.add_option("", "--version-hint", metavar="VER", dest="opt_version_hint")
    parser.add_option("-R", "--nor", action="store_true", dest="opt_nor", default=False)
    parser.add_option("", "--parallel", action="store_true", dest="opt_parallel", default=False)
    parser.add_option("", "--workers", metavar="N", type="int", dest="opt_workers", default=0)
    parser.add_option("", "--json", action="store_true", dest="opt_json", default=False)
    parser.add_option("", "--no-color", action="store_true", dest="opt_nocolor", default=False)
    parser.add_option("", "--debug", action="store_true", dest="opt_debug", default=False)
    parser.add_option("-?", "--help", action="store_true", dest="opt_help", default=False)

    return parser


# -------------------------------------------------------------------------
# parser_options()
# Parses the options for the extractor
# -------------------------------------------------------------------------
def parser_options(argv=None):
    parser = define_options()  # Define extractor options

    if argv is None:
        argv = sys.argv[1:]

    if len(argv) < 1:
        return "NONE_OPTION", None
    try:
        (options, args) = parser.parse_args(argv)
        if len(args) == 0:
            return options, None
    except OptionParsingError as e:  # When invalid options are used
        return "ILLEGAL_OPTION", e.msg
    except OptionParsingExit as e:
        return "ILLEGAL_OPTION", e.msg

    return options, args


# -------------------------------------------------------------------------
# print_usage()
# Prints the usage of the extractor
# -------------------------------------------------------------------------
def print_usage():
    print("\nUsage: isx path[s] [options]")


# -------------------------------------------------------------------------
# print_options()
# Prints the options of the extractor
# -------------------------------------------------------------------------
def print_options():
    options_string = """Options:
        -l,  --list            list files only, write nothing
        -o,  --output=DIR      write extracted files below DIR
             --version-hint=VER
                               installer version (e.g. 30.0.157), overrides
                               the version resource of the executable
        -R,  --nor             do not recurse into folders
             --parallel        enable parallel extraction
             --workers=N       number of worker threads (default: CPU count)
             --json            print reports as JSON
             --no-color        don't print with color
             --debug           print debug logs
        -?,  --help            this help"""

    print(options_string)


# -------------------------------------------------------------------------
# setup_logging()
# Route library logs through rich when --debug is given
# -------------------------------------------------------------------------
def setup_logging(debug):
    if not debug:
        return

    handler = RichHandler(console=console, show_path=False, markup=False)
    logging.basicConfig(level=logging.DEBUG, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)


def display_line(filename, message, message_color):
    cprint(f"{filename}  ", STYLE_GREY)
    cprint(f"{message}\n", message_color)


# -------------------------------------------------------------------------
# print_report(report)
# Prints the outcome of one installer
# -------------------------------------------------------------------------
def print_report(report):
    status = report.status

    if status in ("unsupported", "failed"):
        display_line(report.path, f"{status}: {report.error}", STATUS_STYLE[status])
        return

    display_line(
        report.path,
        f"{report.variant}, {report.entries_decoded}/{report.declared_files} files ({status})",
        STATUS_STYLE[status],
    )

    if g_options.opt_list:
        for f in report.files:
            mark = " *" if f.recovered else ""
            display_line(f"  {report.path}/{f.filename}", f"{f.size:,} bytes{mark}", STYLE_GREY)

    for note in report.notes:
        who = f" {note.filename}" if note.filename else ""
        cprint(f"  [{note.kind.value}] 0x{note.offset:X}{who}: {note.message}\n", STYLE_YELLOW)


def print_result(result):
    global g_delta_time

    print()
    print()

    cprint("Results:\n", STYLE_GREY_BOLD)
    cprint(f"Installers        :{result['Installers']}\n", STYLE_GREY_BOLD)
    cprint(f"Extracted files   :{result['Files']}\n", STYLE_GREY_BOLD)
    cprint(f"Recovered files   :{result['Recovered_files']}\n", STYLE_GREY_BOLD)
    cprint(f"Undecodable files :{result['Undecodable_files']}\n", STYLE_GREY_BOLD)
    cprint(f"Bytes lost        :{result['Bytes_lost']:,}\n", STYLE_GREY_BOLD)
    cprint(f"Partial           :{result['Partial']}\n", STYLE_GREY_BOLD)
    cprint(f"Unsupported       :{result['Unsupported']}\n", STYLE_GREY_BOLD)
    cprint(f"I/O errors        :{result['IO_errors']}\n", STYLE_GREY_BOLD)

    # Display extraction time
    t = str(g_delta_time).split(":")
    t_h = int(float(t[0]))
    t_m = int(float(t[1]))
    t_s = int(float(t[2]))
    cprint(f"Extraction time   :{t_h:02d}:{t_m:02d}:{t_s:02d}\n", STYLE_GREY_BOLD)

    print()


def summarize(reports):
    result = {
        "Installers": 0,
        "Files": 0,
        "Recovered_files": 0,
        "Undecodable_files": 0,
        "Bytes_lost": 0,
        "Partial": 0,
        "Unsupported": 0,
        "IO_errors": 0,
    }

    for report in reports:
        status = report.status
        if status == "unsupported":
            result["Unsupported"] += 1
            continue
        if status == "failed":
            result["IO_errors"] += 1
            continue

        result["Installers"] += 1
        result["Files"] += report.entries_decoded
        result["Recovered_files"] += sum(1 for f in report.files if f.recovered)
        result["Undecodable_files"] += report.entries_undecodable
        result["Bytes_lost"] += report.bytes_lost_to_resync
        if status == "partial":
            result["Partial"] += 1

    return result


# -------------------------------------------------------------------------
# get_output_dir(report, base, multiple)
# One sub folder per installer when several are extracted
# -------------------------------------------------------------------------
def get_output_dir(report, base, multiple):
    if not multiple:
        return base

    stem = os.path.splitext(os.path.basename(report.path))[0] or "installer"
    return os.path.join(base, stem)


# -------------------------------------------------------------------------
# main()
# -------------------------------------------------------------------------
def main(argv=None):
    global console
    global g_options

    # Parse options
    options, args = parser_options(argv)
    g_options = options  # Set global options

    # Handle --no-color option
    if not isinstance(options, str) and options.opt_nocolor:
        console = Console(no_color=True)

    json_mode = not isinstance(options, str) and options.opt_json

    # Display logo
    if not json_mode:
        print_isx_logo()

    # Invalid options?
    if options == "NONE_OPTION":  # No options provided
        return print_usage_and_options()
    elif options == "ILLEGAL_OPTION":  # Undefined options used
        print_usage()
        print(f"Error: {args}")
        return 2

    # Help option or no arguments
    if options.opt_help or not args:
        return print_usage_and_options()

    setup_logging(options.opt_debug)

    config = get_config()
    extractor = Extractor(config, version_hint=options.opt_version_hint)

    reports = extract_paths(extractor, args)

    if options.output_path and not options.opt_list:
        out = os.path.abspath(options.output_path)
        good = [r for r in reports if r.files]
        for report in good:
            extractor.save(report, get_output_dir(report, out, len(good) > 1))

    if json_mode:
        print(json.dumps([r.to_dict() for r in reports], indent=2))
    else:
        print_result(summarize(reports))

    return 1 if any(r.status == "failed" for r in reports) else 0


def extract_paths(extractor, args):
    """Extract the given paths and print one line per installer"""
    global g_delta_time

    # Check extraction start time
    start_time = datetime.datetime.now()

    max_workers = g_options.opt_workers if g_options.opt_workers > 0 else None
    callback = None if g_options.opt_json else print_report
    reports = []

    # Extract paths (supports multiple paths)
    try:
        for path in args:  # Arguments excluding options are the targets
            path = os.path.abspath(path)

            if os.path.isdir(path):
                with console.status("Extracting...", spinner="dots"):
                    reports += extractor.extract_directory(
                        path,
                        recursive=not g_options.opt_nor,
                        callback=callback,
                        parallel=g_options.opt_parallel,
                        max_workers=max_workers,
                    )
            elif os.path.isfile(path):
                report = extractor.extract_file(path)
                if callback:
                    callback(report)
                reports.append(report)
            else:
                print_error(f"Invalid path: '{path}'")
    except KeyboardInterrupt:
        cprint("\nInterrupted\n", STYLE_RED)

    # Check extraction end time
    g_delta_time = datetime.datetime.now() - start_time

    return reports


def print_usage_and_options():
    """Print usage and options"""
    print_usage()
    print_options()
    return 0


if __name__ == "__main__":
    sys.exit(main())
