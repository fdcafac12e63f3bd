import os.path
import sys

from rich.pretty import pprint

from argosy import *

__prog__ = os.path.basename(sys.argv[0])

PREAMBLE = """\
sync is a dummy file transfer program created solely for demonstrating
the capabilities of argosy."""

EPILOGUE = """\
You must specify at least one source file or directory and a destination to
copy to. For example:

    sync *.c /dest/path/

Since this is a dummy program, nothing will actually be transferred."""

args = Args(
    ("-v", "--verbose", "+", "increase verbosity"),
    ("--info", "FLAGS", "fine-grained informational verbosity"),
    ("--debug", "FLAGS", "fine-grained debug verbosity"),
    ("-q", "--quiet", "suppress non-error messages"),
    ("-r", "--recursive", "recurse into directories"),
    ("-l", "copy symlinks as symlinks"),
    ("-L", "transform symlink into referent file/dir"),
    ("--chmod", "CHMOD?", "affect file and/or directory permissions"),
    ("-f", "--filter", "RULES+", "add a file-filtering RULE"),
    ("-V", "--version", "print the version and exit"),
    ("-h", "--help", "show this help"),
    ("SRC+", "source file(s) or directory(s)"),
    ("DEST", "destination file or directory"),
)


def main(argv):
    try:
        bindings = args.parse(argv)
    except ArgumentException as fault:
        # --help wins over any other mistake on the line
        if "-h" in argv[1:] or "--help" in argv[1:]:
            return args.print_usage(__prog__, PREAMBLE, epilogue=EPILOGUE)
        return trigger(fault, shell=True)

    if bindings["--help"]:
        return args.print_usage(__prog__, PREAMBLE, epilogue=EPILOGUE)
    if bindings["--version"]:
        return print(__prog__, "0.42")

    if bindings["-l"] and bindings["-L"]:
        trigger(InvalidArgumentError(
            "options '-l' and '-L' are mutually exclusive",
            hint="keep only one of them",
        ), shell=True)

    pprint({
        "verbosity": bindings["-v"].count(),
        "quiet": bindings["--quiet"].is_present(),
        "recursive": bindings["-r"].is_present(),
        "chmod": bindings["--chmod"].value_or("0644"),
        "rules": bindings["--filter"].values(),
        "sources": bindings["SRC"].values(),
        "destination": bindings["DEST"].value(),
    })


if __name__ == '__main__':
    main(sys.argv)
