#!/usr/bin/env python3

r"""
usage: sort.py [--help] [-k N] [-n] [-r] [-u] [-M] [-b] [-c] [-h] FILE

sort the lines of a file, and write them back into the same file

positional arguments:
  FILE        the file to sort in place

optional arguments:
  --help      show this help message and exit
  -k N        sort by the Nth blank-separated field, counting up from 1 (default: 0 for all fields)
  -n          sort integers by value, such as 9 before 10
  -r          reverse the sorted lines, ties included
  -u          drop each line that repeats an earlier line
  -M          sort month names by month, such as January before December
  -b          ignore blanks leading and trailing each line
  -c          say so and quit, if already sorted (else sort as usual)
  -h          sort human sizes by size, such as 9K before 10K

quirks:
  compares lines field by field, not char by char, when given no -k
  counts a line with too few fields for -k as tied with every other line
  stops comparing at the first fields that differ, even if -n calls them equal, such as 1 vs 01
  takes -h sizes as powers of 1024, such as 1K = 1024, a la linux "du -h"
  takes -M month names only when spelled out, such as "January" but not "Jan" or "JANUARY"
  compares chars by code point, never by locale
  keeps ties in input order, until -r reverses them
  drops lines that differ only by blanks as duplicates, when -u and -b both given
  rewrites the file from a new copy, so drops hard links, but follows symbolic links

unsurprising quirks:
  ends every line with LF "\n", even when the file ended without one, or ended lines with CRLF
  doesn't accept input at stdin, nor write to stdout
  exits zero when -c finds the file sorted, and sorts it when not

examples:
  sort.py words.txt  # sort words.txt in place
  sort.py -k 2 -n fruit.txt  # sort by the integer in the 2nd field of each line
  sort.py -ru words.txt  # sort in reverse, and drop repeated lines
  sort.py -c -n numbers.txt  # say "already sorted", else sort
  du -sh * >sizes.txt && sort.py -k 1 -h sizes.txt  # sort by size
"""

# code reviewed by people, and by Black and Flake8 bots


import argparse
import collections
import fractions
import functools
import os
import re
import shutil
import sys
import tempfile


MONTH_NAMES = (
    "January February March April May June"
    " July August September October November December".split()
)

HUMAN_SUFFIXES = "KMGTPEZY"

INT_REGEX = r"[-+]?[0-9]+"

HUMAN_SIZE_REGEX = r"([-+]?[0-9]+(?:[.][0-9]+)?)(?:([KMGTPEZYkmgtpezy])(?:i?B)?|B)?"


Config = collections.namedtuple(
    "Config",
    "key_column numeric reverse unique month ignore_blanks check human".split(),
)

Row = collections.namedtuple("Row", "original keys".split())


class SortPyError(Exception):
    """Quit the run, say why, and exit nonzero"""

    exit_status = 1


class UsageError(SortPyError):
    exit_status = 2  # exit 2 from rejecting usage


class ReadError(SortPyError):
    def __init__(self, path, exc):
        message = "{}: cannot read: {}: {}".format(path, type(exc).__name__, exc)
        super().__init__(message)


class WriteError(SortPyError):
    def __init__(self, path, exc):
        message = "{}: cannot write: {}: {}".format(path, type(exc).__name__, exc)
        super().__init__(message)


def main(argv=None):
    """Run from the command line"""

    argv = sys.argv if (argv is None) else argv

    parser = compile_argdoc(epi="quirks:")
    args = parser.parse_args(argv[1:])

    try:
        config = config_from_args(args)
        sorted_already = sort_file(args.file, config=config)
    except UsageError as exc:
        stderr_print(parser.format_usage().rstrip())
        stderr_print("sort.py: error: {}".format(exc))
        return exc.exit_status
    except SortPyError as exc:
        stderr_print("sort.py: error: {}".format(exc))
        return exc.exit_status

    if sorted_already:
        print("sort.py: {}: already sorted".format(args.file))

    return 0


def compile_argdoc(epi):
    """Declare how to parse the command line"""

    doc = __doc__
    prog = doc.strip().splitlines()[0].split()[1]
    description = list(_ for _ in doc.strip().splitlines() if _)[1]
    epilog_at = doc.index(epi)
    epilog = doc[epilog_at:]

    parser = argparse.ArgumentParser(
        prog=prog,
        description=description,
        add_help=False,  # leave "-h" free to mean human sizes, a la bash "sort -h"
        formatter_class=argparse.RawTextHelpFormatter,
        epilog=epilog,
    )

    parser.add_argument("file", metavar="FILE", help="the file to sort in place")

    parser.add_argument(
        "--help", action="help", help="show this help message and exit"
    )

    parser.add_argument(
        "-k",
        metavar="N",
        dest="key_column",
        type=int,
        default=0,
        help="sort by the Nth blank-separated field, counting up from 1"
        " (default: 0 for all fields)",
    )

    parser.add_argument(
        "-n",
        dest="numeric",
        action="store_true",
        help="sort integers by value, such as 9 before 10",
    )
    parser.add_argument(
        "-r",
        dest="reverse",
        action="store_true",
        help="reverse the sorted lines, ties included",
    )
    parser.add_argument(
        "-u",
        dest="unique",
        action="store_true",
        help="drop each line that repeats an earlier line",
    )
    parser.add_argument(
        "-M",
        dest="month",
        action="store_true",
        help="sort month names by month, such as January before December",
    )
    parser.add_argument(
        "-b",
        dest="ignore_blanks",
        action="store_true",
        help="ignore blanks leading and trailing each line",
    )
    parser.add_argument(
        "-c",
        dest="check",
        action="store_true",
        help="say so and quit, if already sorted (else sort as usual)",
    )
    parser.add_argument(
        "-h",
        dest="human",
        action="store_true",
        help="sort human sizes by size, such as 9K before 10K",
    )

    return parser


def config_from_args(args):
    """Freeze the parsed command line into the Config of this run"""

    if args.key_column < 0:
        raise UsageError(
            "-k N must count up from 0, not:  -k {}".format(args.key_column)
        )

    config = Config(
        key_column=args.key_column,
        numeric=args.numeric,
        reverse=args.reverse,
        unique=args.unique,
        month=args.month,
        ignore_blanks=args.ignore_blanks,
        check=args.check,
        human=args.human,
    )

    return config


#
# Pick the keys out of each line
#


def extract_keys(line, config):
    """Pick out all the fields of a line, or just the one field chosen by -k"""

    chars = line.strip() if config.ignore_blanks else line
    fields = chars.split()

    if not config.key_column:
        return fields

    if config.key_column > len(fields):
        return list()

    return [fields[config.key_column - 1]]


def parse_rows(lines, config):
    """Pair each line with its keys, in input order"""

    rows = list(Row(original=_, keys=tuple(extract_keys(_, config))) for _ in lines)

    return rows


#
# Compare rows by their keys
#


def parse_int(key):
    """Return the int spelled by the key, else None"""

    if re.fullmatch(INT_REGEX, string=key):
        return int(key)

    return None


def parse_month(key):
    """Return 1 for "January" through 12 for "December", else None"""

    if key in MONTH_NAMES:
        return MONTH_NAMES.index(key) + 1

    return None


def parse_human_size(key):
    """Return the count of bytes spelled by such as "512", "9K", or "1.5MiB", else None"""

    match = re.fullmatch(HUMAN_SIZE_REGEX, string=key)
    if not match:
        return None

    (digits, suffix) = match.groups()

    power = (HUMAN_SUFFIXES.index(suffix.upper()) + 1) if suffix else 0
    size = fractions.Fraction(digits) * (1024 ** power)

    return size


def key_less(key_a, key_b, config):
    """Say if one key sorts before another, by the first rule that fits both"""

    if config.numeric:
        int_a = parse_int(key_a)
        int_b = parse_int(key_b)
        if (int_a is not None) and (int_b is not None):
            return int_a < int_b

    if config.human:
        size_a = parse_human_size(key_a)
        size_b = parse_human_size(key_b)
        if (size_a is not None) and (size_b is not None):
            return size_a < size_b

    if config.month:
        month_a = parse_month(key_a)
        month_b = parse_month(key_b)
        if (month_a is not None) and (month_b is not None):
            return month_a < month_b

    return key_a < key_b


def row_less(row_a, row_b, config):
    """Say if one row sorts before another, decided by the first keys that differ"""

    for (key_a, key_b) in zip(row_a.keys, row_b.keys):
        if key_a != key_b:
            return key_less(key_a, key_b, config=config)

    return False  # tied when out of keys to compare


def row_cmp(row_a, row_b, config):
    """Compare two rows as -1, 0, or +1, for 'functools.cmp_to_key'"""

    if row_less(row_a, row_b, config=config):
        return -1
    if row_less(row_b, row_a, config=config):
        return 1

    return 0


#
# Sort the rows, then reverse and dedupe them
#


def is_sorted(rows, config):
    """Say if no row sorts before the row above it"""

    for (row_above, row) in zip(rows, rows[1:]):
        if row_less(row, row_above, config=config):
            return False

    return True


def sort_rows(rows, config):
    """Sort the rows by their keys, keeping tied rows in input order"""

    cmp = functools.partial(row_cmp, config=config)
    sorted_rows = sorted(rows, key=functools.cmp_to_key(cmp))

    return sorted_rows


def reverse_rows(rows):
    """Reverse the rows end to end, ties included"""

    return list(reversed(rows))


def unique_rows(rows, ignore_blanks=False):
    """Keep the first row of each distinct text, dropping the later repeats"""

    texts = set()

    kept_rows = list()
    for row in rows:
        text = row.original.strip() if ignore_blanks else row.original
        if text not in texts:
            texts.add(text)
            kept_rows.append(row)

    return kept_rows


def process_rows(rows, config):
    """Sort the rows, then reverse them if -r, then drop repeats if -u"""

    processed = sort_rows(rows, config=config)
    if config.reverse:
        processed = reverse_rows(processed)
    if config.unique:
        processed = unique_rows(processed, ignore_blanks=config.ignore_blanks)

    return processed


def sort_file(path, config):
    """Sort a file in place, but return True without writing, if -c finds it sorted"""

    lines = read_lines(path)
    rows = parse_rows(lines, config=config)

    if config.check:
        if is_sorted(rows, config=config):
            return True

    processed = process_rows(rows, config=config)
    write_lines(path, lines=list(_.original for _ in processed))

    return False


#
# Read the lines in, and write them back out
#


def read_lines(path):
    """Read every line of a file, without its line-ending"""

    try:
        with open(
            path, encoding="utf-8", errors="surrogateescape", newline=""
        ) as incoming:
            chars = incoming.read()
    except OSError as exc:
        raise ReadError(path, exc) from exc

    lines = chars.split("\n")
    if lines[-1] == "":
        lines = lines[:-1]  # drop the empty line after the last "\n", if any

    lines = list((_[:-1] if _.endswith("\r") else _) for _ in lines)

    return lines


def write_lines(path, lines):
    """Replace a file with the lines given, first writing a copy beside it"""

    real_path = os.path.realpath(path)  # sort the file at the end of the links
    dirname = os.path.dirname(real_path)

    try:
        (fd, temp_path) = tempfile.mkstemp(prefix=".sort.py.", dir=dirname)
    except OSError as exc:
        raise WriteError(path, exc) from exc

    try:
        with os.fdopen(
            fd, "w", encoding="utf-8", errors="surrogateescape", newline=""
        ) as outgoing:
            for line in lines:
                outgoing.write(line + "\n")

        shutil.copymode(real_path, temp_path)
        os.replace(temp_path, real_path)

    except OSError as exc:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise WriteError(path, exc) from exc


#
# Git-track some Python idioms here
#


# deffed in many files  # missing from docs.python.org
def stderr_print(*args, **kwargs):
    sys.stdout.flush()
    print(*args, **kwargs, file=sys.stderr)
    sys.stderr.flush()  # esp. when kwargs["end"] != "\n"


if __name__ == "__main__":
    sys.exit(main(sys.argv))


# copied from:  git clone https://github.com/pelavarre/pybashish.git
