import logging
import sys

from rich.logging import RichHandler
from rich.pretty import pprint

from optline import *

__prog__ = "optline-demo"

verbose = BoolOption("-v", "--verbose", descr="print the parsed options")
jobs = IntOption("-j", "--jobs", default=1, descr="number of parallel jobs")
seed = UintOption("--seed", default=0, descr="random seed")


@bool_option("-d", "--debug", descr="log the remaining tokens as they are resolved")
def debug(value):
    logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler()])


@str_option("-o", "--output", default="out.txt", descr="output file")
def output(path):
    if not path:
        raise ParseFailure("output path cannot be empty")


if __name__ == '__main__':
    parser = OptParser(debug, verbose, jobs, seed, output)
    try:
        parser.parse()
    except ParseFailure as fault:
        report(fault, fancy=True)
        sys.exit(2)

    if verbose.value:
        pprint(parser.registry)
    pprint({
        "program_name": parser.program_name,
        "program_argc": parser.program_argc,
        "program_argv": parser.program_argv,
    })
