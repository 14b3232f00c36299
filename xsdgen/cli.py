#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
# mypy: ignore-errors
"""Command Line Interface"""
import sys
import os
import argparse
import logging

from xsdgen import SchemaCompiler
from xsdgen.codegen import write_module_file
from xsdgen.compiler.exceptions import XsdCompileError, IngestError, ResolutionError, \
    InvalidDerivationError, UnsupportedConstructError

PROGRAM_NAME = os.path.basename(sys.argv[0])

EXIT_STATUS = (
    (IngestError, 1),
    (ResolutionError, 2),
    (InvalidDerivationError, 3),
    (UnsupportedConstructError, 4),
)


def get_loglevel(verbosity):
    if verbosity <= 0:
        return logging.ERROR
    elif verbosity == 1:
        return logging.WARNING
    elif verbosity == 2:
        return logging.INFO
    else:
        return logging.DEBUG


def get_exit_status(error):
    for cls, status in EXIT_STATUS:
        if isinstance(error, cls):
            return status
    return 1


def positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("%r is not an integer" % value) from None
    if number < 1:
        raise argparse.ArgumentTypeError("%r is not a positive integer" % value)
    return number


def compile_schema():
    parser = argparse.ArgumentParser(prog=PROGRAM_NAME, add_help=True,
                                     description="compile a set of XSD schemas "
                                                 "into a Python parser module.")
    parser.usage = "%(prog)s [OPTION]... SCHEMA [SCHEMA ...]\n" \
                   "Try '%(prog)s --help' for more information."

    parser.add_argument('-v', dest='verbosity', action='count', default=0,
                        help="increase output verbosity.")
    parser.add_argument('-o', '--output', type=str, default=None,
                        help="the file where to write the generated module, "
                             "standard output for default.")
    parser.add_argument('--module-name', type=str, default=None,
                        help="the name of the generated module, reported in its header.")
    parser.add_argument('--strict', action='store_true', default=False,
                        help="reject the constructs that are skipped with a warning "
                             "for default (identity constraints and notations).")
    parser.add_argument('--workers', type=positive_int, default=None, metavar='N',
                        help="the number of threads used for loading the schemas.")
    parser.add_argument('schemas', metavar='SCHEMA', nargs='+',
                        help="XSD schema files to be compiled together.")

    args = parser.parse_args()

    settings = {'strict': args.strict, 'loglevel': get_loglevel(args.verbosity)}
    if args.workers is not None:
        settings['max_workers'] = args.workers
    if args.module_name is not None:
        settings['module_name'] = args.module_name
    elif args.output is not None:
        settings['module_name'] = os.path.splitext(os.path.basename(args.output))[0]

    compiler = SchemaCompiler(*args.schemas, **settings)
    try:
        source_code = compiler.compile()
    except XsdCompileError as err:
        sys.stderr.write(f"{err.__class__.__name__}: {err}\n")
        sys.exit(get_exit_status(err))

    if args.output is None:
        sys.stdout.write(source_code)
    else:
        try:
            write_module_file(source_code, args.output)
        except OSError as err:
            sys.stderr.write(f"{err}\n")
            sys.exit(1)
        if args.verbosity > 0:
            sys.stdout.write(f"{', '.join(args.schemas)} compiled to {args.output}\n")

    sys.exit(0)
