import argparse
import asyncio
import logging
import sys
from pathlib import Path

import yaml

from deno_babel.deno_config import load_settings, VARIABLE_PREFIXES
from deno_babel.deno_datatypes import DenoBabelError
from deno_babel.deno_printer import Printer
from deno_babel.deno_runtime import ScriptRunner


def _split_assignment(text: str, option: str):
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"{option} expects NAME=VALUE, got {text!r}")
    return name, value


def parse_var(text: str):
    # Values are YAML so lists and numbers survive: --var xs=[1,2,3]
    name, value = _split_assignment(text, "--var")
    return name, yaml.safe_load(value)


def parse_colnames(text: str):
    name, value = _split_assignment(text, "--colnames")
    return name, [c for c in value.split(",") if c]


def parse_allow(text: str):
    name, sep, values = text.partition("=")
    if not sep:
        return name
    return name, values.split(",")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a TypeScript code block with Deno.")
    parser.add_argument("file", help="file holding the code block")
    parser.add_argument("--var", action="append", type=parse_var, default=[], metavar="NAME=VALUE")
    parser.add_argument("--colnames", action="append", type=parse_colnames, default=[], metavar="NAME=a,b")
    parser.add_argument("--allow", action="append", type=parse_allow, default=[], metavar="NAME[=v1,v2]")
    parser.add_argument("--result-type", choices=("value", "output"), default="value")
    parser.add_argument("--results", default=None, help="space separated result params, e.g. 'verbatim'")
    parser.add_argument("--cmd", default=None)
    parser.add_argument("--prefix", choices=VARIABLE_PREFIXES, default=None)
    parser.add_argument("--config", default=None, help="YAML settings file")
    parser.add_argument("--expand", action="store_true", help="print the assembled script and exit")
    parser.add_argument("--verbose", action="store_true")
    return parser


def params_from_args(args) -> dict:
    return {
        "cmd": args.cmd,
        "result-type": args.result_type,
        "var": args.var,
        "allow": args.allow,
        "colname-names": dict(args.colnames),
        "result-params": args.results,
        "prefix": args.prefix,
    }


async def run_block(args) -> int:
    """Run (or expand) one code block file and print its result."""
    p = Path(args.file)
    try:
        source = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: file not found: {args.file}", file=sys.stderr)
        return 1

    runner = ScriptRunner(load_settings(args.config))
    params = params_from_args(args)
    if args.expand:
        print(runner.expand_body(source, params))
        return 0

    result = await runner.handle_script(source, params)
    if result.status == 'error':
        if result.value:
            print(result.value, file=sys.stderr)
        print(result.format_error(), file=sys.stderr)
        return 1
    if isinstance(result.value, str):
        print(result.value)
    else:
        print(Printer().pformat(result.value))
    return 0


async def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    try:
        return await run_block(args)
    except DenoBabelError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nExiting.")
