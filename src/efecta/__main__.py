## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# efecta — Interpreter for a small indentation-structured language built on procedure invocation.
#

import sys
import time
import traceback
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import EfectaError, EfectaParseError, EfectaStructureError
from .parser import format_parse_error_context, format_source_lines
from .formatting import write_without_ansi, format_block_tree

from . import api


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    stats: bool
    plain: bool


_HEADERS = {
    'lookup': "LOOKUP ERROR.",
    'type': "TYPE ERROR.",
    'arity': "ARITY ERROR.",
    'value': "RUNTIME ERROR.",
}


class EfectaRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = api._RUNTIME
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False

    def _report(self, message: str, detail: str, exc_type: str = None, context: str = '') -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True

    def _handle_exception(self, exc: Exception, filename: str, source: str) -> None:
        if isinstance(exc, EfectaStructureError) and exc.line is None:
            context = '\n' + format_source_lines(exc.efecta_meta, exc.efecta_token)
            self._report("STRUCTURE ERROR.", f"Program `\033[97m{filename}\033[0m` is malformed: {exc}", type(exc).__name__, context)
        elif isinstance(exc, EfectaParseError):
            context = format_parse_error_context(filename, exc.line, exc.column, exc.token, source=source)
            context += f"\n\033[90m{str(exc)}\033[0m\n"
            message = "STRUCTURE ERROR." if isinstance(exc, EfectaStructureError) else "SYNTAX ERROR."
            self._report(message, f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context)
        elif isinstance(exc, EfectaError):
            token = exc.efecta_token
            detail = f"Procedure `\033[1;97m{token}\033[0m` failed: {exc}" if token else str(exc)
            context = '\n' + format_source_lines(exc.efecta_meta, token)
            self._report(_HEADERS.get(exc.kind, "RUNTIME ERROR."), detail, type(exc).__name__, context)
        else:
            token = getattr(exc, 'efecta_token', None)
            print(f'\033[30;43m RUNTIME ERROR. \033[0m Procedure \033[1;97m`{token}`\033[0m caused an error in interpret! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            print(format_source_lines(getattr(exc, 'efecta_meta', None), token), file=sys.stderr)
            traceback.print_exc()
            self.failure = True

    def execute_script(self, source: str, filename: str, arguments: tuple = ()) -> None:
        try:
            program = self.runtime.load(source, filename=filename)
            self.runtime.execute(program, (filename, *arguments), verbosity=self.verbose, stats=self.total_stats)
        except Exception as exc:
            self._handle_exception(exc, filename, source)

    def show_tree(self, source: str, filename: str) -> None:
        try:
            print(format_block_tree(self.runtime.parse(source, filename=filename)))
        except Exception as exc:
            self._handle_exception(exc, filename, source)

    def finalize(self) -> int:
        if self.total_stats and not self.failure:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Trace procedure invocations (-vv for every call).')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of invocations).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, stats=stats, plain=plain)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command('run-file', context_settings={'ignore_unknown_options': True})
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.argument('runtime_args', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run_file(ctx: click.Context, script, runtime_args: tuple[str, ...]) -> None:
    runner = EfectaRunner(ctx.obj['config'])
    runner.execute_script(script.read(), script.name or '<STDIN>', runtime_args)
    ctx.exit(runner.finalize())


@cli.command('show-tree')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.pass_context
def show_tree(ctx: click.Context, script) -> None:
    runner = EfectaRunner(ctx.obj['config'])
    runner.show_tree(script.read(), script.name or '<STDIN>')
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g, r = [], list(a)
    # Global options come before the script, everything after it belongs to the program.
    while r and (r[0] in ('--verbose', '--stats', '--plain', '-p', '--help') or (r[0].startswith('-v') and set(r[0][1:]) <= {'v'})):
        g.append(r.pop(0))

    if r and r[0] in cli.commands:
        cmd, tail = r[0], r[1:]
    elif r and (r[0] == '-' or Path(r[0]).exists()):
        cmd, tail = 'run-file', r
    elif not r and not sys.stdin.isatty() and '--help' not in g:
        cmd, tail = 'run-file', ['-']
    else:
        cli.main(args=a, prog_name='efecta')
        return

    cli.main(args=[*g, cmd, *tail], prog_name='efecta')


if __name__ == "__main__":
    main()
