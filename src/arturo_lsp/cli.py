"""
CLI entry point for arturo-lsp.

Usage:
    arturo-lsp serve                     Run the language server over stdio
    arturo-lsp serve --tcp --port 2087   Run the language server over TCP

Tools:
    arturo-lsp lint <file>...            Report diagnostics for files
    arturo-lsp symbols <file>            List variables, functions and types
    arturo-lsp format <file>             Format an Arturo file
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from arturo_lsp import __version__
from arturo_lsp.config import ServerSettings, load_settings

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Send logs to stderr or a file; stdout carries the LSP stream."""
    handler_args = {"filename": log_file, "encoding": "utf-8"} if log_file else {"stream": sys.stderr}
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt='%H:%M:%S',
        force=True,
        **handler_args,
    )


def _settings(args) -> ServerSettings:
    settings = load_settings(Path(args.config) if args.config else None)
    level = args.log_level or settings.logging.level
    configure_logging(level, args.log_file or settings.logging.file)
    return settings


def _read(path: str) -> Optional[str]:
    try:
        return Path(path).read_text(encoding='utf-8')
    except OSError as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return None


def cmd_serve(args):
    """Run the language server."""
    from .server import serve, server

    server.apply_settings(_settings(args))
    serve(tcp=args.tcp, host=args.host, port=args.port)
    return 0


def cmd_lint(args):
    """Lint files for issues."""
    from .analysis.lint import ArturoLinter, Severity

    settings = _settings(args)
    linter = ArturoLinter.from_settings(settings.diagnostics)
    threshold = Severity(args.severity).rank

    all_issues = []
    status = 0
    for path in args.files:
        text = _read(path)
        if text is None:
            status = 1
            continue
        issues = [i for i in linter.lint_text(text, path) if i.severity.rank <= threshold]
        all_issues.extend(issues)

    if args.json:
        print(json.dumps([i.to_dict() for i in all_issues], indent=2))
    elif all_issues:
        for issue in all_issues:
            print(issue)
        print(f"\n{len(all_issues)} issues found")
    else:
        print("No issues found")

    if any(i.severity == Severity.ERROR for i in all_issues):
        status = 1
    return status


def cmd_symbols(args):
    """List the symbols defined in a file."""
    from .parser.symbols import SymbolTableBuilder

    _settings(args)
    text = _read(args.file)
    if text is None:
        return 1

    builder = SymbolTableBuilder(text)
    symbols = builder.build()

    if args.json:
        print(json.dumps({
            "functions": {s.name: {"line": s.line, "column": s.column, "type": s.inferred_type}
                          for s in symbols.functions.values()},
            "variables": {s.name: {"line": s.line, "column": s.column, "type": s.inferred_type}
                          for s in symbols.variables.values()},
            "custom_types": sorted(symbols.custom_types),
        }, indent=2))
        return 0

    for symbol in symbols.all_symbols():
        print(f"{symbol.line + 1}:{symbol.column + 1}  {symbol.kind.value:<9} {symbol.name}  {symbol.inferred_type}")
    for name in sorted(symbols.custom_types):
        print(f"-        type      :{name}")
    return 0


def cmd_format(args):
    """Format an Arturo file."""
    from .features.formatting import ArturoFormatter, FormatOptions

    settings = _settings(args)
    text = _read(args.file)
    if text is None:
        return 1

    indent = args.indent or settings.formatting.indent_size
    result = ArturoFormatter(FormatOptions(indent_size=indent)).format_string(text)

    if args.inplace:
        with open(args.file, 'w', encoding='utf-8') as f:
            f.write(result)
        print(f"Formatted: {args.file}")
    else:
        print(result)
    return 0


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="arturo-lsp",
        description="Arturo language server and tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    arturo-lsp serve
    arturo-lsp lint main.art --severity error
    arturo-lsp symbols main.art --json
    arturo-lsp format main.art --inplace
"""
    )
    parser.add_argument('--version', action='version', version=f'arturo-lsp {__version__}')
    parser.add_argument('--config', help='Path to a YAML settings file')
    parser.add_argument('--log-level', help='Logging level (DEBUG, INFO, ...)')
    parser.add_argument('--log-file', help='Write logs to this file instead of stderr')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # serve
    serve_p = subparsers.add_parser('serve', help='Run the language server')
    serve_p.add_argument('--tcp', action='store_true', help='Listen on TCP instead of stdio')
    serve_p.add_argument('--host', default='127.0.0.1')
    serve_p.add_argument('--port', type=int, default=2087)
    serve_p.set_defaults(func=cmd_serve)

    # lint
    lint_p = subparsers.add_parser('lint', help='Lint Arturo files')
    lint_p.add_argument('files', nargs='+', help='Files to lint')
    lint_p.add_argument('--json', action='store_true', help='Output JSON')
    lint_p.add_argument('--severity', default='hint',
                        choices=['error', 'warning', 'info', 'hint'],
                        help='Lowest severity to report')
    lint_p.set_defaults(func=cmd_lint)

    # symbols
    symbols_p = subparsers.add_parser('symbols', help='List symbols in a file')
    symbols_p.add_argument('file', help='File to inspect')
    symbols_p.add_argument('--json', action='store_true', help='Output JSON')
    symbols_p.set_defaults(func=cmd_symbols)

    # format
    format_p = subparsers.add_parser('format', help='Format an Arturo file')
    format_p.add_argument('file', help='File to format')
    format_p.add_argument('-i', '--inplace', action='store_true', help='Modify in place')
    format_p.add_argument('--indent', type=int, help='Spaces per indent level')
    format_p.set_defaults(func=cmd_format)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
