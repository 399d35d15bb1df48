"""CLI for angular-analyzer."""

import argparse
import logging
import os
import sys

from angular_analyzer.analyzers.project_analyzer import ProjectAnalyzer
from angular_analyzer.domain.constants import COUNTER_SCOPES, DEFAULT_INTERACTIVE_TAGS
from angular_analyzer.domain.errors import AnalysisError
from angular_analyzer.domain.models import AnalysisResult, AnalyzerOptions
from angular_analyzer.domain.widget_types import get_id_strategy
from angular_analyzer.output.json_dumper import JSONDumper
from angular_analyzer.project_reader import ProjectReadError


def analyze_project(tsconfig_path: str, options: AnalyzerOptions) -> AnalysisResult:
    """Main orchestration: tsconfig -> routes + components -> structural model."""
    return ProjectAnalyzer(tsconfig_path, options).analyze()


def _build_options(args: argparse.Namespace) -> AnalyzerOptions:
    options = AnalyzerOptions(
        component_prefix=args.component_prefix,
        strict=not args.lenient,
        id_counter_scope=args.counter_scope,
        resolve_static_routes=args.resolve_static_routes,
        follow_imports=not args.no_follow_imports,
    )
    if args.routes_file:
        options.routes_file = args.routes_file
    if args.route_variables:
        options.route_variable_names = tuple(args.route_variables.split(','))
    if args.tags:
        options.interactive_tags = frozenset(args.tags.split(','))
    return options


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog='angular-analyzer', description='Angular static structure analyzer')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command')

    # analyze command
    analyze_parser = subparsers.add_parser('analyze', help='Analyze a project and print its structural model')
    analyze_parser.add_argument('tsconfig', help='Path to the project tsconfig.json')
    analyze_parser.add_argument('-o', '--output', help='Write JSON to this file instead of stdout')
    analyze_parser.add_argument('--routes-file', help='Routing file relative to the tsconfig directory '
                                                      '(default: src/app/app.module.ts)')
    analyze_parser.add_argument('--route-variables', help='Comma-separated route array variable names')
    analyze_parser.add_argument('--tags', help='Comma-separated interactive tag names')
    analyze_parser.add_argument('--component-prefix', default='app-', help='Nested component tag prefix (default: app-)')
    analyze_parser.add_argument('--counter-scope', choices=COUNTER_SCOPES, default='template',
                                help='Scope of symbolic widget ID counters (default: template)')
    analyze_parser.add_argument('--lenient', action='store_true',
                                help='Skip components without template or selector instead of failing')
    analyze_parser.add_argument('--no-pretty', action='store_true', help='Disable pretty printing')
    analyze_parser.add_argument('--resolve-static-routes', action='store_true',
                                help='Resolve navigation to exact static routes called without parameters')
    analyze_parser.add_argument('--no-follow-imports', action='store_true',
                                help='Analyze only the sources selected by the tsconfig, not their relative imports')

    # widgets command
    subparsers.add_parser('widgets', help='List interactive tags and their ID strategies')

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s: %(message)s',
    )

    if args.command == 'analyze':
        if not os.path.isfile(args.tsconfig):
            print(f"Error: {args.tsconfig} not found", file=sys.stderr)
            return 1

        try:
            result = analyze_project(args.tsconfig, _build_options(args))
        except (AnalysisError, ProjectReadError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        dumper = JSONDumper(pretty=not args.no_pretty)
        print(f"Analyzed {len(result.component_map)} components and "
              f"{len(result.route_map.components)} routes", file=sys.stderr)
        if args.output:
            dumper.write(result, args.output, project=args.tsconfig)
            print(f"Output: {args.output}", file=sys.stderr)
        else:
            print(dumper.dumps(result, project=args.tsconfig))

    elif args.command == 'widgets':
        for tag in sorted(DEFAULT_INTERACTIVE_TAGS):
            strategy = get_id_strategy(tag)
            attributes = ', '.join(strategy.attributes) or '-'
            print(f"  {tag:<26}{strategy.category.value:<10}{attributes} -> {strategy.fallback.value}")

    else:
        parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
