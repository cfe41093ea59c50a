#!/usr/bin/env python3
# Copyright 2025 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""CLI entry point for resolving and checking mutato documents."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .deployment.deployment_config import PipelineConfig
from .exceptions import InvalidSchemaError, PipelineError
from .parser import Parser


def parse_variables(items: List[str]) -> Dict[str, str]:
    """Turn ``KEY=VALUE`` arguments into a context mapping."""
    variables: Dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got: {item!r}")
        variables[key] = value
    return variables


async def _resolve_all(parser: Parser, paths: List[Path]) -> List[Dict[str, Any]]:
    async def _one(path: Path) -> Dict[str, Any]:
        try:
            document = await parser.parse_file(path)
        except PipelineError as exc:
            result: Dict[str, Any] = {
                'file': str(path),
                'ok': False,
                'stage': exc.stage,
                'message': str(exc),
            }
            issues = getattr(exc, 'issues', None)
            if issues:
                result['issues'] = [
                    {'message': i.message, 'yaml_path': i.yaml_path, 'line': i.line, 'column': i.column}
                    for i in issues
                ]
            return result
        return {'file': str(path), 'ok': True, 'document': document}

    return list(await asyncio.gather(*(_one(p) for p in paths)))


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the mutato CLI."""
    parser = argparse.ArgumentParser(
        description='Resolve mutato.yml documents: render templates, parse YAML and check the schema',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'paths',
        nargs='*',
        default=None,
        help='Document paths to resolve (default: ./mutato.yml)',
    )
    parser.add_argument(
        '--format',
        choices=['human', 'json'],
        default='human',
        help='Output format (default: human)',
    )
    parser.add_argument(
        '--timeout',
        default=None,
        help='Timeout for each cmd() call, e.g. 10s or 500ms (default: $MUTATO_PREPROCESSOR_TIMEOUT or 10s)',
    )
    parser.add_argument(
        '--var',
        action='append',
        default=[],
        metavar='KEY=VALUE',
        help='Template variable, may be repeated',
    )
    parser.add_argument(
        '--schema',
        default=None,
        help='JSON Schema to validate against (default: bundled schema)',
    )
    parser.add_argument(
        '--print',
        dest='print_document',
        action='store_true',
        help='Print resolved documents (human format only)',
    )

    args = parser.parse_args(argv)

    if not args.paths:
        args.paths = ['mutato.yml']

    config = PipelineConfig.from_env()
    if args.timeout is not None:
        config.preprocessor_timeout = args.timeout
    if args.schema is not None:
        config.schema_path = args.schema
    config.set_logging()

    try:
        variables = parse_variables(args.var)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    try:
        pipeline = Parser.from_config(config, context=variables)
    except InvalidSchemaError as e:
        print(f"Schema error: {e}", file=sys.stderr)
        sys.exit(2)
    except ValueError as e:
        parser.error(str(e))

    results = asyncio.run(_resolve_all(pipeline, [Path(p) for p in args.paths]))

    if args.format == 'json':
        output = {
            'files': len(results),
            'errors': sum(1 for r in results if not r['ok']),
            'results': results,
        }
        print(json.dumps(output, indent=2, default=str))
    else:  # human-readable
        for result in results:
            if result['ok']:
                print(f"{result['file']}: OK")
                if args.print_document:
                    print(json.dumps(result['document'], indent=2, default=str))
            else:
                print(f"{result['file']}: ERROR [{result['stage']}] {result['message']}")

    if any(not r['ok'] for r in results):
        sys.exit(1)
    sys.exit(0)


if __name__ == '__main__':
    main()
