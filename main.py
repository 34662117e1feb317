#!/usr/bin/env python3
"""
ChainCheck - Token Trust & Risk Analysis
Entry point for the HTTP API server and one-off command-line analyses
"""

import argparse
import asyncio
import json
import logging
import sys

from analysis.token_analyzer import TokenAnalyzer
from api.server import create_app, start_server
from config.config_manager import ConfigManager
from config.settings import Settings
from monitoring.logger import setup_logging
from utils.constants import PROJECT_NAME, VERSION
from utils.errors import ConfigurationError, ValidationError

logger = logging.getLogger("ChainCheck")


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description=f"{PROJECT_NAME} - Token trust and risk analysis"
    )

    parser.add_argument(
        '--config',
        default=None,
        help='Path to YAML configuration file'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f"{PROJECT_NAME} {VERSION}"
    )

    subparsers = parser.add_subparsers(dest='command')

    serve = subparsers.add_parser('serve', help='Run the HTTP API (default)')
    serve.add_argument('--host', default=None, help='Bind address')
    serve.add_argument('--port', type=int, default=None, help='Bind port')

    analyze = subparsers.add_parser('analyze', help='Analyze one token and print JSON')
    analyze.add_argument('address', help='Token contract address / coin type')

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = 'serve'
        args.host = None
        args.port = None
    return args


async def run_analysis(config, address: str) -> int:
    """Print one analysis as JSON"""
    async with TokenAnalyzer.from_config(config) as analyzer:
        try:
            analysis = await analyzer.analyze(address)
        except ValidationError as e:
            logger.error(f"❌ {e}")
            return 2

    print(json.dumps(analysis.to_dict(), indent=2))
    return 0


async def run_server(config, host=None, port=None) -> int:
    """Serve the API until interrupted"""
    server = config.server
    logger.info(f"🚀 Starting {Settings.APP_NAME} v{Settings.APP_VERSION}")
    app = create_app(TokenAnalyzer.from_config(config), server)
    runner = await start_server(app, host or server.host, port or server.port)

    try:
        await asyncio.Event().wait()
    finally:
        logger.info("🛑 Shutting down API server")
        await runner.cleanup()
    return 0


async def main(argv=None) -> int:
    """Main entry point"""
    args = parse_arguments(argv)

    overrides = {'logging': {'level': 'DEBUG'}} if args.debug else None
    try:
        config = ConfigManager(args.config).load(overrides)
    except ConfigurationError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"❌ Configuration error: {e}")
        return 1

    # keep stdout clean for the JSON printed by analyze
    setup_logging(config.logging, stream=sys.stderr if args.command == 'analyze' else None)

    if args.command == 'analyze':
        return await run_analysis(config, args.address)
    return await run_server(config, args.host, args.port)


def cli():
    """Console script entry point"""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("👋 Goodbye!")


if __name__ == "__main__":
    cli()
