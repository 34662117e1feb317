"""
HTTP API Server
aiohttp routes for full and per-category token analysis
"""

import json
import logging
from typing import Any, Optional

import aiohttp_cors
from aiohttp import web

from analysis.token_analyzer import TokenAnalyzer
from config.config_manager import ServerConfig
from utils.constants import Category, PROJECT_NAME
from utils.errors import ValidationError
from utils.helpers import isoformat_utc, utc_now

logger = logging.getLogger(__name__)

ANALYZER_KEY = web.AppKey("analyzer", TokenAnalyzer)
SERVER_CONFIG_KEY = web.AppKey("server_config", ServerConfig)

CATEGORY_ROUTES = {
    '/api/contract-behavior/{contractAddress}': Category.CONTRACT_BEHAVIOR,
    '/api/liquidity-health/{contractAddress}': Category.LIQUIDITY_HEALTH,
    '/api/holder-distribution/{contractAddress}': Category.HOLDER_DISTRIBUTION,
    '/api/community-signals/{contractAddress}': Category.COMMUNITY_SIGNALS,
}


def _timestamp() -> str:
    return isoformat_utc(utc_now())


def envelope(data: Any) -> web.Response:
    return web.json_response({'success': True, 'data': data, 'timestamp': _timestamp()})


def error_response(message: str, status: int) -> web.Response:
    return web.json_response(
        {'success': False, 'error': message, 'timestamp': _timestamp()},
        status=status,
    )


def _path_address(request: web.Request) -> str:
    return request.match_info['contractAddress'].strip()


@web.middleware
async def error_middleware(request: web.Request, handler):
    """Map failures onto the JSON error body"""
    try:
        return await handler(request)
    except ValidationError as e:
        return error_response(str(e), 400)
    except web.HTTPNotFound:
        return error_response(f"Route {request.path} not found", 404)
    except web.HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Unhandled error on {request.method} {request.path}: {e}", exc_info=True)
        return error_response("Internal server error", 500)


async def health_handler(request: web.Request) -> web.Response:
    config = request.app[SERVER_CONFIG_KEY]
    return web.json_response({
        'message': f"{PROJECT_NAME} API is running",
        'status': 'healthy',
        'timestamp': _timestamp(),
        'environment': config.environment,
    })


async def analyze_legacy_handler(request: web.Request) -> web.Response:
    """Full analysis as bare JSON"""
    analyzer = request.app[ANALYZER_KEY]
    analysis = await analyzer.analyze(_path_address(request))
    return web.json_response(analysis.to_dict())


async def analyze_token_handler(request: web.Request) -> web.Response:
    """Full analysis for a {contractAddress} JSON body"""
    try:
        body = await request.json()
    except (json.JSONDecodeError, ValueError):
        raise ValidationError("Request body must be JSON")

    address = body.get('contractAddress') if isinstance(body, dict) else None
    if not address:
        raise ValidationError("Contract address is required")

    analyzer = request.app[ANALYZER_KEY]
    analysis = await analyzer.analyze(address)
    return envelope(analysis.to_dict())


def make_category_handler(category: Category):
    async def handler(request: web.Request) -> web.Response:
        analyzer = request.app[ANALYZER_KEY]
        score = await analyzer.analyze_category(category.value, _path_address(request))
        return envelope(score.to_dict())

    handler.__name__ = f"{category.name.lower()}_handler"
    return handler


async def token_liquidity_handler(request: web.Request) -> web.Response:
    analyzer = request.app[ANALYZER_KEY]
    info = await analyzer.analyze_liquidity(_path_address(request))
    return envelope(info.to_dict())


def create_app(analyzer: TokenAnalyzer, server_config: Optional[ServerConfig] = None) -> web.Application:
    """
    Build the aiohttp application.

    The analyzer's provider sessions are opened on startup and closed on
    cleanup.
    """
    server_config = server_config or ServerConfig()

    app = web.Application(middlewares=[error_middleware])
    app[ANALYZER_KEY] = analyzer
    app[SERVER_CONFIG_KEY] = server_config

    app.router.add_get('/', health_handler)
    app.router.add_get('/analyze/{contractAddress}', analyze_legacy_handler)
    app.router.add_post('/api/analyze-token', analyze_token_handler)
    for path, category in CATEGORY_ROUTES.items():
        app.router.add_get(path, make_category_handler(category))
    app.router.add_get('/api/token-liquidity/{contractAddress}', token_liquidity_handler)

    # Setup CORS for the frontend origin
    cors = aiohttp_cors.setup(app, defaults={
        server_config.frontend_url: aiohttp_cors.ResourceOptions(
            allow_credentials=True,
            expose_headers="*",
            allow_headers="*",
            allow_methods=["GET", "POST", "OPTIONS"],
        )
    })
    for route in list(app.router.routes()):
        cors.add(route)

    async def on_startup(app: web.Application):
        await app[ANALYZER_KEY].initialize()

    async def on_cleanup(app: web.Application):
        await app[ANALYZER_KEY].close()

    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)
    return app


async def start_server(app: web.Application, host: str, port: int) -> web.AppRunner:
    """Start serving; the caller keeps the runner and cleans it up"""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info(f"🚀 {PROJECT_NAME} API running on http://{host}:{port}")
    return runner

