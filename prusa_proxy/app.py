"""
Prusa Proxy - Main Application
==============================

REST front end that pauses, resumes and stops print jobs on PrusaLink
printers and exports their state for Prometheus.

Run: python -m prusa_proxy --config ./prusa.yml
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from flask import Flask, Blueprint, Response, current_app, request, jsonify, send_from_directory
from flask_cors import CORS
from prometheus_client import CONTENT_TYPE_LATEST

from . import __version__
from .config import PORT, HOST, DEBUG, CONFIG_PATH, ProxyConfig, load_config
from .errors import ConfigurationError, ProxyError
from .metrics import build_registry, render_metrics
from .operations import PrinterOperations

logger = logging.getLogger(__name__)

# =============================================================================
# Application Setup
# =============================================================================

WEB_DIR = Path(__file__).parent / 'web'

bp = Blueprint('prusa_proxy', __name__)


def create_app(config: ProxyConfig, operations: Optional[PrinterOperations] = None) -> Flask:
    """
    Build the Flask application for a printer configuration.

    Args:
        config: Printers loaded from the YAML file
        operations: Prebuilt operations service (tests inject one with a fake sleep)
    """
    app = Flask(__name__, static_folder=None)
    CORS(app)

    operations = operations or PrinterOperations(config)
    app.config['PROXY_CONFIG'] = config
    app.config['PRINTER_OPERATIONS'] = operations
    app.config['METRICS_REGISTRY'] = build_registry(operations)

    app.register_blueprint(bp)
    return app


def _operations() -> PrinterOperations:
    return current_app.config['PRINTER_OPERATIONS']


def _text(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype='text/plain')


def _report(lines) -> Response:
    return _text(''.join(f'{line}\n' for line in lines))


# =============================================================================
# Info Endpoints
# =============================================================================

@bp.route('/', methods=['GET'])
def homepage():
    """Serve the info page."""
    return send_from_directory(str(WEB_DIR), 'index.html')


@bp.route('/health', methods=['GET'])
def health():
    """Health check with configured printers."""
    config: ProxyConfig = current_app.config['PROXY_CONFIG']
    return jsonify({
        'status': 'online',
        'version': __version__,
        'printers_configured': len(config.printers),
        'printers': [p.to_dict() for p in config.printers],
        'timestamp': datetime.now().isoformat(),
    })


# =============================================================================
# Single Printer
# =============================================================================

def _handle_printer_operation(operation: str) -> Response:
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('ip'), str) or not data['ip']:
        return _text('Invalid request body\n', 400)

    try:
        _operations().run(data['ip'], operation)
    except ProxyError as e:
        logger.warning('%s %s failed: %s', operation, data['ip'], e.message)
        return _text(f'{e.message}\n', e.status_code)

    return _text('', 200)


@bp.route('/pause', methods=['POST'])
def pause_printer():
    return _handle_printer_operation('pause')


@bp.route('/resume', methods=['POST'])
def resume_printer():
    return _handle_printer_operation('resume')


@bp.route('/stop', methods=['POST'])
def stop_printer():
    return _handle_printer_operation('stop')


# =============================================================================
# All Printers
# =============================================================================

@bp.route('/all/pause', methods=['POST'])
def pause_all_printers():
    return _report(_operations().run_all('pause'))


@bp.route('/all/resume', methods=['POST'])
def resume_all_printers():
    return _report(_operations().run_all('resume'))


@bp.route('/all/stop', methods=['POST'])
def stop_all_printers():
    """Stop every printer, last configured first."""
    results = _operations().stop_all()
    return _report(line for result in results for line in result.lines)


# =============================================================================
# Metrics
# =============================================================================

@bp.route('/metrics', methods=['GET'])
def metrics():
    """Prometheus exposition of printer state."""
    body = render_metrics(current_app.config['METRICS_REGISTRY'])
    return Response(body, status=200, content_type=CONTENT_TYPE_LATEST)


# =============================================================================
# Main
# =============================================================================

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='prusa-proxy',
        description='Digest-auth REST proxy for PrusaLink printers.',
    )
    parser.add_argument('--config', default=CONFIG_PATH,
                        help='Configuration file for prusa_proxy (default: %(default)s)')
    parser.add_argument('--port', type=int, default=PORT,
                        help='Port to listen on (default: %(default)s)')
    parser.add_argument('--host', default=HOST,
                        help='Address to bind (default: %(default)s)')
    parser.add_argument('--debug', action='store_true', default=DEBUG,
                        help='Enable debug logging and the Flask debugger')
    args = parser.parse_args(argv)

    if not os.path.isfile(args.config):
        parser.error(f'Configuration file does not exist: {args.config}')
    return args


def main(argv=None):
    """Run the proxy."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"[ERROR] Error loading configuration file: {e.message}", file=sys.stderr)
        sys.exit(1)

    print("=" * 60)
    print("  Prusa Proxy")
    print("=" * 60)
    print(f"  Version: {__version__}")
    print(f"  Config: {args.config}")
    print(f"  Listening on: http://{args.host}:{args.port}")
    print("=" * 60)
    print("  Endpoints:")
    print("    GET  /               - Info page")
    print("    GET  /health         - Health check")
    print("    POST /pause          - Pause printer {\"ip\": ...}")
    print("    POST /resume         - Resume printer {\"ip\": ...}")
    print("    POST /stop           - Stop printer {\"ip\": ...}")
    print("    POST /all/pause      - Pause all printers")
    print("    POST /all/resume     - Resume all printers")
    print("    POST /all/stop       - Stop all printers (reverse order)")
    print("    GET  /metrics        - Prometheus metrics")
    print("=" * 60)
    print(f"  Loaded {len(config.printers)} printer(s) from configuration")
    print("=" * 60)

    app = create_app(config)
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)


if __name__ == '__main__':
    main()
