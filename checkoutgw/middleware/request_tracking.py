"""
Request tracking for checkout traffic.

Every response carries X-Request-ID so a declined or failed checkout can be
matched to its log lines. Errors that escape the blueprints are answered
with the API envelope under /api/ and the payment error page elsewhere.
"""
import uuid
import time
import logging
from flask import request, g, render_template
from werkzeug.exceptions import HTTPException

from checkoutgw.api.errors import error_response, internal_error

logger = logging.getLogger(__name__)


def _wants_json():
    return request.path.startswith('/api/')


def init_request_tracking(app):
    """Install request id, timing and fallback error handling on ``app``."""

    @app.before_request
    def assign_request_id():
        request_id = request.headers.get('X-Request-ID') or uuid.uuid4().hex
        g.request_id = request_id
        g.start_time = time.time()

        logger.info(
            f"[{request_id}] {request.method} {request.path}",
            extra={
                'request_id': request_id,
                'method': request.method,
                'path': request.path,
                'remote_addr': request.remote_addr,
            }
        )

    @app.after_request
    def stamp_response(response):
        request_id = getattr(g, 'request_id', None)
        if request_id is None:
            return response

        response.headers['X-Request-ID'] = request_id
        elapsed = time.time() - g.get('start_time', time.time())
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            f"[{request_id}] {request.method} {request.path} -> {response.status_code} ({elapsed:.3f}s)",
            extra={
                'request_id': request_id,
                'status_code': response.status_code,
                'duration_seconds': elapsed,
            }
        )
        return response

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if _wants_json():
            code = error.name.lower().replace(' ', '_')
            return error_response(code, error.description, status_code=error.code)
        return render_template('payment/error.html', message=error.description), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        request_id = getattr(g, 'request_id', 'unknown')
        logger.exception(
            f"[{request_id}] Unhandled exception during {request.method} {request.path}",
            extra={
                'request_id': request_id,
                'error_type': type(error).__name__,
            }
        )
        if _wants_json():
            return internal_error('An unexpected error occurred')
        return render_template('payment/error.html', message='Payment is temporarily unavailable.'), 500
