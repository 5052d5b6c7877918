"""
Standardized error responses for the checkout API.
"""
from flask import g, jsonify
from checkoutgw.payment.constants import APIErrorCode


def error_response(code, message, details=None, status_code=400):
    """
    Generate standardized error response.

    Args:
        code (str): Error code from APIErrorCode
        message (str): Human-readable error message
        details (dict, optional): Additional error details
        status_code (int): HTTP status code

    Returns:
        tuple: (response, status_code)
    """
    response = {
        'error': {
            'code': code,
            'message': message,
            'request_id': getattr(g, 'request_id', None)
        }
    }

    if details:
        response['error']['details'] = details

    return jsonify(response), status_code


def checkout_error_response(error):
    """Map a CheckoutError to the error envelope using its code and status."""
    return error_response(error.code, error.message, error.details, error.status_code)


def invalid_request_error(message, details=None):
    """Invalid request error (400)."""
    return error_response(
        APIErrorCode.INVALID_REQUEST,
        message,
        details,
        400
    )


def authentication_error(message='Authentication required'):
    """Authentication error (401)."""
    return error_response(
        APIErrorCode.AUTHENTICATION_FAILED,
        message,
        None,
        401
    )


def internal_error(message='Internal server error'):
    """Internal server error (500)."""
    return error_response(
        APIErrorCode.INTERNAL_ERROR,
        message,
        None,
        500
    )
