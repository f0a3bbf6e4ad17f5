import logging

import requests
from flask import current_app

logger = logging.getLogger(__name__)


def verify_recaptcha(token, remote_ip=None):
    """Check a reCAPTCHA token with Google.

    Verification is skipped (returns True) when no secret is configured,
    which keeps local development usable.
    """
    secret = current_app.config.get('RECAPTCHA_SECRET_KEY')
    if not secret:
        logger.warning("reCAPTCHA verification skipped: RECAPTCHA_SECRET_KEY not configured")
        return True

    payload = {'secret': secret, 'response': token}
    if remote_ip:
        payload['remoteip'] = remote_ip

    try:
        response = requests.post(current_app.config['RECAPTCHA_VERIFY_URL'], data=payload, timeout=10)
        result = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"reCAPTCHA verification error: {e}")
        return False

    if not result.get('success') and result.get('error-codes'):
        logger.error(f"reCAPTCHA verification failed: {result['error-codes']}")
    return bool(result.get('success'))
