from flask import make_response, request
from flask_restx import Namespace, Resource

from secure_payments.csrf import SECRET_COOKIE, attach_csrf_cookies, csrf_guard

security_ns = Namespace('security', description='Health check and CSRF token issuance')


@security_ns.route('/health')
class Health(Resource):
    def get(self):
        """Liveness check"""
        return {'status': 'ok', 'message': 'API healthy.'}


@security_ns.route('/csrf-token')
class CsrfToken(Resource):
    @security_ns.doc('get_csrf_token')
    def get(self):
        """Set the CSRF secret cookie and return the matching token.

        An existing secret cookie is kept so tabs that already hold a token
        stay valid.
        """
        guard = csrf_guard()
        secret = request.cookies.get(SECRET_COOKIE)
        if not guard.is_well_formed(secret):
            secret = guard.new_secret()
        token = guard.issue_token(secret)

        response = make_response({'status': 'ok', 'csrfToken': token})
        return attach_csrf_cookies(response, secret, token)
