import logging

from flask import g, make_response
from flask_restx import Namespace, Resource, fields
from sqlalchemy.exc import IntegrityError

from secure_payments.csrf import csrf_protected
from secure_payments.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from secure_payments.jwt_utils import (
    CUSTOMER_COOKIE,
    clear_session_cookie,
    customer_required,
    session_codec,
    set_session_cookie,
)
from secure_payments.models import db
from secure_payments.passwords import hash_password, verify_password
from secure_payments.routes.common import json_body, text
from secure_payments.store import create_customer, find_customer_by_credentials, find_customer_by_id
from secure_payments.validators import validate_login, validate_registration

logger = logging.getLogger(__name__)

auth_ns = Namespace('auth', description='Customer registration, login and profile')

register_model = auth_ns.model('RegisterInput', {
    'fullName': fields.String(required=True, description='Full name'),
    'idNumber': fields.String(required=True, description='13 digit national ID'),
    'accountNumber': fields.String(required=True, description='10-20 digit account number'),
    'password': fields.String(required=True, description='At least 12 characters'),
})

login_model = auth_ns.model('LoginInput', {
    'username': fields.String(required=True, description='National ID used at registration'),
    'accountNumber': fields.String(required=True),
    'password': fields.String(required=True),
})


def _start_session(response, customer):
    codec = session_codec()
    claims = codec.claims_for(customer.id, 'customer', customer.full_name, customer.account_number)
    return set_session_cookie(response, CUSTOMER_COOKIE, codec.issue(claims))


@auth_ns.route('/register')
class Register(Resource):
    @auth_ns.expect(register_model)
    @csrf_protected
    def post(self):
        """Register a customer and start a session"""
        data = json_body()
        errors = validate_registration(data)
        if errors:
            raise ValidationError(errors)

        try:
            customer = create_customer(
                full_name=text(data, 'fullName'),
                id_number=text(data, 'idNumber'),
                account_number=text(data, 'accountNumber'),
                password_hash=hash_password(data['password']),
            )
        except IntegrityError:
            db.session.rollback()
            raise ConflictError('A customer with that ID number or account already exists.')

        logger.info("Customer %s registered", customer.id)
        response = make_response({
            'status': 'ok',
            'message': 'Registration successful.',
            'user': customer.to_session_user(),
        }, 201)
        return _start_session(response, customer)


@auth_ns.route('/login')
class Login(Resource):
    @auth_ns.expect(login_model)
    @csrf_protected
    def post(self):
        """Log a customer in with ID number, account number and password"""
        data = json_body()
        errors = validate_login(data)
        if errors:
            raise ValidationError(errors)

        customer = find_customer_by_credentials(text(data, 'username'), text(data, 'accountNumber'))
        if not customer or not verify_password(data['password'], customer.password_hash):
            logger.warning("Failed customer login")
            raise AuthenticationError('Invalid credentials.')

        response = make_response({'status': 'ok', 'user': customer.to_session_user()})
        return _start_session(response, customer)


@auth_ns.route('/logout')
class Logout(Resource):
    @csrf_protected
    def post(self):
        """Clear the session cookie. The token itself stays valid until it expires."""
        response = make_response({'status': 'ok', 'message': 'Logged out.'})
        return clear_session_cookie(response, CUSTOMER_COOKIE)


@auth_ns.route('/me')
class Me(Resource):
    @customer_required
    def get(self):
        """Profile of the logged-in customer"""
        customer = find_customer_by_id(g.identity.id)
        if not customer:
            raise NotFoundError('Customer not found.')
        return {'status': 'ok', 'user': customer.to_dict()}
