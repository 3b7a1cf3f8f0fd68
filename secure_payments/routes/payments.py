from flask import g
from flask_restx import Namespace, Resource, fields

from secure_payments.csrf import csrf_protected
from secure_payments.errors import ValidationError
from secure_payments.jwt_utils import customer_required
from secure_payments.payments import PaymentLifecycle
from secure_payments.routes.common import (
    json_body,
    payment_envelope,
    payment_list_envelope,
    payment_model,
    register_models,
    text,
)
from secure_payments.validators import PROVIDERS, validate_payment

payments_ns = Namespace('payments', description='Customer payment instructions (customer session)')
register_models(payments_ns, payment_model, payment_envelope, payment_list_envelope)

payment_input_model = payments_ns.model('PaymentInput', {
    'amount': fields.String(required=True, description='Up to 2 decimal places'),
    'currency': fields.String(required=True, description='ISO 4217 code'),
    'provider': fields.String(required=True, enum=list(PROVIDERS)),
    'beneficiaryAccount': fields.String(required=True),
    'swiftCode': fields.String(required=True, description='ISO 9362 BIC'),
})


@payments_ns.route('')
class PaymentList(Resource):
    @payments_ns.marshal_with(payment_list_envelope)
    @customer_required
    def get(self):
        """Payments of the logged-in customer, newest first"""
        payments = PaymentLifecycle().list_for_customer(g.identity.id)
        return {'status': 'ok', 'payments': [p.to_dict() for p in payments]}

    @payments_ns.expect(payment_input_model)
    @payments_ns.marshal_with(payment_envelope, code=201)
    @csrf_protected
    @customer_required
    def post(self):
        """Submit a payment instruction; it starts as pending"""
        data = json_body()
        errors = validate_payment(data)
        if errors:
            raise ValidationError(errors)

        # The owner is the session subject; a customerId in the body is ignored
        payment = PaymentLifecycle().create(
            customer_id=g.identity.id,
            amount=text(data, 'amount'),
            currency=text(data, 'currency'),
            provider=text(data, 'provider'),
            beneficiary_account=text(data, 'beneficiaryAccount'),
            swift_code=text(data, 'swiftCode'),
        )
        return {'status': 'ok', 'payment': payment.to_dict()}, 201


@payments_ns.route('/providers')
class Providers(Resource):
    @customer_required
    def get(self):
        """Supported payment providers"""
        return {
            'status': 'ok',
            'providers': [{'id': provider, 'name': provider} for provider in PROVIDERS],
        }
