from flask import request
from flask_restx import Model, fields


def json_body():
    """The JSON request body as a dict; anything else counts as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def text(data, key):
    value = data.get(key)
    return str(value).strip() if value is not None else ''


# --- Response models (Flask-RESTX) ---
customer_ref_model = Model('CustomerRef', {
    'id': fields.Integer,
    'fullName': fields.String,
    'accountNumber': fields.String,
})

_payment_fields = {
    'id': fields.Integer,
    'customerId': fields.Integer,
    'amount': fields.String(description='Decimal amount, 2 places'),
    'currency': fields.String,
    'provider': fields.String,
    'beneficiaryAccount': fields.String,
    'swiftCode': fields.String,
    'status': fields.String(enum=['pending', 'verified', 'rejected', 'submitted']),
    'createdAt': fields.String,
    'updatedAt': fields.String,
}

payment_model = Model('Payment', _payment_fields)

review_payment_model = Model('ReviewPayment', dict(
    _payment_fields,
    customer=fields.Nested(customer_ref_model, allow_null=True),
))

payment_envelope = Model('PaymentEnvelope', {
    'status': fields.String,
    'payment': fields.Nested(payment_model),
})

payment_list_envelope = Model('PaymentList', {
    'status': fields.String,
    'payments': fields.List(fields.Nested(payment_model)),
})

review_envelope = Model('ReviewPaymentEnvelope', {
    'status': fields.String,
    'payment': fields.Nested(review_payment_model),
})

review_list_envelope = Model('ReviewPaymentList', {
    'status': fields.String,
    'payments': fields.List(fields.Nested(review_payment_model)),
})


def register_models(ns, *models):
    for model in models:
        ns.add_model(model.name, model)
