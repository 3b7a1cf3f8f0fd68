import logging

from flask import current_app, g, make_response, request
from flask_restx import Namespace, Resource, fields

from secure_payments.csrf import csrf_protected
from secure_payments.errors import AuthenticationError, NotFoundError, ValidationError
from secure_payments.jwt_utils import (
    EMPLOYEE_COOKIE,
    clear_session_cookie,
    employee_required,
    session_codec,
    set_session_cookie,
)
from secure_payments.passwords import verify_password
from secure_payments.payments import PaymentLifecycle
from secure_payments.routes.common import (
    customer_ref_model,
    json_body,
    register_models,
    review_envelope,
    review_list_envelope,
    review_payment_model,
    text,
)
from secure_payments.store import find_employee_by_employee_id, find_employee_by_id
from secure_payments.validators import (
    REVIEW_STATUSES,
    validate_employee_login,
    validate_payment_review,
)

logger = logging.getLogger(__name__)

staff_ns = Namespace('staff', description='Staff review of payments (employee session)')
register_models(staff_ns, customer_ref_model, review_payment_model, review_envelope, review_list_envelope)

employee_login_model = staff_ns.model('EmployeeLoginInput', {
    'employeeId': fields.String(required=True),
    'password': fields.String(required=True),
})

review_input_model = staff_ns.model('PaymentReviewInput', {
    'status': fields.String(required=True, enum=list(REVIEW_STATUSES)),
})


# Largest value a 64-bit signed INTEGER column can hold
MAX_PAYMENT_ID = 2 ** 63 - 1


def _payment_id(raw):
    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()) or int(raw) > MAX_PAYMENT_ID:
        raise ValidationError(['Invalid payment reference.'], message='Invalid payment reference.')
    return int(raw)


@staff_ns.route('/login')
class StaffLogin(Resource):
    @staff_ns.expect(employee_login_model)
    @csrf_protected
    def post(self):
        """Log an employee in; employee ids are case-insensitive"""
        data = json_body()
        errors = validate_employee_login(data)
        if errors:
            raise ValidationError(errors)

        employee = find_employee_by_employee_id(text(data, 'employeeId'))
        if not employee or not verify_password(data['password'], employee.password_hash):
            logger.warning("Failed staff login")
            raise AuthenticationError('Invalid credentials.')

        codec = session_codec()
        claims = codec.claims_for(employee.id, 'employee', employee.full_name, employee.employee_id)
        response = make_response({'status': 'ok', 'employee': employee.to_dict()})
        return set_session_cookie(response, EMPLOYEE_COOKIE, codec.issue(claims))


@staff_ns.route('/logout')
class StaffLogout(Resource):
    @csrf_protected
    def post(self):
        """Clear the employee session cookie"""
        response = make_response({'status': 'ok', 'message': 'Logged out.'})
        return clear_session_cookie(response, EMPLOYEE_COOKIE)


@staff_ns.route('/me')
class StaffMe(Resource):
    @employee_required
    def get(self):
        """Profile of the logged-in employee"""
        employee = find_employee_by_id(g.identity.id)
        if not employee:
            raise NotFoundError('Employee not found.')
        return {'status': 'ok', 'employee': employee.to_dict()}


@staff_ns.route('/payments')
class ReviewList(Resource):
    @staff_ns.doc(params={'status': 'Comma-separated statuses, e.g. pending,verified'})
    @staff_ns.marshal_with(review_list_envelope)
    @employee_required
    def get(self):
        """All payments with customer identity, optionally filtered by status"""
        payments = PaymentLifecycle().list_for_review(request.args.get('status', ''))
        return {'status': 'ok', 'payments': [p.to_dict(include_customer=True) for p in payments]}


@staff_ns.route('/payments/<string:payment_id>/status')
@staff_ns.param('payment_id', 'Payment ID')
class PaymentStatus(Resource):
    @staff_ns.expect(review_input_model)
    @staff_ns.marshal_with(review_envelope)
    @csrf_protected
    @employee_required
    def post(self, payment_id):
        """Set a payment's status; repeating the current status changes nothing"""
        payment_id = _payment_id(payment_id)
        status = json_body().get('status')
        errors = validate_payment_review(status)
        if errors:
            raise ValidationError(errors)

        payment = PaymentLifecycle().set_status(payment_id, status, actor=g.identity)
        return {'status': 'ok', 'payment': payment.to_dict(include_customer=True)}


@staff_ns.route('/payments/submit')
class SubmitVerified(Resource):
    @csrf_protected
    @employee_required
    def post(self):
        """Send verified payments to SWIFT (stub: reports how many there are)"""
        count = PaymentLifecycle().submit_verified(
            mark_submitted=current_app.config['SUBMIT_MARKS_SUBMITTED'],
        )
        return {
            'status': 'ok',
            'message': f'Submitted {count} verified payment(s) to SWIFT.',
            'submitted': count,
        }
