"""Payment lifecycle: pending -> verified / rejected -> submitted.

Payments are created ``pending`` by their owner. Staff move them to another
status. Re-applying the current status is a no-op, so a retried review request
changes nothing. Status updates are read-then-write without a spanning
transaction: when two reviewers update the same payment concurrently the last
write wins.
"""

import logging
from decimal import Decimal

from secure_payments.errors import InvalidSession, NotFoundError, ValidationError
from secure_payments.models import Customer, Payment, db, utcnow
from secure_payments.validators import validate_payment_review

logger = logging.getLogger(__name__)


def parse_status_filter(status_filter):
    """Turn "Verified, pending" (or an iterable) into {"verified", "pending"}."""
    if not status_filter:
        return set()
    if isinstance(status_filter, str):
        status_filter = status_filter.split(",")
    return {value.strip().lower() for value in status_filter if value and value.strip()}


class PaymentLifecycle:
    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def create(self, customer_id, amount, currency, provider, beneficiary_account, swift_code):
        # customer_id always comes from the caller's session, never the body
        if self.session.get(Customer, customer_id) is None:
            raise NotFoundError("Customer not found.")

        now = utcnow()
        payment = Payment(
            customer_id=customer_id,
            amount=Decimal(str(amount)),
            currency=str(currency).strip().upper(),
            provider=str(provider).strip().upper(),
            beneficiary_account=str(beneficiary_account).strip().upper(),
            swift_code=str(swift_code).strip().upper(),
            status='pending',
            created_at=now,
            updated_at=now,
        )
        self.session.add(payment)
        self.session.commit()
        logger.info("Payment %s created for customer %s", payment.id, customer_id)
        return payment

    def get(self, payment_id):
        payment = self.session.get(Payment, payment_id)
        if payment is None:
            raise NotFoundError("Payment not found.")
        return payment

    def list_for_customer(self, customer_id):
        return (
            self.session.query(Payment).filter_by(customer_id=customer_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .all()
        )

    def list_for_review(self, status_filter=None):
        wanted = parse_status_filter(status_filter)
        query = self.session.query(Payment).join(Customer).order_by(Payment.created_at.desc(), Payment.id.desc())
        if wanted:
            query = query.filter(db.func.lower(Payment.status).in_(sorted(wanted)))
        return query.all()

    def set_status(self, payment_id, new_status, actor):
        """Move a payment to ``new_status`` on behalf of ``actor`` (an employee).

        Returns the payment. When it already has ``new_status`` it is returned
        unchanged and nothing is written.
        """
        if getattr(actor, 'role', None) != 'employee':
            raise InvalidSession("Only employees can change payment status.")

        errors = validate_payment_review(new_status)
        if errors:
            raise ValidationError(errors)
        new_status = new_status.strip().lower()

        payment = self.get(payment_id)
        if payment.status == new_status:
            return payment

        previous = payment.status
        payment.status = new_status
        payment.updated_at = utcnow()
        self.session.commit()
        logger.info(
            "Payment %s status %s -> %s by employee %s",
            payment.id, previous, new_status, actor.reference,
        )
        return payment

    def submit_verified(self, mark_submitted=False):
        """Hand verified payments to the clearing network (stub).

        Only counts them unless ``mark_submitted`` is set, in which case they
        also move to ``submitted``.
        """
        verified = self.session.query(Payment).filter_by(status='verified').all()
        if mark_submitted and verified:
            now = utcnow()
            for payment in verified:
                payment.status = 'submitted'
                payment.updated_at = now
            self.session.commit()
        logger.info(
            "Submitted %d verified payment(s) to SWIFT (marked=%s)",
            len(verified), mark_submitted,
        )
        return len(verified)

