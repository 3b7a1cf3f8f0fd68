# secure_payments/models.py

from datetime import datetime, timezone

from flask_bcrypt import Bcrypt
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
bcrypt = Bcrypt()

PAYMENT_STATUSES = ('pending', 'verified', 'rejected', 'submitted')


def utcnow():
    # SQLite drops tzinfo, so timestamps are stored as naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class Customer(db.Model):
    __tablename__ = 'customers'

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(60), nullable=False)
    # Each of these is unique on its own, so the pair is unique too
    id_number = db.Column(db.String(13), unique=True, nullable=False)
    account_number = db.Column(db.String(20), unique=True, nullable=False)
    password_hash = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    payments = db.relationship('Payment', back_populates='customer', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'fullName': self.full_name,
            'idNumber': self.id_number,
            'accountNumber': self.account_number,
        }

    def to_session_user(self):
        return {
            'id': self.id,
            'fullName': self.full_name,
            'accountNumber': self.account_number,
        }


class Employee(db.Model):
    __tablename__ = 'employees'

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(60), nullable=False)
    employee_id = db.Column(db.String(20), nullable=False)
    # Lower-cased employee_id, used for lookups and uniqueness
    employee_key = db.Column(db.String(20), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'fullName': self.full_name,
            'employeeId': self.employee_id,
            'role': 'employee',
        }


class Payment(db.Model):
    __tablename__ = 'payments'

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False, index=True)
    # Numeric, never float, for money
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    currency = db.Column(db.String(3), nullable=False)
    provider = db.Column(db.String(20), nullable=False)
    beneficiary_account = db.Column(db.String(34), nullable=False)
    swift_code = db.Column(db.String(11), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='pending')
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    customer = db.relationship('Customer', back_populates='payments')

    def to_dict(self, include_customer=False):
        data = {
            'id': self.id,
            'customerId': self.customer_id,
            'amount': f'{self.amount:.2f}',  # money always travels as a string
            'currency': self.currency,
            'provider': self.provider,
            'beneficiaryAccount': self.beneficiary_account,
            'swiftCode': self.swift_code,
            'status': self.status,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }
        if include_customer:
            customer = self.customer
            data['customer'] = customer.to_session_user() if customer else None
        return data
