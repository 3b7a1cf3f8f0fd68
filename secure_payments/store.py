"""Customer and employee persistence."""

import logging

from secure_payments.models import Customer, Employee, db
from secure_payments.passwords import hash_password

logger = logging.getLogger(__name__)


def create_customer(full_name, id_number, account_number, password_hash):
    """Insert a customer.

    Duplicate ID or account numbers raise ``sqlalchemy.exc.IntegrityError``;
    the caller rolls back and reports the conflict.
    """
    customer = Customer(
        full_name=full_name,
        id_number=id_number,
        account_number=account_number,
        password_hash=password_hash,
    )
    db.session.add(customer)
    db.session.commit()
    return customer


def find_customer_by_credentials(id_number, account_number):
    return Customer.query.filter_by(id_number=id_number, account_number=account_number).first()


def find_customer_by_id(customer_id):
    return db.session.get(Customer, customer_id)


def find_employee_by_employee_id(employee_id):
    return Employee.query.filter_by(employee_key=employee_id.strip().lower()).first()


def find_employee_by_id(employee_pk):
    return db.session.get(Employee, employee_pk)


def create_employee(employee_id, full_name, password):
    employee = Employee(
        employee_id=employee_id.strip(),
        employee_key=employee_id.strip().lower(),
        full_name=full_name.strip(),
        password_hash=hash_password(password),
    )
    db.session.add(employee)
    db.session.commit()
    return employee


def seed_employees(entries):
    """Create the configured staff accounts that do not exist yet.

    ``entries`` is a list of ``{"employeeId", "fullName", "password"}`` dicts.
    Existing employees are left untouched. Returns the number created.
    """
    created = 0
    for entry in entries or []:
        employee_id = entry['employeeId']
        if find_employee_by_employee_id(employee_id):
            continue
        create_employee(employee_id, entry['fullName'], entry['password'])
        logger.info("Seeded employee %s", employee_id)
        created += 1
    return created
