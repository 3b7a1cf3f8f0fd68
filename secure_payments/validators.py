"""Input format checks.

Every validator takes the raw request payload and returns a list of
human-readable messages. An empty list means the payload is valid. Validators
never raise, whatever the payload looks like.
"""

import re
from decimal import Decimal

NAME_REGEX = re.compile(r"^[A-Za-z ,.'-]{2,60}$", re.ASCII)
ID_NUMBER_REGEX = re.compile(r"^\d{13}$", re.ASCII)
ACCOUNT_REGEX = re.compile(r"^\d{10,20}$", re.ASCII)
PASSWORD_REGEX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^\w\s]).{12,}$", re.ASCII)
AMOUNT_REGEX = re.compile(r"^(?:0|[1-9]\d{0,12})(?:\.\d{1,2})?$", re.ASCII)
CURRENCY_REGEX = re.compile(r"^[A-Z]{3}$", re.ASCII)
BENEFICIARY_ACCOUNT_REGEX = re.compile(r"^[A-Z0-9]{8,34}$", re.ASCII)
SWIFT_REGEX = re.compile(r"^[A-Z]{4}[A-Z]{2}[A-Z0-9]{2}(?:[A-Z0-9]{3})?$", re.ASCII)
EMPLOYEE_ID_REGEX = re.compile(r"^[A-Za-z0-9-]{3,20}$", re.ASCII)

PROVIDERS = ("SWIFT", "SEPA", "FEDWIRE")
# "pending" is only ever set at creation
REVIEW_STATUSES = ("verified", "rejected", "submitted")

MSG_FULL_NAME = "Full name may only contain letters, spaces, commas, apostrophes, and hyphens (2-60 characters)."
MSG_ID_NUMBER = "ID number must be a 13 digit South African ID."
MSG_ACCOUNT = "Account number must be 10-20 digits."
MSG_PASSWORD = "Password must be at least 12 characters and include upper, lower, digit and special character."
MSG_USERNAME = "Username must be the 13 digit ID number used at registration."
MSG_LOGIN_PASSWORD = "Password format is invalid."
MSG_EMPLOYEE_ID = "Employee ID must be 3-20 letters, digits or hyphens."
MSG_EMPLOYEE_PASSWORD = "Password is required."
MSG_AMOUNT = "Amount must be a valid number with up to two decimal places."
MSG_AMOUNT_POSITIVE = "Amount must be greater than zero."
MSG_CURRENCY = "Currency must be a 3 letter ISO code."
MSG_PROVIDER = "Provider is not supported."
MSG_BENEFICIARY = "Beneficiary account must be 8-34 alphanumeric characters."
MSG_SWIFT = "SWIFT code must follow ISO 9362."
MSG_REVIEW_STATUS = "Status must be one of: " + ", ".join(REVIEW_STATUSES) + "."


def _field(payload, name):
    if not isinstance(payload, dict):
        return ""
    value = payload.get(name)
    if value is None or isinstance(value, (dict, list, bool)):
        return ""
    return str(value).strip()


def _matches(regex, value):
    return regex.fullmatch(value) is not None


def _amount_text(payload):
    value = payload.get("amount") if isinstance(payload, dict) else None
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, float):
        # repr keeps 100.5 as "100.5", never scientific for sane amounts
        return repr(value)
    return str(value).strip()


def validate_registration(payload):
    errors = []
    if not _matches(NAME_REGEX, _field(payload, "fullName")):
        errors.append(MSG_FULL_NAME)
    if not _matches(ID_NUMBER_REGEX, _field(payload, "idNumber")):
        errors.append(MSG_ID_NUMBER)
    if not _matches(ACCOUNT_REGEX, _field(payload, "accountNumber")):
        errors.append(MSG_ACCOUNT)
    # passwords are never trimmed
    password = payload.get("password") if isinstance(payload, dict) else None
    if not isinstance(password, str) or not _matches(PASSWORD_REGEX, password):
        errors.append(MSG_PASSWORD)
    return errors


def validate_login(payload):
    errors = []
    if not _matches(ID_NUMBER_REGEX, _field(payload, "username")):
        errors.append(MSG_USERNAME)
    if not _matches(ACCOUNT_REGEX, _field(payload, "accountNumber")):
        errors.append(MSG_ACCOUNT)
    password = payload.get("password") if isinstance(payload, dict) else None
    if not isinstance(password, str) or not _matches(PASSWORD_REGEX, password):
        errors.append(MSG_LOGIN_PASSWORD)
    return errors


def validate_employee_login(payload):
    errors = []
    if not _matches(EMPLOYEE_ID_REGEX, _field(payload, "employeeId")):
        errors.append(MSG_EMPLOYEE_ID)
    password = payload.get("password") if isinstance(payload, dict) else None
    if not isinstance(password, str) or not password or len(password) > 128:
        errors.append(MSG_EMPLOYEE_PASSWORD)
    return errors


def validate_payment(payload):
    errors = []
    amount = _amount_text(payload)
    if not _matches(AMOUNT_REGEX, amount):
        errors.append(MSG_AMOUNT)
    elif Decimal(amount) <= 0:
        errors.append(MSG_AMOUNT_POSITIVE)
    if not _matches(CURRENCY_REGEX, _field(payload, "currency").upper()):
        errors.append(MSG_CURRENCY)
    if _field(payload, "provider").upper() not in PROVIDERS:
        errors.append(MSG_PROVIDER)
    if not _matches(BENEFICIARY_ACCOUNT_REGEX, _field(payload, "beneficiaryAccount").upper()):
        errors.append(MSG_BENEFICIARY)
    if not _matches(SWIFT_REGEX, _field(payload, "swiftCode").upper()):
        errors.append(MSG_SWIFT)
    return errors


def validate_payment_review(status):
    if not isinstance(status, str) or status.strip().lower() not in REVIEW_STATUSES:
        return [MSG_REVIEW_STATUS]
    return []
