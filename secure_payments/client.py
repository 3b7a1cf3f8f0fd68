# client.py
"""HTTP client for the payments API.

Keeps cookies in a requests.Session, fetches a CSRF token before the first
mutating call and echoes it in the X-CSRF-Token header. When the server answers
403 InvalidCsrfToken the token is refetched and the request retried once.
"""

import logging

import requests

from secure_payments.csrf import HEADER_NAME

logger = logging.getLogger(__name__)

MUTATING_METHODS = ("POST", "PUT", "PATCH", "DELETE")


class ApiError(Exception):
    def __init__(self, status_code, message, error=None, errors=None):
        self.status_code = status_code
        self.message = message
        self.error = error
        self.errors = errors or []
        super().__init__(f"{status_code}: {message}")


def _body(response):
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class PaymentsClient:
    def __init__(self, base_url, session=None, timeout=10, verify=True):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify = verify
        self.csrf_token = None

    def _url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method, path, json=None, params=None):
        headers = {}
        if method in MUTATING_METHODS and self.csrf_token:
            headers[HEADER_NAME] = self.csrf_token
        return self.session.request(
            method,
            self._url(path),
            json=json,
            params=params,
            headers=headers,
            timeout=self.timeout,
            verify=self.verify,
        )

    def fetch_csrf_token(self):
        response = self._send("GET", "security/csrf-token")
        data = self._check(response)
        self.csrf_token = data.get("csrfToken")
        return self.csrf_token

    def request(self, method, path, json=None, params=None):
        method = method.upper()
        if method in MUTATING_METHODS and not self.csrf_token:
            self.fetch_csrf_token()

        response = self._send(method, path, json=json, params=params)
        if (
            method in MUTATING_METHODS
            and response.status_code == 403
            and _body(response).get("error") == "InvalidCsrfToken"
        ):
            logger.info("CSRF token rejected, refetching and retrying once")
            self.fetch_csrf_token()
            response = self._send(method, path, json=json, params=params)
        return self._check(response)

    @staticmethod
    def _check(response):
        data = _body(response)
        if response.status_code >= 400:
            raise ApiError(
                response.status_code,
                data.get("message", response.reason or "Request failed"),
                error=data.get("error"),
                errors=data.get("errors"),
            )
        return data

    # --- security ---
    def health(self):
        return self.request("GET", "security/health")

    # --- customers ---
    def register(self, full_name, id_number, account_number, password):
        return self.request("POST", "auth/register", json={
            "fullName": full_name,
            "idNumber": id_number,
            "accountNumber": account_number,
            "password": password,
        })["user"]

    def login(self, id_number, account_number, password):
        return self.request("POST", "auth/login", json={
            "username": id_number,
            "accountNumber": account_number,
            "password": password,
        })["user"]

    def logout(self):
        return self.request("POST", "auth/logout")

    def me(self):
        return self.request("GET", "auth/me")["user"]

    def list_payments(self):
        return self.request("GET", "payments")["payments"]

    def create_payment(self, amount, currency, provider, beneficiary_account, swift_code):
        return self.request("POST", "payments", json={
            "amount": str(amount),
            "currency": currency,
            "provider": provider,
            "beneficiaryAccount": beneficiary_account,
            "swiftCode": swift_code,
        })["payment"]

    def providers(self):
        return self.request("GET", "payments/providers")["providers"]

    # --- staff ---
    def staff_login(self, employee_id, password):
        return self.request("POST", "staff/login", json={
            "employeeId": employee_id,
            "password": password,
        })["employee"]

    def staff_logout(self):
        return self.request("POST", "staff/logout")

    def staff_me(self):
        return self.request("GET", "staff/me")["employee"]

    def review_payments(self, statuses=None):
        params = {"status": ",".join(statuses)} if statuses else None
        return self.request("GET", "staff/payments", params=params)["payments"]

    def set_payment_status(self, payment_id, status):
        return self.request("POST", f"staff/payments/{payment_id}/status", json={"status": status})["payment"]

    def submit_verified(self):
        return self.request("POST", "staff/payments/submit")["submitted"]
