"""Tests for the create-employee command and employee seeding."""

from conftest import EMPLOYEE_PASSWORD
from secure_payments.models import Employee
from secure_payments.passwords import verify_password
from secure_payments.store import find_employee_by_employee_id, seed_employees


def _create(app, employee_id, password="Review!Passw0rd"):
    runner = app.test_cli_runner()
    return runner.invoke(args=[
        "create-employee",
        "--employee-id", employee_id,
        "--full-name", "Sipho Ndlovu",
        "--password", password,
    ])


def test_create_employee(app) -> None:
    result = _create(app, "EMP-002")
    assert result.exit_code == 0, result.output
    assert "Created employee EMP-002" in result.output
    with app.app_context():
        employee = find_employee_by_employee_id("emp-002")
        assert employee.full_name == "Sipho Ndlovu"
        assert verify_password("Review!Passw0rd", employee.password_hash)


def test_duplicate_employee(app) -> None:
    result = _create(app, "emp-001")
    assert result.exit_code != 0
    assert "already exists" in result.output


def test_invalid_employee_id(app) -> None:
    result = _create(app, "no spaces allowed")
    assert result.exit_code != 0
    with app.app_context():
        assert Employee.query.count() == 1


def test_seed_is_idempotent(app_ctx) -> None:
    seed = [{"employeeId": "EMP-001", "fullName": "Thandi Mokoena", "password": EMPLOYEE_PASSWORD}]
    assert seed_employees(seed) == 0
    assert seed_employees(seed + [{"employeeId": "EMP-003", "fullName": "Lerato Khumalo",
                                   "password": "Other!Passw0rd"}]) == 1
    assert Employee.query.count() == 2
