import click
from sqlalchemy.exc import IntegrityError

from secure_payments.models import db
from secure_payments.store import create_employee
from secure_payments.validators import validate_employee_login


def register_commands(app):
    @app.cli.command('create-employee')
    @click.option('--employee-id', required=True, help='Staff login id, case-insensitive.')
    @click.option('--full-name', required=True)
    @click.password_option()
    def create_employee_command(employee_id, full_name, password):
        """Create a staff account for the review portal."""
        errors = validate_employee_login({'employeeId': employee_id, 'password': password})
        if errors:
            raise click.ClickException(' '.join(errors))
        try:
            employee = create_employee(employee_id, full_name, password)
        except IntegrityError:
            db.session.rollback()
            raise click.ClickException(f'Employee {employee_id} already exists.')
        click.echo(f'Created employee {employee.employee_id} (id={employee.id}).')
