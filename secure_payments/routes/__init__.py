from secure_payments.routes.auth import auth_ns
from secure_payments.routes.payments import payments_ns
from secure_payments.routes.security import security_ns
from secure_payments.routes.staff import staff_ns


def register_namespaces(api):
    api.add_namespace(security_ns, path='/security')
    api.add_namespace(auth_ns, path='/auth')
    api.add_namespace(payments_ns, path='/payments')
    api.add_namespace(staff_ns, path='/staff')
