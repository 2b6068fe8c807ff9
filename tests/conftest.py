import itertools

import pytest
from flask_jwt_extended import create_access_token

from novalgo.extensions import db
from novalgo.main import create_app
from novalgo.models.investment import InvestmentPackage
from novalgo.models.user import User
from novalgo.services.account_service import provision_account
from novalgo.services.investment_service import seed_default_packages
from novalgo.services.ledger_service import record_transaction
from novalgo.utils.auth_utils import hash_password

PASSWORD = "secret123"


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Factory: a provisioned user, optionally funded through a deposit entry."""
    counter = itertools.count(1)

    def _make(balance=None, role="investor", email=None, **profile):
        n = next(counter)
        user = User(
            email=email or f"user{n}@example.com",
            password_hash=hash_password(PASSWORD),
            role=role,
        )
        db.session.add(user)
        db.session.commit()

        attributes = {"full_name": f"User {n}", "phone": f"07120000{n:02d}", "email": user.email}
        attributes.update(profile)
        provision_account(user.id, attributes)
        if balance:
            record_transaction(user.id, "deposit", balance, "Opening balance")
        return user

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role="admin", email="admin@example.com")


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(identity=user.id)}"}

    return _headers


@pytest.fixture
def packages(app):
    seed_default_packages()
    return {p.package_type: p for p in InvestmentPackage.query.all()}


@pytest.fixture
def lite(packages):
    return packages["lite"]
