from datetime import date, time
from decimal import Decimal

import pytest

from app import create_app
from models import db
from models.availability import Availability
from models.location import Location
from models.space import Space
from models.space_type import SpaceType
from models.user import ROLE_ADMIN, ROLE_MANAGER, ROLE_USER, User
from security.password import hash_password
from security.tokens import issue_token

BOOKING_DATE = "2025-06-01"
PASSWORD = "correct-horse-battery"


@pytest.fixture
def app(tmp_path):
    # file database: the race tests need real connections from several threads
    app = create_app(
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'test.db'}",
        TESTING=True,
        SECRET_KEY="test-secret",
        JWT_SECRET_KEY="test-jwt-secret-key-long-enough-for-hs256",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def _make_user(email, role, name="Test"):
    user = User(
        name=name,
        surname="User",
        email=email,
        password_hash=hash_password(PASSWORD),
        role=role,
    )
    db.session.add(user)
    db.session.commit()
    return user.id


@pytest.fixture
def users(app):
    with app.app_context():
        return {
            "user": _make_user("user@example.com", ROLE_USER, "Anna"),
            "other_user": _make_user("other@example.com", ROLE_USER, "Bruno"),
            "manager": _make_user("manager@example.com", ROLE_MANAGER, "Carla"),
            "other_manager": _make_user("manager2@example.com", ROLE_MANAGER, "Dario"),
            "admin": _make_user("admin@example.com", ROLE_ADMIN, "Elena"),
        }


@pytest.fixture
def auth(app, users):
    """auth("manager") -> Authorization header for that fixture user."""
    def _headers(key):
        with app.app_context():
            user = db.session.get(User, users[key])
            token = issue_token(user.id, user.role)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def catalogue(app, users):
    """
    Two locations: ``main`` run by "manager", ``branch`` run by "other_manager".
    The main space is open 08:00-20:00 on BOOKING_DATE at 15/h or 90/day.
    """
    with app.app_context():
        meeting = SpaceType(type_name="Meeting Room")
        main = Location(
            location_name="Centro", address="Via Roma 1", city="Milano", manager_id=users["manager"],
        )
        branch = Location(
            location_name="Navigli", address="Alzaia 10", city="Milano", manager_id=users["other_manager"],
        )
        db.session.add_all([meeting, main, branch])
        db.session.flush()

        space = Space(
            location_id=main.id,
            space_type_id=meeting.id,
            space_name="Sala A",
            capacity=6,
            price_per_hour=Decimal("15.00"),
            price_per_day=Decimal("90.00"),
        )
        branch_space = Space(
            location_id=branch.id,
            space_type_id=meeting.id,
            space_name="Sala B",
            capacity=4,
            price_per_hour=Decimal("10.00"),
            price_per_day=Decimal("60.00"),
        )
        db.session.add_all([space, branch_space])
        db.session.flush()

        db.session.add_all([
            Availability(
                space_id=space.id,
                availability_date=date(2025, 6, 1),
                start_time=time(8, 0),
                end_time=time(20, 0),
                is_available=True,
            ),
            Availability(
                space_id=branch_space.id,
                availability_date=date(2025, 6, 1),
                start_time=time(9, 0),
                end_time=time(18, 0),
                is_available=True,
            ),
        ])
        db.session.commit()

        return {
            "space_type_id": meeting.id,
            "location_id": main.id,
            "branch_location_id": branch.id,
            "space_id": space.id,
            "branch_space_id": branch_space.id,
        }


@pytest.fixture
def book(client, auth, catalogue):
    """book("user", "09:00", "11:00") -> response of POST /bookings on the main space."""
    def _book(who, start, end, space_key="space_id", booking_date=BOOKING_DATE):
        return client.post(
            "/bookings",
            json={
                "space_id": catalogue[space_key],
                "booking_date": booking_date,
                "start_time": start,
                "end_time": end,
            },
            headers=auth(who),
        )
    return _book
