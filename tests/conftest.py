"""
Test configuration for the health program enrollment backend.
"""
import pytest
from fastapi.testclient import TestClient

from healthenroll.auth.models import User, UserRole, generate_user_id
from healthenroll.config import Settings
from healthenroll.core.security import hash_password
from healthenroll.database import Base, get_db
from healthenroll.doctors.models import DoctorProfile
from healthenroll.main import create_app

DEFAULT_PASSWORD = "Password123!"

# In-memory database; the engine keeps one shared connection
TEST_SETTINGS = Settings(
    _env_file=None,
    database_url="sqlite://",
    secret_key="test-secret-key",
    mail_suppress_send=True,
    frontend_url="http://frontend.test",
    bootstrap_admin_email=None,
    bootstrap_admin_password=None,
    log_level="WARNING",
)

app = create_app(TEST_SETTINGS)
engine = app.state.engine

# Create test session factory
TestingSessionLocal = app.state.session_factory


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """
    Create a test client with a test database session.
    """
    def override_get_db():
        try:
            yield db
        finally:
            # Discard anything a failed request left pending
            db.rollback()

    # Override the get_db dependency
    app.dependency_overrides[get_db] = override_get_db

    # Create test client
    with TestClient(app) as client:
        yield client

    # Remove dependency override
    app.dependency_overrides = {}


@pytest.fixture
def test_app():
    return app


@pytest.fixture
def outbox():
    """
    Collect every email the application sends during the test.
    """
    with app.state.mailer.fast_mail.record_messages() as messages:
        yield messages


@pytest.fixture
def register(client):
    """
    Register a client account through the API and return the response.
    """
    def _register(email="jane@example.com", password=DEFAULT_PASSWORD, **fields):
        payload = {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": email,
            "password": password,
            "gender": "Female",
            "date_of_birth": "1990-04-12",
            "phone": "555-0100",
            "address": "1 Main Street",
        }
        payload.update(fields)
        return client.post("/register", json=payload)
    return _register


@pytest.fixture
def verified_client(client, db, register):
    """
    Register a client account and verify it with the emailed token.

    Returns:
        dict: user_id, email and password of the account
    """
    def _verified_client(email="jane@example.com", password=DEFAULT_PASSWORD):
        response = register(email=email, password=password)
        assert response.status_code == 201
        user_id = response.json()["user_id"]
        db.expire_all()
        token = db.query(User).filter(User.user_id == user_id).one().verification_token
        assert client.get("/verify-account", params={"token": token}).status_code == 200
        return {"user_id": user_id, "email": email, "password": password}
    return _verified_client


@pytest.fixture
def login(client):
    """
    Log in and return the Authorization header for the account.
    """
    def _login(email, password=DEFAULT_PASSWORD):
        response = client.post("/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _login


@pytest.fixture
def make_user(db):
    """
    Insert a verified account directly, for roles that cannot self-register.
    """
    def _make_user(email, role=UserRole.ADMIN, password=DEFAULT_PASSWORD, **profile):
        user = User(
            user_id=generate_user_id(),
            email=email,
            password_hash=hash_password(password),
            role=role,
            is_active=True,
            is_verified=True,
        )
        if role == UserRole.DOCTOR:
            user.doctor_profile = DoctorProfile(
                license_number=profile.get("license_number", "LIC-0001"),
                specialization=profile.get("specialization", "Cardiology"),
            )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def admin_headers(make_user, login):
    admin = make_user("admin@example.com", UserRole.ADMIN)
    return login(admin.email)


@pytest.fixture
def doctor_headers(make_user, login):
    doctor = make_user("doctor@example.com", UserRole.DOCTOR)
    return login(doctor.email)


@pytest.fixture
def client_account(verified_client):
    return verified_client()


@pytest.fixture
def client_headers(client_account, login):
    return login(client_account["email"])
