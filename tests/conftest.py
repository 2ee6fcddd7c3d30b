"""
Shared pytest fixtures for the Innovation Registry test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB reset + fresh upload folder (autouse)
    - client: Flask test client (function-scoped)
    - admin / opd_user / other_opd / inactive_opd: pre-created accounts
    - auth_headers: build an Authorization header for a user
"""

import pytest

from inovasi import create_app
from inovasi.models import db as _db
from inovasi.models.user import ROLE_ADMIN, ROLE_OPD, STATUS_AKTIF, STATUS_TIDAK_AKTIF, User
from inovasi.services.jwt_service import issue_token
from inovasi.utils.crypto import hash_password

from payloads import PASSWORD, indikator_form, profil_payload


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db, tmp_path):
    """Per-test: open app context, point uploads at tmp_path, recreate tables after."""
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir()
    app.config["UPLOAD_FOLDER"] = str(upload_dir)
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def upload_dir(app):
    return app.config["UPLOAD_FOLDER"]


# ── Accounts ─────────────────────────────────────────────────────────────


def make_user(username, role=ROLE_OPD, status=STATUS_AKTIF, nama=None, password=PASSWORD):
    user = User(
        username=username,
        password=hash_password(password),
        nama=nama or username.title(),
        role=role,
        status=status,
    )
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture()
def admin():
    return make_user("admin_utama", role=ROLE_ADMIN, nama="Administrator")


@pytest.fixture()
def opd_user():
    return make_user("dinas_kesehatan", nama="Dinas Kesehatan")


@pytest.fixture()
def other_opd():
    return make_user("dinas_pendidikan", nama="Dinas Pendidikan")


@pytest.fixture()
def inactive_opd():
    return make_user("dinas_nonaktif", status=STATUS_TIDAK_AKTIF, nama="Dinas Nonaktif")


def bearer(user):
    return {"Authorization": f"Bearer {issue_token(user.id, user.username, user.role)}"}


@pytest.fixture()
def auth_headers():
    """Callable: ``auth_headers(user)`` → Authorization header dict."""
    return bearer


@pytest.fixture()
def create_profil(client, auth_headers):
    """Callable: ``create_profil(user, **overrides)`` → profil JSON via the API."""
    def _create(user, **overrides):
        res = client.post(
            "/api/profil-inovasi", json=profil_payload(**overrides), headers=auth_headers(user),
        )
        assert res.status_code == 201, res.get_json()
        return res.get_json()["data"]
    return _create


@pytest.fixture()
def create_indikator(client, auth_headers):
    """Callable: ``create_indikator(user, profil_id)`` → indikator JSON via the API."""
    def _create(user, profil_id, **overrides):
        res = client.post(
            "/api/indikator-inovasi",
            data=indikator_form(profil_id, **overrides),
            headers=auth_headers(user),
            content_type="multipart/form-data",
        )
        assert res.status_code == 201, res.get_json()
        return res.get_json()["data"]
    return _create
