import os
import tempfile
import pytest
from config import TestingConfig
from filetracker import create_app
from filetracker.auth.decorators import Identity
from filetracker.extensions import db
from filetracker.models import (
    DirectoryUser, UserLevel, Department, Folder, File, FolderFile
)

PASSWORD = 'password'

ADMIN = Identity(id=1, name='Ada Admin', role='admin', department_id=7)
STAFF = Identity(id=2, name='Sam Staff', role='staff', department_id=7)
HR = Identity(id=3, name='Hana HR', role='HR', department_id=7)
FINANCE_STAFF = Identity(id=4, name='Fin Staff', role='staff', department_id=8)
NO_DEPT = Identity(id=5, name='No Dept', role='staff', department_id=None)


@pytest.fixture
def app():
    """Create and configure a new app instance for each test."""
    # Temporary files isolate both databases for each test
    local_fd, local_path = tempfile.mkstemp()
    shared_fd, shared_path = tempfile.mkstemp()

    app = create_app(TestingConfig, {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{local_path}',
        'SQLALCHEMY_BINDS': {'shared': f'sqlite:///{shared_path}'},
        'WTF_CSRF_ENABLED': False,
        'RATELIMIT_ENABLED': False,
    })

    # Create the databases and load test data
    with app.app_context():
        db.create_all()
        init_test_data()

    yield app

    with app.app_context():
        db.session.remove()
        for engine in db.engines.values():
            engine.dispose()

    # Close and remove the temporary databases
    os.close(local_fd)
    os.unlink(local_path)
    os.close(shared_fd)
    os.unlink(shared_path)


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


def login(client, email):
    return client.post('/auth/login', json={
        'usr_email': email,
        'usr_pwd': PASSWORD
    })


def _logged_in_client(app, email):
    client = app.test_client()
    response = login(client, email)
    assert response.status_code == 200
    return client


@pytest.fixture
def staff_client(app):
    """A test client logged in as a staff member of department 7."""
    return _logged_in_client(app, 'staff@test.com')


@pytest.fixture
def admin_client(app):
    return _logged_in_client(app, 'admin@test.com')


@pytest.fixture
def hr_client(app):
    return _logged_in_client(app, 'hr@test.com')


@pytest.fixture
def finance_client(app):
    return _logged_in_client(app, 'finance@test.com')


def init_test_data():
    """Initialize directory users and department folders."""
    levels = {
        name: UserLevel(userlevelid=level_id, userlevelname=name)
        for level_id, name in [(1, 'super_admin'), (2, 'admin'), (3, 'HR'), (4, 'staff')]
    }
    db.session.add_all(levels.values())
    db.session.add_all([
        Department(department_id=7, department='Records'),
        Department(department_id=8, department='Finance'),
    ])

    for identity, email in [
        (ADMIN, 'admin@test.com'),
        (STAFF, 'staff@test.com'),
        (HR, 'hr@test.com'),
        (FINANCE_STAFF, 'finance@test.com'),
        (NO_DEPT, 'nodept@test.com'),
    ]:
        user = DirectoryUser(
            user_id=identity.id,
            usr_name=identity.name,
            usr_email=email,
            usr_dept=identity.department_id,
            userlevel=levels[identity.role].userlevelid
        )
        user.set_password(PASSWORD)
        db.session.add(user)

    db.session.add_all([
        Folder(folder_id=1, folder_name='B-Personnel', department_id=7),
        Folder(folder_id=2, folder_name='A-Contracts', department_id=7),
        Folder(folder_id=3, folder_name='Budgets', department_id=8),
        File(file_id=101, file_name='Employee Records'),
        File(file_id=102, file_name='Appraisals'),
        File(file_id=103, file_name='Leave Forms'),
        File(file_id=201, file_name='Budget 2024'),
        File(file_id=999, file_name='Loose Sheet'),
    ])
    db.session.flush()
    db.session.add_all([
        FolderFile(folder_id=1, file_id=101),
        FolderFile(folder_id=2, file_id=102),
        FolderFile(folder_id=1, file_id=103),
        FolderFile(folder_id=3, file_id=201),
    ])
    db.session.commit()
