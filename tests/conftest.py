import os
import tempfile

import pytest

from storefront import create_app, db, StoredValue
from storefront.storage import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def app():
    fd, path = tempfile.mkstemp(suffix=".sqlite")
    os.close(fd)
    db.init(path)

    db.connect()
    db.create_tables([StoredValue])
    db.close()

    app = create_app({"TESTING": True, "DATABASE": path})
    yield app

    if not db.is_closed():
        db.close()
    if os.path.exists(path):
        os.remove(path)


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


def customer_form(**overrides):
    form = {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@example.com",
        "phone": "555-0100",
        "address": "12 King Street",
        "country": "CA",
        "region": "Ontario",
        "shipping": "standard",
    }
    form.update(overrides)
    return form
