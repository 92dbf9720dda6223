import json
from unittest import mock

import pytest
import requests

from app import create_app
from database import db


def _fake_response(status=200, json_data=None, text=None):
    response = mock.Mock()
    response.status_code = status
    response.ok = status < 400
    if json_data is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_data
    if text is None:
        text = json.dumps(json_data) if json_data is not None else ''
    response.text = text
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return response


@pytest.fixture
def fake_response():
    return _fake_response


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'YOUTUBE_API_KEY': 'test-key',
    })
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(client):
    response = client.post('/api/auth/register', json={
        'name': 'Sam', 'email': 'sam@example.com', 'password': 'hunter2',
    })
    assert response.status_code == 200
    return client
