import time

import pytest
from django.conf import settings
from jose import jwt

from .conftest import make_token


@pytest.mark.django_db
def test_missing_token_is_401(api_client, product):
    response = api_client.get('/v1/products/')

    assert response.status_code == 401
    assert response['WWW-Authenticate'] == 'Bearer'
    assert response.json()['status'] == 'fail'


@pytest.mark.django_db
def test_bad_signature_is_401(api_client, product):
    token = jwt.encode({'adminId': 1, 'adminRoleName': 'Admin'}, 'wrong-secret', algorithm='HS256')
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    response = api_client.get('/v1/products/')

    assert response.status_code == 401


@pytest.mark.django_db
def test_expired_token_is_401(api_client, product):
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {make_token(exp=int(time.time()) - 60)}')

    response = api_client.get('/v1/products/')

    assert response.status_code == 401
    assert response.json()['message'] == 'Token expired.'


@pytest.mark.django_db
def test_role_outside_allow_list_is_403(api_client, product):
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {make_token(role="Support")}')

    response = api_client.get('/v1/products/')

    assert response.status_code == 403


@pytest.mark.django_db
def test_manager_role_is_allowed(api_client, product):
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {make_token(role="Manager")}')

    response = api_client.get('/v1/products/')

    assert response.status_code == 200


@pytest.mark.django_db
def test_token_without_identity_is_401(api_client):
    token = jwt.encode({'adminRoleName': 'Admin'}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    response = api_client.get('/v1/products/')

    assert response.status_code == 401


@pytest.mark.django_db
def test_health_needs_no_token(api_client):
    response = api_client.get('/health/')

    assert response.status_code == 200
    assert response.json() == {'status': 'ok', 'database': 'ok'}
