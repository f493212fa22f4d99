"""Tests for register and login calls."""

import json

import httpx
import pytest

from client.auth_api import AuthApi
from client.outcome import ClientError, NetworkOrServerError, Ok
from client.schemas import LoginResponse
from client.session_store import Session
from client.transport import AuthenticatedTransport
from common.exceptions import GENERIC_ERROR_MESSAGE
from tests.conftest import AUTH_URL


def auth_api_for(handler, session=None):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AuthApi(AuthenticatedTransport(session or Session(), http_client=http), AUTH_URL)


def respond(status, **kwargs):
    def handler(request):
        return httpx.Response(status, **kwargs)
    return handler


@pytest.mark.asyncio
async def test_register_posts_credentials_without_auth_headers():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={'token': 't', 'private_key': 'k'})

    api = auth_api_for(handler, Session('old-token', 'old-key'))

    assert await api.register('alice', 'secret') == Ok(None)
    request = seen[0]
    assert str(request.url) == AUTH_URL + '/user/register'
    assert json.loads(request.content) == {'username': 'alice', 'password': 'secret'}
    assert 'Authorization' not in request.headers
    assert 'Hash' not in request.headers


@pytest.mark.asyncio
@pytest.mark.parametrize('status,body,message', [
    (422, {'error': 'bad'}, 'Username contains invalid characters'),
    (422, None, 'Username contains invalid characters'),
    (409, {'error': 'username already taken'}, 'Problem creating account: username already taken'),
    (400, {'error': 'password too short'}, 'Problem creating account: password too short'),
    (400, None, GENERIC_ERROR_MESSAGE),
    (404, {'error': 'nope'}, GENERIC_ERROR_MESSAGE),
])
async def test_register_error_messages(status, body, message):
    api = auth_api_for(respond(status, json=body) if body else respond(status))

    outcome = await api.register('alice', 'secret')

    assert isinstance(outcome, ClientError)
    assert outcome.status == status
    assert outcome.message == message


@pytest.mark.asyncio
async def test_register_server_error_passes_through():
    outcome = await auth_api_for(respond(500)).register('alice', 'secret')

    assert isinstance(outcome, NetworkOrServerError)


@pytest.mark.asyncio
async def test_login_returns_token_and_key():
    api = auth_api_for(respond(200, json={'token': 'tok1', 'private_key': 'pk1'}))

    outcome = await api.login('alice', 'secret')

    assert outcome == Ok(LoginResponse(token='tok1', private_key='pk1'))


@pytest.mark.asyncio
async def test_login_bad_credentials_message():
    api = auth_api_for(respond(400, json={'error': 'invalid credentials'}))

    outcome = await api.login('alice', 'wrong')

    assert outcome.message == 'Problem logging in: invalid credentials'
    assert outcome.server_message == 'invalid credentials'


@pytest.mark.asyncio
async def test_login_other_client_error_is_generic():
    outcome = await auth_api_for(respond(404, json={'error': 'nope'})).login('alice', 'secret')

    assert outcome.message == GENERIC_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_login_response_missing_fields():
    outcome = await auth_api_for(respond(200, json={'token': 'tok1'})).login('alice', 'secret')

    assert isinstance(outcome, NetworkOrServerError)


@pytest.mark.asyncio
async def test_login_does_not_need_a_private_key():
    outcome = await auth_api_for(respond(200, json={'token': 'a', 'private_key': 'b'}), Session()).login('a', 'b')

    assert isinstance(outcome, Ok)
