"""Shared pytest fixtures for all tests."""

import base64
import json
import re
import time

import httpx
import jwt
import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from cli.config import Config
from client.session_store import Session
from client.transport import AuthenticatedTransport

APP_URL = 'https://localhost:8080'
AUTH_URL = 'https://localhost:27464'


@pytest.fixture(scope='session')
def rsa_key():
    """RSA key pair standing in for the key the auth server provisions."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope='session')
def private_key_pem(rsa_key):
    """PKCS#8 PEM of the test private key, as returned by login."""
    return rsa_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope='session')
def other_private_key_pem():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()


@pytest.fixture
def make_token(rsa_key):
    """Factory for bearer tokens with a chosen expiry."""
    def factory(exp=None, **claims):
        payload = {'username': 'alice', 'nbf': int(time.time()) - 10, **claims}
        if exp is not None:
            payload['exp'] = exp
        return jwt.encode(payload, rsa_key, algorithm='RS384')
    return factory


def verify_signature(public_key, request: httpx.Request) -> bool:
    """Check Hash over 'Timestamp+URL' the way the app server does."""
    signature = request.headers.get('Hash')
    timestamp = request.headers.get('Timestamp')
    if not signature or not timestamp:
        return False
    message = f"{timestamp}+{request.url}".encode()
    try:
        public_key.verify(base64.b64decode(signature), message, padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature:
        return False
    return True


class FakeFileServer:
    """In-memory stand-in for the auth server and the app server."""

    def __init__(self, private_key_pem: str, token: str):
        self.private_key_pem = private_key_pem
        self.public_key = serialization.load_pem_private_key(
            private_key_pem.encode(), password=None
        ).public_key()
        self.token = token
        self.users: dict[str, str] = {}
        self.files: dict[str, str] = {}
        self.links: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.upload_allowed = True
        self._next_link = 0

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def _error(self, status: int, message: str) -> httpx.Response:
        return httpx.Response(status, json={'error': message})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.raw_path.decode()
        method = request.method

        if path == '/user/register' and method == 'POST':
            body = json.loads(request.content)
            if body['username'] in self.users:
                return self._error(409, 'username already taken')
            self.users[body['username']] = body['password']
            return httpx.Response(200, json={'token': self.token, 'private_key': self.private_key_pem})

        if path == '/user/login' and method == 'POST':
            body = json.loads(request.content)
            if self.users.get(body['username']) != body['password']:
                return self._error(400, 'invalid credentials')
            return httpx.Response(200, json={'token': self.token, 'private_key': self.private_key_pem})

        if method == 'GET' and path.startswith('/link/'):
            code = path[len('/link/'):]
            link = self.links.get(code)
            if link is None:
                return httpx.Response(404)
            return httpx.Response(
                200,
                content=self.files[link['file_name']].encode(),
                headers={'Content-Type': 'text/plain'},
            )

        if request.headers.get('Authorization') != f'Bearer {self.token}':
            return self._error(400, 'Missing token')
        if not verify_signature(self.public_key, request):
            return self._error(400, 'Invalid signature')

        if path == '/files' and method == 'GET':
            return httpx.Response(200, json=list(self.files))

        if path.startswith('/files/'):
            name = request.url.path[len('/files/'):]
            if method == 'GET':
                if name not in self.files:
                    return httpx.Response(404)
                return httpx.Response(
                    200,
                    content=self.files[name].encode(),
                    headers={'Content-Type': 'text/plain; charset=utf-8'},
                )
            if method == 'PUT':
                if not self.upload_allowed:
                    return httpx.Response(403)
                if name in self.files:
                    return httpx.Response(409, text='File already exists')
                match = re.search(
                    rb'name="contents"\r\n\r\n(.*?)\r\n--', request.content, re.DOTALL
                )
                self.files[name] = match.group(1).decode()
                return httpx.Response(200)

        if path == '/link' and method == 'PUT':
            file_name = json.loads(request.content)['file_name']
            if file_name not in self.files:
                return httpx.Response(404)
            self._next_link += 1
            code = f'code{self._next_link:04d}'
            self.links[code] = {'username': 'alice', 'file_name': file_name}
            return httpx.Response(200, json=code)

        if path == '/links' and method == 'GET':
            return httpx.Response(200, json=self.links)

        if path.startswith('/link/') and method == 'DELETE':
            code = path[len('/link/'):]
            if self.links.pop(code, None) is None:
                return httpx.Response(404)
            return httpx.Response(200)

        return httpx.Response(404)


@pytest.fixture
def live_token(make_token):
    return make_token(exp=int(time.time()) + 3600)


@pytest.fixture
def fake_server(private_key_pem, live_token):
    """Fake servers that verify bearer token and request signature."""
    return FakeFileServer(private_key_pem, live_token)


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .sealdrive directory
    """
    config_dir = tmp_path / '.sealdrive'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir, monkeypatch):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    monkeypatch.delenv('SEALDRIVE_APP_URL', raising=False)
    monkeypatch.delenv('SEALDRIVE_AUTH_URL', raising=False)
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'notes.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def session(private_key_pem, live_token):
    """Session holding a live token and the matching private key."""
    return Session(bearer_token=live_token, private_key=private_key_pem)


@pytest.fixture
def signed_transport(fake_server, session):
    """Transport wired to the fake servers."""
    http = httpx.AsyncClient(transport=fake_server.transport())
    return AuthenticatedTransport(session, http_client=http)
