"""Tests for file store operations."""

import httpx
import pytest

from client.files_api import DownloadedFile, FileStoreApi, can_view_content, encode_path_segment
from client.outcome import ClientError, Forbidden, NetworkOrServerError, Ok
from client.session_store import Session
from client.transport import AuthenticatedTransport
from tests.conftest import APP_URL


@pytest.fixture
def files_api(signed_transport):
    return FileStoreApi(signed_transport, APP_URL)


@pytest.mark.asyncio
async def test_list_files_in_server_order(files_api, fake_server):
    fake_server.files.update({'b.txt': '', 'a.png': '', 'c.txt': ''})

    assert await files_api.list_files() == Ok(['b.txt', 'a.png', 'c.txt'])


@pytest.mark.asyncio
async def test_list_files_empty(files_api):
    assert await files_api.list_files() == Ok([])


@pytest.mark.asyncio
async def test_list_files_rejects_non_list(private_key_pem):
    def handler(request):
        return httpx.Response(200, json={'files': []})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    api = FileStoreApi(AuthenticatedTransport(Session('t', private_key_pem), http_client=http), APP_URL)

    assert isinstance(await api.list_files(), NetworkOrServerError)


@pytest.mark.asyncio
async def test_read_text_file(files_api, fake_server):
    fake_server.files['notes.txt'] = 'hello there'

    assert await files_api.read_file('notes.txt') == Ok('hello there')


@pytest.mark.asyncio
async def test_read_missing_file(files_api):
    outcome = await files_api.read_file('missing.txt')

    assert isinstance(outcome, ClientError)
    assert outcome.status == 404


@pytest.mark.asyncio
async def test_read_rejects_non_text_file(files_api, fake_server):
    with pytest.raises(ValueError):
        await files_api.read_file('photo.png')
    assert fake_server.requests == []


@pytest.mark.asyncio
async def test_download_keeps_content_type(files_api, fake_server):
    fake_server.files['data.csv'] = 'a,b'

    outcome = await files_api.download_file('data.csv')

    assert outcome == Ok(DownloadedFile('data.csv', b'a,b', 'text/plain; charset=utf-8'))


@pytest.mark.asyncio
async def test_upload_then_list(files_api):
    assert await files_api.upload_file('new file.txt', 'line one\nline two') == Ok(None)

    listed = await files_api.list_files()
    assert listed == Ok(['new file.txt'])
    assert await files_api.read_file('new file.txt') == Ok('line one\nline two')


@pytest.mark.asyncio
async def test_upload_existing_file_conflicts(files_api, fake_server):
    fake_server.files['a.txt'] = 'old'

    outcome = await files_api.upload_file('a.txt', 'new')

    assert isinstance(outcome, ClientError)
    assert outcome.status == 409
    assert fake_server.files['a.txt'] == 'old'


@pytest.mark.asyncio
async def test_upload_forbidden(files_api, fake_server):
    fake_server.upload_allowed = False

    assert await files_api.upload_file('a.txt', 'x') == Forbidden()


@pytest.mark.asyncio
async def test_file_names_are_percent_encoded_in_signed_url(files_api, fake_server):
    fake_server.files['my report #1.txt'] = 'x'

    outcome = await files_api.read_file('my report #1.txt')

    assert outcome == Ok('x')
    assert str(fake_server.requests[-1].url) == APP_URL + '/files/my%20report%20%231.txt'


@pytest.mark.parametrize('value,expected', [
    ('a b', 'a%20b'),
    ('a/b', 'a%2Fb'),
    ("it's(1)!*", "it's(1)!*"),
    ('ü.txt', '%C3%BC.txt'),
    ('a+b&c=d', 'a%2Bb%26c%3Dd'),
])
def test_encode_path_segment(value, expected):
    assert encode_path_segment(value) == expected


@pytest.mark.parametrize('name,viewable', [
    ('a.txt', True),
    ('A.TXT', True),
    ('a.txt.png', False),
    ('a.md', False),
    ('txt', False),
])
def test_can_view_content(name, viewable):
    assert can_view_content(name) is viewable
