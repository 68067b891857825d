"""Tests for cached-token loading and the interactive authorization flow."""

import json
import stat
from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import RefreshError, TransportError
from google.oauth2.credentials import Credentials
from oauthlib.oauth2.rfc6749.errors import InvalidGrantError

from auth import (
    AuthenticationError,
    ConfigurationError,
    get_token_from_web,
    load_client_config,
    load_credentials
)

SCOPES = ['https://www.googleapis.com/auth/documents.readonly']

CLIENT_CONFIG = {
    'installed': {
        'client_id': 'client-id.apps.googleusercontent.com',
        'client_secret': 'client-secret',
        'auth_uri': 'https://accounts.google.com/o/oauth2/auth',
        'token_uri': 'https://oauth2.googleapis.com/token',
        'redirect_uris': ['http://localhost'],
    }
}

TOKEN = {
    'token': 'cached-access-token',
    'refresh_token': 'cached-refresh-token',
    'client_id': 'client-id.apps.googleusercontent.com',
    'client_secret': 'client-secret',
    'token_uri': 'https://oauth2.googleapis.com/token',
    'scopes': SCOPES,
    'expiry': '2999-01-01T00:00:00Z',
}

EXPIRED_TOKEN = dict(TOKEN, expiry='2000-01-01T00:00:00Z')


@pytest.fixture
def client_secret_file(tmp_path):
    path = tmp_path / 'credentials.json'
    path.write_text(json.dumps(CLIENT_CONFIG), encoding='utf-8')
    return path


@pytest.fixture
def issued_credentials():
    return Credentials(
        token='new-access-token',
        refresh_token='new-refresh-token',
        token_uri='https://oauth2.googleapis.com/token',
        client_id='client-id.apps.googleusercontent.com',
        client_secret='client-secret',
        scopes=SCOPES
    )


def mock_flow(credentials):
    flow = MagicMock()
    flow.authorization_url.return_value = ('https://accounts.google.com/o/oauth2/auth?x=1', 'state-token')
    flow.credentials = credentials
    return flow


class TestClientConfig:
    def test_loads_installed_client(self, client_secret_file):
        assert load_client_config(str(client_secret_file)) == CLIENT_CONFIG

    def test_missing_file_is_fatal(self, tmp_path):
        with pytest.raises(ConfigurationError, match='Unable to read client secret file'):
            load_client_config(str(tmp_path / 'missing.json'))

    def test_malformed_json_is_fatal(self, tmp_path):
        path = tmp_path / 'credentials.json'
        path.write_text('{not json', encoding='utf-8')

        with pytest.raises(ConfigurationError):
            load_client_config(str(path))

    def test_unknown_client_type_is_fatal(self, tmp_path):
        path = tmp_path / 'credentials.json'
        path.write_text(json.dumps({'service_account': {}}), encoding='utf-8')

        with pytest.raises(ConfigurationError, match='Unable to parse client secret file'):
            load_client_config(str(path))


class TestLoadCredentials:
    def test_cached_token_is_used_without_prompt(self, tmp_path, client_secret_file):
        token_file = tmp_path / '.token'
        token_file.write_text(json.dumps(TOKEN), encoding='utf-8')
        input_func = MagicMock()

        credentials = load_credentials(str(client_secret_file), str(token_file), SCOPES, input_func=input_func)

        assert credentials.token == 'cached-access-token'
        assert credentials.valid
        input_func.assert_not_called()

    def test_expired_token_is_refreshed_in_memory(self, tmp_path, client_secret_file):
        token_file = tmp_path / '.token'
        token_file.write_text(json.dumps(EXPIRED_TOKEN), encoding='utf-8')
        before = token_file.read_bytes()
        input_func = MagicMock()

        with patch.object(Credentials, 'refresh') as refresh:
            credentials = load_credentials(str(client_secret_file), str(token_file), SCOPES, input_func=input_func)

        refresh.assert_called_once()
        assert credentials.refresh_token == 'cached-refresh-token'
        assert token_file.read_bytes() == before
        input_func.assert_not_called()

    @pytest.mark.parametrize('error', [RefreshError('invalid_grant'), TransportError('network down')])
    def test_failed_refresh_is_fatal(self, tmp_path, client_secret_file, error):
        token_file = tmp_path / '.token'
        token_file.write_text(json.dumps(EXPIRED_TOKEN), encoding='utf-8')

        with patch.object(Credentials, 'refresh', side_effect=error):
            with pytest.raises(AuthenticationError, match='Unable to refresh cached token'):
                load_credentials(str(client_secret_file), str(token_file), SCOPES, input_func=MagicMock())

    def test_missing_token_runs_interactive_flow_and_persists(
        self, tmp_path, client_secret_file, issued_credentials, capsys
    ):
        token_file = tmp_path / '.token'
        flow = mock_flow(issued_credentials)
        input_func = MagicMock(return_value='  4/auth-code \n')

        with patch('auth.Flow.from_client_config', return_value=flow) as from_client_config:
            credentials = load_credentials(
                str(client_secret_file), str(token_file), SCOPES, input_func=input_func
            )

        assert credentials is issued_credentials
        from_client_config.assert_called_once_with(CLIENT_CONFIG, scopes=SCOPES, redirect_uri='http://localhost')
        flow.authorization_url.assert_called_once_with(access_type='offline', state='state-token')
        flow.fetch_token.assert_called_once_with(code='4/auth-code')
        input_func.assert_called_once_with()

        saved = json.loads(token_file.read_text(encoding='utf-8'))
        assert saved['token'] == 'new-access-token'
        assert saved['refresh_token'] == 'new-refresh-token'
        assert stat.S_IMODE(token_file.stat().st_mode) & 0o077 == 0

        output = capsys.readouterr().out
        assert 'https://accounts.google.com/o/oauth2/auth?x=1' in output
        assert f"Saving credential file to: {token_file}" in output

    def test_unreadable_token_runs_interactive_flow(self, tmp_path, client_secret_file, issued_credentials):
        token_file = tmp_path / '.token'
        token_file.write_text('garbage', encoding='utf-8')
        flow = mock_flow(issued_credentials)

        with patch('auth.Flow.from_client_config', return_value=flow):
            credentials = load_credentials(
                str(client_secret_file), str(token_file), SCOPES, input_func=lambda: 'code'
            )

        assert credentials.token == 'new-access-token'
        assert json.loads(token_file.read_text(encoding='utf-8'))['token'] == 'new-access-token'

    @pytest.mark.parametrize('content', ['[]', '"x"', 'null'])
    def test_non_object_token_runs_interactive_flow(
        self, tmp_path, client_secret_file, issued_credentials, content
    ):
        token_file = tmp_path / '.token'
        token_file.write_text(content, encoding='utf-8')
        flow = mock_flow(issued_credentials)
        input_func = MagicMock(return_value='code')

        with patch('auth.Flow.from_client_config', return_value=flow):
            credentials = load_credentials(
                str(client_secret_file), str(token_file), SCOPES, input_func=input_func
            )

        input_func.assert_called_once_with()
        assert credentials is issued_credentials
        assert json.loads(token_file.read_text(encoding='utf-8'))['token'] == 'new-access-token'

    def test_missing_client_secret_is_fatal_before_prompt(self, tmp_path):
        input_func = MagicMock()

        with pytest.raises(ConfigurationError):
            load_credentials(str(tmp_path / 'missing.json'), str(tmp_path / '.token'), SCOPES, input_func=input_func)

        input_func.assert_not_called()


class TestInteractiveFlow:
    def test_failed_exchange_is_fatal(self, issued_credentials):
        flow = mock_flow(issued_credentials)
        flow.fetch_token.side_effect = InvalidGrantError()

        with patch('auth.Flow.from_client_config', return_value=flow):
            with pytest.raises(AuthenticationError, match='Unable to retrieve token from web'):
                get_token_from_web(CLIENT_CONFIG, SCOPES, input_func=lambda: 'bad-code')

    def test_empty_code_is_fatal(self, issued_credentials):
        flow = mock_flow(issued_credentials)

        with patch('auth.Flow.from_client_config', return_value=flow):
            with pytest.raises(AuthenticationError, match='Unable to read authorization code'):
                get_token_from_web(CLIENT_CONFIG, SCOPES, input_func=lambda: '   ')

        flow.fetch_token.assert_not_called()

    def test_closed_stdin_is_fatal(self, issued_credentials):
        flow = mock_flow(issued_credentials)

        def closed_stdin():
            raise EOFError()

        with patch('auth.Flow.from_client_config', return_value=flow):
            with pytest.raises(AuthenticationError):
                get_token_from_web(CLIENT_CONFIG, SCOPES, input_func=closed_stdin)
