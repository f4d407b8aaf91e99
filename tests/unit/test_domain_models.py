"""Tests for the client, scope and token domain models."""

import ast
from datetime import timedelta
from pathlib import Path

import pytest

import oauth_server.domain
from oauth_server.adapters.outbound.security import ClientSecretManager
from oauth_server.domain.models import (
    AccessToken,
    Client,
    OwnerReference,
    RefreshToken,
    Scope,
    ServerOptions,
    TokenOwner,
    normalize_scopes,
)
from oauth_server.domain.models.token_domain_model import utcnow

from tests.conftest import ReversingSecretHasher, User, utc


class TestClient:
    def test_new_client_is_public_until_secret_generated(self):
        client = Client.create_new_client("App")

        assert client.is_public()
        assert client.redirect_uris == []

        secret = client.generate_secret(ClientSecretManager())

        assert not client.is_public()
        assert len(secret) == 40
        assert client.secret != secret

    def test_redirect_uris_from_space_delimited_string(self):
        client = Client.create_new_client("App", "https://a.example/cb https://b.example/cb")

        assert client.redirect_uris == ["https://a.example/cb", "https://b.example/cb"]
        assert client.has_redirect_uri("https://b.example/cb")
        assert not client.has_redirect_uri("https://c.example/cb")

    def test_redirect_uris_from_list_are_trimmed(self):
        client = Client.create_new_client("App", [" https://a.example/cb ", "https://b.example/cb"])

        assert client.redirect_uris == ["https://a.example/cb", "https://b.example/cb"]

    def test_client_ids_are_unique(self):
        assert Client.create_new_client("A").id != Client.create_new_client("B").id

    def test_authenticate(self):
        hasher = ClientSecretManager()
        client = Client.create_new_client("App")
        secret = client.generate_secret(hasher)

        assert client.authenticate(secret, hasher)
        assert not client.authenticate("wrong", hasher)
        assert not client.authenticate(None, hasher)

    def test_secret_handling_goes_through_the_given_hasher(self):
        hasher = ReversingSecretHasher()
        client = Client.create_new_client("App")

        secret = client.generate_secret(hasher)

        assert secret == "secret-1"
        assert client.secret == "1-terces"
        assert client.authenticate("secret-1", hasher)
        assert not client.authenticate("secret-2", hasher)
        assert not client.authenticate(None, hasher)

    def test_secret_can_only_be_generated_once(self):
        hasher = ReversingSecretHasher()
        client = Client.create_new_client("App")
        client.generate_secret(hasher)

        with pytest.raises(ValueError):
            client.generate_secret(hasher)
        assert hasher.generated == 1

    def test_reconstitute(self):
        client = Client.reconstitute({"id": "abc", "name": "App", "secret": None, "redirect_uris": None})

        assert client.id == "abc"
        assert client.is_public()
        assert client.redirect_uris == []


class TestScope:
    def test_str_is_name(self):
        scope = Scope.create_new_scope(None, "read", is_default=True)

        assert str(scope) == "read"
        assert scope.description == ""
        assert scope.is_default

    def test_scope_is_immutable(self):
        scope = Scope(1, "read")

        with pytest.raises(Exception):
            scope.name = "write"

    def test_normalize_scopes(self):
        assert normalize_scopes(None) == []
        assert normalize_scopes("read write") == ["read", "write"]
        assert normalize_scopes(["read", Scope(2, "write")]) == ["read", "write"]
        assert normalize_scopes(Scope(1, "read")) == ["read"]
        assert normalize_scopes("read  write") == ["read", "write"]


class TestToken:
    def test_token_string_is_40_hex_chars(self):
        token = AccessToken.create_new_access_token(3600)

        assert len(token.token) == 40
        int(token.token, 16)

    def test_positive_ttl(self):
        token = AccessToken.create_new_access_token(3600)

        assert not token.is_expired()
        assert token.get_expires_in() == 3600

    def test_zero_ttl_is_expired_immediately(self):
        token = AccessToken.create_new_access_token(0)

        assert token.expires_at is not None
        assert token.is_expired(now=token.expires_at + timedelta(microseconds=1))
        assert token.get_expires_in(now=token.expires_at) == 0

    def test_negative_ttl(self):
        token = RefreshToken.create_new_refresh_token(-60)

        assert token.is_expired()
        assert token.get_expires_in() == 0

    def test_no_ttl_never_expires(self):
        token = RefreshToken.create_new_refresh_token(None)

        assert token.expires_at is None
        assert not token.is_expired()
        assert token.get_expires_in() is None

    def test_expiry_boundary(self):
        token = AccessToken.reconstitute({"token": "t", "expires_at": utc(2030, 1, 1)})

        assert not token.is_expired(now=utc(2030, 1, 1))
        assert token.is_expired(now=utc(2030, 1, 1) + timedelta(microseconds=1))
        assert not token.is_expired(now=utc(2030, 1, 1) - timedelta(seconds=1))
        assert token.get_expires_in(now=utc(2029, 12, 31, 23)) == 3600

    def test_naive_expiry_is_utc(self):
        token = AccessToken.reconstitute({"token": "t", "expires_at": utc(2030, 1, 1).replace(tzinfo=None)})

        assert token.expires_at == utc(2030, 1, 1)

    def test_match_scopes(self):
        token = AccessToken.create_new_access_token(3600, scopes=["read", Scope(2, "write")])

        assert token.scopes == ["read", "write"]
        assert token.match_scopes("read")
        assert token.match_scopes(["read", "write"])
        assert token.match_scopes(None)
        assert not token.match_scopes("read admin")

    def test_is_valid(self):
        token = AccessToken.create_new_access_token(3600, scopes="read")
        expired = AccessToken.create_new_access_token(-1, scopes="read")

        assert token.is_valid("read")
        assert not token.is_valid("write")
        assert not expired.is_valid()

    def test_owner_and_client(self):
        client = Client.create_new_client("App")
        token = AccessToken.create_new_access_token(60, owner=User(7), client=client)

        assert token.owner.token_owner_id == 7
        assert token.client is client
        assert isinstance(token.owner, TokenOwner)
        assert isinstance(OwnerReference(7), TokenOwner)

    def test_token_is_read_only(self):
        token = AccessToken.create_new_access_token(60)

        with pytest.raises(AttributeError):
            token.token = "other"
        with pytest.raises(AttributeError):
            token.expires_at = utcnow()

    def test_scopes_copy_does_not_leak(self):
        token = AccessToken.create_new_access_token(60, scopes="read")
        token.scopes.append("admin")

        assert token.scopes == ["read"]


class TestServerOptions:
    def test_defaults(self):
        options = ServerOptions()

        assert options.access_token_ttl == 3600
        assert options.refresh_token_ttl == 86400
        assert options.rotate_refresh_tokens is False
        assert options.revoke_rotated_refresh_tokens is True
        assert options.owner_callable is None
        assert options.grants == ()
        assert options.owner_request_attribute == "owner"
        assert options.token_request_attribute == "oauth_token"

    def test_from_dict(self):
        options = ServerOptions.from_dict({"access_token_ttl": 60, "grants": ["client_credentials"]})

        assert options.access_token_ttl == 60
        assert options.grants == ("client_credentials",)
        assert options.refresh_token_ttl == 86400

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="rotate"):
            ServerOptions.from_dict({"rotate": True})

    def test_options_are_immutable(self):
        options = ServerOptions()

        with pytest.raises(Exception):
            options.access_token_ttl = 10

    def test_from_dict_rejects_authorization_code_ttl(self):
        with pytest.raises(ValueError, match="authorization_code_ttl"):
            ServerOptions.from_dict({"authorization_code_ttl": 120})


def test_domain_does_not_import_outer_layers():
    domain_root = Path(oauth_server.domain.__file__).parent
    imported = set()
    for source in domain_root.rglob("*.py"):
        for node in ast.walk(ast.parse(source.read_text())):
            if isinstance(node, ast.ImportFrom) and node.module:
                imported.add(node.module)
            elif isinstance(node, ast.Import):
                imported.update(alias.name for alias in node.names)

    outer = [name for name in imported if name.startswith(("oauth_server.adapters", "oauth_server.application"))]
    assert outer == []
