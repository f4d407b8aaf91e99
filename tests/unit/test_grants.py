"""Tests for the built-in grants."""

import pytest

from oauth_server.application.ports.inbound import GrantLookup
from oauth_server.application.use_cases import GrantRegistry
from oauth_server.application.use_cases.grants import (
    ClientCredentialsGrant,
    PasswordGrant,
    RefreshTokenGrant,
)
from oauth_server.domain.exceptions import OAuth2Exception
from oauth_server.domain.models import AccessToken, Client, RefreshToken, ServerOptions

from tests.conftest import User, make_request


########################################################################
# Client credentials
########################################################################

class TestClientCredentialsGrant:
    @pytest.fixture
    def grant(self, access_token_service):
        return ClientCredentialsGrant(access_token_service)

    def test_attributes(self, grant):
        assert grant.grant_type == "client_credentials"
        assert grant.response_type == ""
        assert not grant.allows_public_clients()

    async def test_authorization_response_is_not_supported(self, grant):
        with pytest.raises(OAuth2Exception) as exc_info:
            await grant.create_authorization_response(make_request(), None)

        assert exc_info.value.error == "invalid_request"

    async def test_issues_access_token_without_refresh_token(self, grant, confidential_client):
        client, _ = confidential_client
        request = make_request({"grant_type": "client_credentials", "scope": "read write"})

        response = await grant.create_token_response(request, client)

        assert response.status_code == 200
        assert len(response.body["access_token"]) == 40
        assert response.body["token_type"] == "Bearer"
        assert response.body["expires_in"] == 3600
        assert response.body["scope"] == "read write"
        assert "refresh_token" not in response.body
        assert "owner_id" not in response.body

    async def test_default_scopes_when_scope_absent(self, grant, confidential_client):
        client, _ = confidential_client

        response = await grant.create_token_response(make_request({"grant_type": "client_credentials"}), client)

        assert response.body["scope"] == "read"

    async def test_external_owner(self, grant, confidential_client):
        client, _ = confidential_client

        response = await grant.create_token_response(make_request(), client, User(42))

        assert response.body["owner_id"] == 42

    async def test_unknown_scope(self, grant, confidential_client):
        client, _ = confidential_client

        with pytest.raises(OAuth2Exception) as exc_info:
            await grant.create_token_response(make_request({"scope": "read delete"}), client)

        assert exc_info.value.error == "invalid_scope"


########################################################################
# Password
########################################################################

def owner_callable(username, password):
    return User(1) if (username, password) == ("alice", "wonderland") else None


async def async_owner_callable(username, password):
    return owner_callable(username, password)


class TestPasswordGrant:
    @pytest.fixture
    def grant(self, access_token_service, refresh_token_service):
        return PasswordGrant(owner_callable, access_token_service, refresh_token_service)

    def test_attributes(self, grant):
        assert grant.grant_type == "password"
        assert grant.allows_public_clients()

    def test_owner_callable_must_be_callable(self, access_token_service, refresh_token_service):
        with pytest.raises(TypeError):
            PasswordGrant("nope", access_token_service, refresh_token_service)

    @pytest.mark.parametrize("body", [{}, {"username": "alice"}, {"password": "wonderland"}])
    async def test_missing_credentials(self, grant, body):
        with pytest.raises(OAuth2Exception) as exc_info:
            await grant.create_token_response(make_request(body), None)

        assert exc_info.value.error == "invalid_request"

    async def test_wrong_credentials(self, grant):
        with pytest.raises(OAuth2Exception) as exc_info:
            await grant.create_token_response(make_request({"username": "alice", "password": "x"}), None)

        assert exc_info.value.error == "access_denied"

    async def test_issues_access_token_only_without_refresh_grant(self, grant, access_token_repository):
        request = make_request({"username": "alice", "password": "wonderland", "scope": "write"})

        response = await grant.create_token_response(request, None)

        assert response.body["owner_id"] == 1
        assert response.body["scope"] == "write"
        assert "refresh_token" not in response.body
        assert len(access_token_repository.tokens) == 1

    async def test_issues_refresh_token_when_server_has_refresh_grant(
            self, access_token_service, refresh_token_service, server_options, refresh_token_repository, public_client
    ):
        registry = GrantRegistry([
            RefreshTokenGrant(access_token_service, refresh_token_service, server_options),
            PasswordGrant.factory(async_owner_callable, access_token_service, refresh_token_service),
        ])
        grant = registry.get_grant("password")

        request = make_request({"username": "alice", "password": "wonderland"})
        response = await grant.create_token_response(request, public_client)

        refresh_token = refresh_token_repository.tokens[response.body["refresh_token"]]
        assert refresh_token.owner.token_owner_id == 1
        assert refresh_token.client is public_client
        assert refresh_token.scopes == ["read"]

    async def test_factory_receives_registry(self, access_token_service, refresh_token_service):
        registry = GrantRegistry([PasswordGrant.factory(owner_callable, access_token_service, refresh_token_service)])
        grant = registry.get_grant("password")

        assert isinstance(grant.grant_lookup, GrantLookup)
        assert grant.grant_lookup is registry
        assert not grant.grant_lookup.has_grant("refresh_token")


########################################################################
# Refresh token
########################################################################

class TestRefreshTokenGrant:
    @pytest.fixture
    def make_grant(self, access_token_service, refresh_token_service):
        def make(**options):
            return RefreshTokenGrant(access_token_service, refresh_token_service, ServerOptions(**options))

        return make

    @pytest.fixture
    async def refresh_token(self, refresh_token_service, public_client):
        return await refresh_token_service.create_token(User(5), public_client, ["read", "write"])

    def test_attributes(self, make_grant):
        grant = make_grant()

        assert grant.grant_type == "refresh_token"
        assert grant.allows_public_clients()

    async def test_missing_refresh_token(self, make_grant):
        with pytest.raises(OAuth2Exception) as exc_info:
            await make_grant().create_token_response(make_request({"grant_type": "refresh_token"}), None)

        assert exc_info.value.error == "invalid_request"

    async def test_unknown_refresh_token(self, make_grant):
        with pytest.raises(OAuth2Exception) as exc_info:
            await make_grant().create_token_response(make_request({"refresh_token": "unknown"}), None)

        assert exc_info.value.error == "invalid_grant"

    async def test_expired_refresh_token(self, make_grant, refresh_token_repository, scope_service, public_client):
        from oauth_server.application.use_cases import RefreshTokenService

        expired_service = RefreshTokenService(refresh_token_repository, scope_service, ServerOptions(refresh_token_ttl=-1))
        expired = await expired_service.create_token(None, public_client)

        with pytest.raises(OAuth2Exception) as exc_info:
            await make_grant().create_token_response(make_request({"refresh_token": expired.token}), public_client)

        assert exc_info.value.error == "invalid_grant"

    async def test_refresh_token_of_another_client(self, make_grant, refresh_token):
        other = Client.create_new_client("Other")

        with pytest.raises(OAuth2Exception) as exc_info:
            await make_grant().create_token_response(make_request({"refresh_token": refresh_token.token}), other)

        assert exc_info.value.error == "invalid_grant"

    async def test_reuses_refresh_token_scopes(self, make_grant, refresh_token, public_client, access_token_repository):
        request = make_request({"refresh_token": refresh_token.token})

        response = await make_grant().create_token_response(request, public_client)

        access_token = access_token_repository.tokens[response.body["access_token"]]
        assert response.body["scope"] == "read write"
        assert response.body["owner_id"] == 5
        assert response.body["refresh_token"] == refresh_token.token
        assert access_token.owner.token_owner_id == 5
        assert access_token.client is public_client

    async def test_narrows_scopes(self, make_grant, refresh_token, public_client):
        request = make_request({"refresh_token": refresh_token.token, "scope": "write"})

        response = await make_grant().create_token_response(request, public_client)

        assert response.body["scope"] == "write"

    def test_response_reports_access_token_scopes(self, make_grant):
        access_token = AccessToken.create_new_access_token(60, scopes="read")
        refresh_token = RefreshToken.create_new_refresh_token(None, scopes="read write")

        response = make_grant().prepare_token_response(access_token, refresh_token)

        assert response.body["scope"] == "read"
        assert response.body["refresh_token"] == refresh_token.token

    async def test_scopes_must_be_contained(self, make_grant, refresh_token, public_client):
        request = make_request({"refresh_token": refresh_token.token, "scope": "read admin"})

        with pytest.raises(OAuth2Exception) as exc_info:
            await make_grant().create_token_response(request, public_client)

        assert exc_info.value.error == "invalid_scope"

    async def test_binds_request_client_when_token_has_none(
            self, make_grant, refresh_token_service, access_token_repository, public_client
    ):
        refresh_token = await refresh_token_service.create_token(None, None, "read")

        response = await make_grant().create_token_response(
            make_request({"refresh_token": refresh_token.token}), public_client
        )

        assert access_token_repository.tokens[response.body["access_token"]].client is public_client

    @pytest.mark.parametrize(
        "rotate, revoke, new_refresh_token, old_kept",
        [
            (False, True, False, True),
            (False, False, False, True),
            (True, True, True, False),
            (True, False, True, True),
        ],
    )
    async def test_rotation(
            self, make_grant, refresh_token, public_client, refresh_token_repository,
            rotate, revoke, new_refresh_token, old_kept,
    ):
        grant = make_grant(rotate_refresh_tokens=rotate, revoke_rotated_refresh_tokens=revoke)

        response = await grant.create_token_response(make_request({"refresh_token": refresh_token.token}), public_client)

        issued = response.body["refresh_token"]
        assert (issued != refresh_token.token) is new_refresh_token
        assert (refresh_token.token in refresh_token_repository.tokens) is old_kept
        assert issued in refresh_token_repository.tokens
        deleted = [token.token for token in refresh_token_repository.deleted]
        assert deleted == ([refresh_token.token] if rotate and revoke else [])

    async def test_rotated_token_keeps_owner_client_and_scopes(
            self, make_grant, refresh_token, public_client, refresh_token_repository
    ):
        grant = make_grant(rotate_refresh_tokens=True)

        response = await grant.create_token_response(
            make_request({"refresh_token": refresh_token.token, "scope": "read"}), public_client
        )

        rotated = refresh_token_repository.tokens[response.body["refresh_token"]]
        assert rotated.owner.token_owner_id == 5
        assert rotated.client is public_client
        assert rotated.scopes == ["read"]
