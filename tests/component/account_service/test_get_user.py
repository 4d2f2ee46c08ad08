"""
Account Service Component Tests - record access

get_user default-record creation, get_account, delete_user and search_users.
"""
import pytest

from microservices.account_service.models import Account, PropertyName, Scope
from microservices.account_service.protocols import AccountServiceError, InvalidArgumentError
from tests.fixtures import make_account_user, make_property

pytestmark = [pytest.mark.component, pytest.mark.asyncio]

USER_ID = "usr_test_123"


class TestGetUser:
    """AccountService.get_user()"""

    async def test_creates_default_record_for_unknown_user(self, account_service, mock_repo, mock_event_bus):
        user = make_account_user(user_id=USER_ID, display_name="Jane Doe", email="jane@example.com")

        result = await account_service.get_user(user)

        assert set(result) == {name.value for name in PropertyName}
        assert result["displayname"]["value"] == "Jane Doe"
        assert result["email"]["value"] == "jane@example.com"
        assert mock_repo.stored(USER_ID) == result
        assert len(mock_repo.calls("insert_properties")) == 1
        mock_event_bus.assert_no_events_published()

    async def test_returns_stored_record(self, account_service, mock_repo, sample_properties):
        mock_repo.set_properties(USER_ID, sample_properties)

        result = await account_service.get_user(USER_ID)

        mock_repo.assert_not_called("insert_properties")
        assert result["email"]["verified"] == "2"
        assert set(result) == set(sample_properties)

    async def test_patches_legacy_record_without_status(self, account_service, mock_repo, assertions):
        mock_repo.set_properties(USER_ID, {
            "displayname": make_property("Jane", "v2-federated"),
            "twitter": make_property("@jane", "v2-local"),
        })

        result = await account_service.get_user(USER_ID)

        assertions.assert_every_entry_verified_field(result)
        assert set(result) == {"displayname", "twitter"}
        mock_repo.assert_not_called("update_properties")

    async def test_second_call_does_not_insert_again(self, account_service, mock_repo):
        first = await account_service.get_user(USER_ID)
        second = await account_service.get_user(USER_ID)

        assert first == second
        assert len(mock_repo.calls("insert_properties")) == 1

    async def test_empty_user_id_is_rejected(self, account_service):
        with pytest.raises(AccountServiceError):
            await account_service.get_user("")


class TestGetAccount:
    """AccountService.get_account() / update_account()"""

    async def test_returns_typed_account(self, account_service, mock_repo, sample_properties):
        mock_repo.set_properties(USER_ID, sample_properties)

        account = await account_service.get_account(USER_ID)

        assert isinstance(account, Account)
        assert account.get_property("phone").value == "+4971125242890"
        assert [p.name for p in account.get_filtered_properties(scope=Scope.FEDERATED)] == ["displayname", "email"]

    async def test_legacy_scopes_are_normalized(self, account_service, mock_repo):
        mock_repo.set_properties(USER_ID, {"twitter": make_property("@jane", "public", verified="0")})

        account = await account_service.get_account(USER_ID)

        assert account.get_property("twitter").scope is Scope.PUBLISHED

    async def test_update_account_persists_changes(self, account_service, mock_repo, sample_properties, mock_event_bus):
        mock_repo.set_properties(USER_ID, sample_properties)
        account = await account_service.get_account(USER_ID)
        account.set_property("twitter", "@jane", Scope.PUBLISHED)

        result = await account_service.update_account(account)

        assert result["twitter"]["scope"] == "v2-published"
        assert mock_repo.stored(USER_ID)["twitter"]["value"] == "@jane"
        assert len(mock_event_bus.published_events) == 1


class TestDeleteUser:

    async def test_deletes_stored_record(self, account_service, mock_repo, sample_properties):
        mock_repo.set_properties(USER_ID, sample_properties)
        assert await account_service.delete_user(USER_ID) is True
        assert mock_repo.stored(USER_ID) is None

    async def test_missing_record(self, account_service):
        assert await account_service.delete_user("usr_missing") is False


class TestSearchUsers:

    async def test_finds_users_by_email(self, account_service, mock_repo, sample_properties):
        mock_repo.set_properties(USER_ID, sample_properties)

        matches = await account_service.search_users("email", ["jane@example.com", "nobody@example.com"])

        assert matches == {"jane@example.com": USER_ID}

    async def test_phone_search_is_keyed_by_input(self, account_service, mock_repo, sample_properties):
        mock_repo.set_properties(USER_ID, sample_properties)

        matches = await account_service.search_users("phone", ["0711 / 25 24 28-90", "garbage"])

        assert matches == {"0711 / 25 24 28-90": USER_ID}
        mock_repo.assert_called_with("search_users", property_name="phone", values=["+4971125242890"])

    async def test_unknown_property_is_rejected(self, account_service):
        with pytest.raises(InvalidArgumentError):
            await account_service.search_users("shoe_size", ["42"])
