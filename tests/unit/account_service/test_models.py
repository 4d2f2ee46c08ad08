"""
Unit tests for account models
"""
import pytest

from microservices.account_service.models import (
    Account,
    AccountPropertiesUpdateRequest,
    AccountProperty,
    DEFAULT_SCOPES,
    PropertyName,
    Scope,
    VerificationStatus,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def account():
    account = Account(user_id="usr_test_123")
    account.set_property("displayname", "Jane Doe", Scope.FEDERATED)
    account.set_property("email", "jane@example.com", Scope.FEDERATED, VerificationStatus.VERIFIED)
    account.set_property("phone", "+4971125242890", Scope.PRIVATE)
    return account


class TestEnums:

    def test_property_names(self):
        assert [name.value for name in PropertyName] == [
            "displayname", "address", "website", "email", "avatar", "phone", "twitter",
        ]

    def test_every_property_has_a_default_scope(self):
        assert set(DEFAULT_SCOPES) == {name.value for name in PropertyName}
        assert all(scope is not Scope.PRIVATE for scope in DEFAULT_SCOPES.values())

    def test_verification_status_wire_values(self):
        assert VerificationStatus.NOT_VERIFIED.value == "0"
        assert VerificationStatus.VERIFICATION_IN_PROGRESS.value == "1"
        assert VerificationStatus.VERIFIED.value == "2"


class TestAccountProperty:

    def test_to_dict_omits_empty_verification_data(self):
        prop = AccountProperty(name="twitter", value="@jane")
        assert prop.to_dict() == {"value": "@jane", "scope": "v2-local", "verified": "0"}

    def test_to_dict_keeps_pending_token(self):
        prop = AccountProperty(
            name="email",
            value="jane@example.com",
            verified=VerificationStatus.VERIFICATION_IN_PROGRESS,
            verification_data="tok",
        )
        assert prop.to_dict()["verification_data"] == "tok"


class TestAccount:

    def test_get_property(self, account):
        assert account.get_property("displayname").value == "Jane Doe"

    def test_get_missing_property_raises(self, account):
        with pytest.raises(KeyError):
            account.get_property("twitter")

    def test_set_property_replaces_entry(self, account):
        account.set_property("displayname", "J. Doe", Scope.PUBLISHED)
        assert account.get_property("displayname").scope is Scope.PUBLISHED
        assert len(account.get_properties()) == 3

    def test_get_properties_keeps_insertion_order(self, account):
        assert [p.name for p in account.get_properties()] == ["displayname", "email", "phone"]

    def test_filter_by_scope(self, account):
        names = [p.name for p in account.get_filtered_properties(scope=Scope.FEDERATED)]
        assert names == ["displayname", "email"]

    def test_filter_by_scope_and_verification(self, account):
        props = account.get_filtered_properties(scope=Scope.FEDERATED, verified=VerificationStatus.VERIFIED)
        assert [p.name for p in props] == ["email"]

    def test_properties_roundtrip(self, account):
        restored = Account.from_properties("usr_test_123", account.to_properties())
        assert restored == account

    def test_equality_ignores_insertion_order(self, account):
        other = Account(user_id="usr_test_123")
        for prop in reversed(account.get_properties()):
            other.set_property(prop.name, prop.value, prop.scope, prop.verified)
        assert other == account


class TestUpdateRequest:

    def test_to_properties_leaves_out_missing_scope(self):
        request = AccountPropertiesUpdateRequest(properties={
            "displayname": {"value": "Jane", "scope": "public"},
            "twitter": {"value": "@jane"},
        })
        assert request.to_properties() == {
            "displayname": {"value": "Jane", "scope": "public"},
            "twitter": {"value": "@jane"},
        }

    def test_to_properties_keeps_verification_status(self):
        request = AccountPropertiesUpdateRequest(properties={
            "email": {"value": "a@example.com", "scope": "v2-local", "verified": "2"},
        })
        assert request.to_properties()["email"]["verified"] == "2"
