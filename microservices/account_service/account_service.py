"""
Account Service Business Logic

Account property reconciliation for the microservice.
Handles validation, scope rules, verification state and change notification,
delegating data access to the repository layer.
"""

from typing import Optional, List, Dict, Union
import copy
import hmac
import logging

from core.config import get_settings

from .events.publishers import publish_user_updated
from .models import (
    Account, AccountUser, DEFAULT_SCOPES, Properties, PropertyName, VerificationStatus,
)
from .parsers import parse_phone_number, parse_website
from .protocols import (
    AccountRepositoryProtocol, AccountServiceError, ConfigProviderProtocol,
    EventBusProtocol, InvalidArgumentError, InvalidScopeError, VerifierProtocol,
)
from .scopes import ScopePolicy, normalize_scope

logger = logging.getLogger(__name__)

KNOWN_PROPERTIES = frozenset(name.value for name in PropertyName)
DEFAULT_MAX_VALUE_LENGTH = 2048

UserRef = Union[AccountUser, str]


class AccountService:
    """
    Account property reconciliation service

    Decides between insert, update and no-op for incoming property sets,
    keeps scopes and verification status consistent and publishes
    AccountManager::userUpdated after every write.
    """

    def __init__(
        self,
        repository: Optional[AccountRepositoryProtocol] = None,
        event_bus: Optional[EventBusProtocol] = None,
        verifier: Optional[VerifierProtocol] = None,
        config: Optional[ConfigProviderProtocol] = None,
    ):
        if repository is None:
            from .account_repository import AccountRepository
            repository = AccountRepository()
        self.account_repo = repository
        self.event_bus = event_bus
        self.verifier = verifier
        self.config = config or get_settings()

    # Record Access

    async def get_user(self, user: UserRef) -> Properties:
        """
        Get the stored properties of a user, creating the default record if needed

        Args:
            user: User identity or user id

        Returns:
            Property set with every entry carrying a verification status
        """
        user = self._as_user(user)
        properties = await self.account_repo.get_properties(user.user_id)

        if properties is None:
            properties = self.build_default_user_record(user)
            await self.insert_new_user(user, properties)
            logger.info(f"Default account record created: {user.user_id}")
            return properties

        return self.add_missing_default_values(properties)

    async def get_account(self, user: UserRef) -> Account:
        """Get the user's properties as an Account value object"""
        user = self._as_user(user)
        properties = await self.get_user(user)
        for name, entry in properties.items():
            entry["scope"] = normalize_scope(name, entry.get("scope"), ScopePolicy.FALLBACK).value
        return Account.from_properties(user.user_id, properties)

    # Reconciliation

    async def update_user(
        self, user: UserRef, properties: Properties, throw_on_data: bool = True
    ) -> Properties:
        """
        Reconcile an incoming property set with the stored record

        Args:
            user: User identity or user id
            properties: Incoming properties, name -> {value, scope[, verified]}
            throw_on_data: Raise on invalid values/scopes instead of repairing them

        Returns:
            The final normalized property set

        Raises:
            InvalidScopeError: Invalid or disallowed scope (strict mode only)
            InvalidArgumentError: Invalid value (strict mode only)
        """
        user = self._as_user(user)
        policy = ScopePolicy.from_flag(throw_on_data)

        # Everything is validated before the first storage call
        new_data = self._sanitize_values(properties, policy)
        old_data = await self.account_repo.get_properties(user.user_id) or {}
        new_data = self._normalize_scopes(new_data, old_data, policy)
        new_data = self._carry_over_verification(old_data, new_data)

        if not old_data:
            new_data = self._reset_verification(new_data)
            await self.insert_new_user(user, new_data)
        elif new_data != old_data:
            new_data = await self.check_email_verification(old_data, new_data, user)
            new_data = self.update_verify_status(old_data, new_data)
            await self.update_existing_user(user, new_data)
        else:
            logger.debug(f"Account properties unchanged: {user.user_id}")
            return new_data

        await self._notify_updated(user, new_data)
        return new_data

    async def update_account(self, account: Account) -> Properties:
        """Persist an Account value object, rejecting invalid data"""
        return await self.update_user(
            AccountUser(user_id=account.user_id), account.to_properties(), throw_on_data=True
        )

    def add_missing_default_values(self, properties: Properties) -> Properties:
        """Set a not-verified status on entries without one; never adds entries"""
        result = {}
        for name, entry in properties.items():
            entry = dict(entry)
            entry.setdefault("verified", VerificationStatus.NOT_VERIFIED.value)
            result[name] = entry
        return result

    def build_default_user_record(self, user: AccountUser) -> Properties:
        """Record for a user without stored data: every known property, unverified"""
        seeded = {
            PropertyName.DISPLAYNAME.value: user.display_name or "",
            PropertyName.EMAIL.value: user.email or "",
        }
        return {
            name.value: {
                "value": seeded.get(name.value, ""),
                "scope": DEFAULT_SCOPES[name.value].value,
                "verified": VerificationStatus.NOT_VERIFIED.value,
            }
            for name in PropertyName
        }

    async def check_email_verification(
        self, old_data: Properties, new_data: Properties, user: AccountUser
    ) -> Properties:
        """Reset and restart verification when the email address changed"""
        email_key = PropertyName.EMAIL.value
        new_entry = new_data.get(email_key)
        if new_entry is None:
            return new_data

        old_email = old_data.get(email_key, {}).get("value", "")
        if new_entry.get("value", "") == old_email:
            return new_data

        result = dict(new_data)
        entry = dict(new_entry)
        entry["verified"] = VerificationStatus.NOT_VERIFIED.value
        entry.pop("verification_data", None)
        result[email_key] = entry

        if entry.get("value") and self.verifier is not None:
            result = await self.verifier.start_verification(user, old_data, result)
        return result

    def update_verify_status(self, old_data: Properties, new_data: Properties) -> Properties:
        """
        Carry verification status over to the new property set

        Unchanged values keep their previous status; changed values are not
        verified any more. A changed email keeps what check_email_verification
        decided.
        """
        result = {}
        for name, entry in new_data.items():
            entry = dict(entry)
            previous = old_data.get(name)
            unchanged = previous is not None and previous.get("value", "") == entry.get("value", "")

            if unchanged:
                entry["verified"] = previous.get("verified", VerificationStatus.NOT_VERIFIED.value)
                if previous.get("verification_data"):
                    entry["verification_data"] = previous["verification_data"]
                else:
                    entry.pop("verification_data", None)
            elif name != PropertyName.EMAIL.value:
                entry["verified"] = VerificationStatus.NOT_VERIFIED.value
                entry.pop("verification_data", None)
            else:
                entry.setdefault("verified", VerificationStatus.NOT_VERIFIED.value)
            result[name] = entry
        return result

    async def confirm_verification(self, user: UserRef, property_name: str, token: str) -> Properties:
        """
        Mark a property verified when the pending token matches

        Raises:
            InvalidArgumentError: No pending verification or token mismatch
        """
        user = self._as_user(user)
        stored = await self.account_repo.get_properties(user.user_id)
        if stored is None:
            logger.warning(f"Rejected verification of {property_name} for unknown user {user.user_id}")
            raise InvalidArgumentError("Invalid or expired verification token")

        properties = self.add_missing_default_values(stored)
        entry = properties.get(property_name)

        if (
            not entry
            or entry.get("verified") != VerificationStatus.VERIFICATION_IN_PROGRESS.value
            or not hmac.compare_digest(entry.get("verification_data", "").encode(), token.encode())
        ):
            logger.warning(f"Rejected verification of {property_name} for user {user.user_id}")
            raise InvalidArgumentError("Invalid or expired verification token")

        updated = copy.deepcopy(properties)
        updated[property_name]["verified"] = VerificationStatus.VERIFIED.value
        updated[property_name].pop("verification_data", None)

        await self.update_existing_user(user, updated)
        logger.info(f"Property {property_name} verified for user {user.user_id}")
        await self._notify_updated(user, updated)
        return updated

    # Storage

    async def insert_new_user(self, user: AccountUser, properties: Properties) -> None:
        await self.account_repo.insert_properties(user.user_id, properties)

    async def update_existing_user(self, user: AccountUser, properties: Properties) -> None:
        await self.account_repo.update_properties(user.user_id, properties)

    async def delete_user(self, user_id: str) -> bool:
        """Remove the stored record, called when the user itself is removed"""
        deleted = await self.account_repo.delete_properties(user_id)
        logger.info(f"Account record removal for {user_id}: deleted={deleted}")
        return deleted

    async def search_users(self, property_name: str, values: List[str]) -> Dict[str, str]:
        """
        Find users owning the given property values

        Phone numbers are matched in E.164 form; the result is keyed by the
        value as it was passed in.
        """
        if property_name not in KNOWN_PROPERTIES:
            raise InvalidArgumentError(f"Unknown property: {property_name}")

        lookup = {value: value for value in values}
        if property_name == PropertyName.PHONE.value:
            lookup = {}
            for value in values:
                try:
                    lookup[self.parse_phone_number(value)] = value
                except InvalidArgumentError:
                    logger.debug(f"Skipping unparseable phone number in search: {value!r}")

        matches = await self.account_repo.search_users(property_name, list(lookup.keys()))
        return {lookup[value]: user_id for value, user_id in matches.items() if value in lookup}

    # Value Parsing

    def parse_phone_number(self, raw_input: str) -> str:
        region = self.config.get_system_value_string("default_phone_region", "")
        return parse_phone_number(raw_input, region)

    def parse_website(self, raw_input: str) -> str:
        return parse_website(raw_input)

    # Private Helper Methods

    def _as_user(self, user: UserRef) -> AccountUser:
        if isinstance(user, AccountUser):
            return user
        if not user:
            raise AccountServiceError("user_id is required")
        return AccountUser(user_id=user)

    def _max_value_length(self) -> int:
        raw = self.config.get_system_value_string("max_value_length", str(DEFAULT_MAX_VALUE_LENGTH))
        try:
            return int(raw)
        except ValueError:
            return DEFAULT_MAX_VALUE_LENGTH

    def _sanitize_values(self, properties: Properties, policy: ScopePolicy) -> Properties:
        """Check names, lengths, phone numbers and websites; repair or raise"""
        strict = policy is ScopePolicy.STRICT
        max_length = self._max_value_length()
        result = {}

        for name, entry in properties.items():
            if name not in KNOWN_PROPERTIES:
                if strict:
                    raise InvalidArgumentError(f"Unknown property: {name}")
                logger.warning(f"Dropping unknown property {name}")
                continue

            entry = dict(entry)
            value = entry.get("value")
            value = "" if value is None else str(value)

            try:
                if len(value) > max_length:
                    raise InvalidArgumentError(f"Value of {name} exceeds {max_length} characters")
                if value and name == PropertyName.PHONE.value:
                    value = self.parse_phone_number(value)
                elif value and name == PropertyName.WEBSITE.value:
                    value = self.parse_website(value)
            except InvalidArgumentError:
                if strict:
                    raise
                logger.info(f"Clearing invalid value of {name}")
                value = ""

            entry["value"] = value
            result[name] = entry
        return result

    def _normalize_scopes(self, new_data: Properties, old_data: Properties, policy: ScopePolicy) -> Properties:
        """Resolve every scope; a missing scope keeps the stored or default one"""
        result = {}
        for name, entry in new_data.items():
            entry = dict(entry)
            if entry.get("scope") is None:
                entry["scope"] = old_data.get(name, {}).get("scope", DEFAULT_SCOPES[name].value)
                policy_for_entry = ScopePolicy.FALLBACK
            else:
                policy_for_entry = policy
            try:
                entry["scope"] = normalize_scope(name, entry["scope"], policy_for_entry).value
            except InvalidScopeError:
                logger.warning(f"Rejected scope {entry['scope']!r} for {name}")
                raise
            result[name] = entry
        return result

    def _carry_over_verification(self, old_data: Properties, new_data: Properties) -> Properties:
        """Unchanged values take the stored status and pending token"""
        result = {}
        for name, entry in new_data.items():
            previous = old_data.get(name)
            if previous is not None and previous.get("value", "") == entry.get("value", ""):
                entry = dict(entry)
                entry["verified"] = previous.get("verified", VerificationStatus.NOT_VERIFIED.value)
                if previous.get("verification_data"):
                    entry["verification_data"] = previous["verification_data"]
                else:
                    entry.pop("verification_data", None)
            result[name] = entry
        return result

    def _reset_verification(self, properties: Properties) -> Properties:
        """New records start unverified whatever the caller sent"""
        result = {}
        for name, entry in properties.items():
            entry = dict(entry)
            entry["verified"] = VerificationStatus.NOT_VERIFIED.value
            entry.pop("verification_data", None)
            result[name] = entry
        return result

    async def _notify_updated(self, user: AccountUser, properties: Properties) -> None:
        if self.event_bus is None:
            return
        await publish_user_updated(self.event_bus, user_id=user.user_id, properties=properties)
