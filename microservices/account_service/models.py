"""
Account Service Models

Independent models for the account property service.
"""

from typing import Optional, Dict, List
from pydantic import BaseModel, Field
from datetime import datetime

# Internal microservice models
from enum import Enum


class PropertyName(str, Enum):
    """Known account property names"""
    DISPLAYNAME = "displayname"
    ADDRESS = "address"
    WEBSITE = "website"
    EMAIL = "email"
    AVATAR = "avatar"
    PHONE = "phone"
    TWITTER = "twitter"


class Scope(str, Enum):
    """Property visibility, from least to most exposed"""
    PRIVATE = "v2-private"
    LOCAL = "v2-local"
    FEDERATED = "v2-federated"
    PUBLISHED = "v2-published"


class LegacyVisibility(str, Enum):
    """Visibility values accepted from older clients"""
    PRIVATE = "private"
    CONTACTS_ONLY = "contacts"
    PUBLIC = "public"


class VerificationStatus(str, Enum):
    """Tri-state verification marker, stored as "0"/"1"/"2" """
    NOT_VERIFIED = "0"
    VERIFICATION_IN_PROGRESS = "1"
    VERIFIED = "2"


# Properties that may never be hidden completely
RESTRICTED_SCOPE_PROPERTIES = frozenset({PropertyName.DISPLAYNAME.value, PropertyName.EMAIL.value})

DEFAULT_SCOPES: Dict[str, Scope] = {
    PropertyName.DISPLAYNAME.value: Scope.FEDERATED,
    PropertyName.ADDRESS.value: Scope.LOCAL,
    PropertyName.WEBSITE.value: Scope.LOCAL,
    PropertyName.EMAIL.value: Scope.FEDERATED,
    PropertyName.AVATAR.value: Scope.FEDERATED,
    PropertyName.PHONE.value: Scope.LOCAL,
    PropertyName.TWITTER.value: Scope.LOCAL,
}

# Property set in storage/wire form: name -> {"value", "scope", "verified", ...}
Properties = Dict[str, Dict[str, str]]


class AccountProperty(BaseModel):
    """Single typed account property"""
    name: str
    value: str = ""
    scope: Scope = Scope.LOCAL
    verified: VerificationStatus = VerificationStatus.NOT_VERIFIED
    verification_data: str = ""

    def to_dict(self) -> Dict[str, str]:
        data = {
            "value": self.value,
            "scope": self.scope.value,
            "verified": self.verified.value,
        }
        if self.verification_data:
            data["verification_data"] = self.verification_data
        return data


class Account(BaseModel):
    """
    Account value object: ordered collection of typed properties for one user.

    Insertion order is kept for serialisation stability only; equality of
    two accounts compares the property mapping.
    """
    user_id: str
    properties: Dict[str, AccountProperty] = Field(default_factory=dict)

    def set_property(
        self,
        name: str,
        value: str,
        scope: Scope,
        verified: VerificationStatus = VerificationStatus.NOT_VERIFIED,
        verification_data: str = "",
    ) -> "Account":
        self.properties[name] = AccountProperty(
            name=name,
            value=value,
            scope=scope,
            verified=verified,
            verification_data=verification_data,
        )
        return self

    def get_property(self, name: str) -> AccountProperty:
        if name not in self.properties:
            raise KeyError(f"Property not set: {name}")
        return self.properties[name]

    def get_properties(self) -> List[AccountProperty]:
        return list(self.properties.values())

    def get_filtered_properties(
        self,
        scope: Optional[Scope] = None,
        verified: Optional[VerificationStatus] = None,
    ) -> List[AccountProperty]:
        """Properties matching the given scope and/or verification status"""
        return [
            prop for prop in self.properties.values()
            if (scope is None or prop.scope == scope)
            and (verified is None or prop.verified == verified)
        ]

    def to_properties(self) -> Properties:
        return {name: prop.to_dict() for name, prop in self.properties.items()}

    @classmethod
    def from_properties(cls, user_id: str, properties: Properties) -> "Account":
        account = cls(user_id=user_id)
        for name, data in properties.items():
            account.set_property(
                name,
                data.get("value", ""),
                Scope(data.get("scope", Scope.LOCAL.value)),
                VerificationStatus(data.get("verified", VerificationStatus.NOT_VERIFIED.value)),
                data.get("verification_data", ""),
            )
        return account


class AccountUser(BaseModel):
    """User identity as handed over by the identity provider"""
    user_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None


# Account Service Specific Request Models

class PropertyUpdate(BaseModel):
    """Incoming value/scope pair for a single property"""
    value: str = Field("", description="Property value")
    scope: Optional[str] = Field(None, description="Requested visibility scope")
    verified: Optional[VerificationStatus] = Field(None, description="Verification status")


class AccountPropertiesUpdateRequest(BaseModel):
    """Account property update request"""
    properties: Dict[str, PropertyUpdate] = Field(..., description="Properties keyed by name")
    display_name: Optional[str] = Field(None, description="Identity display name, used for defaults")
    email: Optional[str] = Field(None, description="Identity email, used for defaults")

    def to_properties(self) -> Properties:
        properties: Properties = {}
        for name, update in self.properties.items():
            entry = {"value": update.value}
            if update.scope is not None:
                entry["scope"] = update.scope
            if update.verified is not None:
                entry["verified"] = update.verified.value
            properties[name] = entry
        return properties


class VerificationConfirmRequest(BaseModel):
    """Confirm a pending property verification"""
    property_name: PropertyName = Field(..., description="Property being verified")
    token: str = Field(..., min_length=1, description="Token delivered to the user")


# Account Service Specific Response Models

class AccountPropertiesResponse(BaseModel):
    """Account properties response"""
    user_id: str
    properties: Dict[str, Dict[str, str]]


class AccountSearchResponse(BaseModel):
    """Matches of a property value search"""
    property_name: PropertyName
    matches: Dict[str, str]


# Service Status Models

class AccountServiceStatus(BaseModel):
    """Account service status response"""
    service: str = "account_service"
    status: str = "operational"
    port: int = 8202
    version: str = "1.0.0"
    database_connected: bool
    timestamp: datetime


# Export all models
__all__ = [
    'PropertyName', 'Scope', 'LegacyVisibility', 'VerificationStatus',
    'RESTRICTED_SCOPE_PROPERTIES', 'DEFAULT_SCOPES', 'Properties',
    'AccountProperty', 'Account', 'AccountUser',
    'PropertyUpdate', 'AccountPropertiesUpdateRequest', 'VerificationConfirmRequest',
    'AccountPropertiesResponse', 'AccountSearchResponse', 'AccountServiceStatus',
]
