import enum
from datetime import datetime
from typing import Optional

from .common import WireModel, ReadModel, RequiredText, OptionalText, not_null


class ClientClassification(str, enum.Enum):
    residential = "residential"
    commercial = "commercial"
    industrial = "industrial"


class ClientType(str, enum.Enum):
    client = "client"
    prospect = "prospect"


class ClientCreate(WireModel):
    name: RequiredText
    email: RequiredText
    phone: RequiredText
    address: RequiredText
    classification: ClientClassification = ClientClassification.residential
    type: ClientType = ClientType.client
    notes: OptionalText = None


class ClientUpdate(WireModel):
    name: Optional[RequiredText] = None
    email: Optional[RequiredText] = None
    phone: Optional[RequiredText] = None
    address: Optional[RequiredText] = None
    classification: Optional[ClientClassification] = None
    type: Optional[ClientType] = None
    notes: OptionalText = None

    _required = not_null("name", "email", "phone", "address", "classification", "type")


class ClientResponse(ReadModel):
    id: int
    name: str
    email: str
    phone: str
    address: str
    classification: str
    type: str
    notes: Optional[str] = None
    created_at: datetime
