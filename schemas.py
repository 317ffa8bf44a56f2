"""
Record Schemas for the Animal Registry

Each stored animal is one JSON file under the "animals" collection.
AnimalInput holds the fields a client may send; Animal adds the fields the
service assigns on creation.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List


class Event(BaseModel):
    """
    Dated occurrence embedded in an animal record (not stored on its own)
    """
    name: str = Field(..., description="Short event title")
    date: str = Field(..., description="mm/dd/yyyy")
    url: str = Field(..., description="Link to a source for the event")


class AnimalInput(BaseModel):
    """
    Client-supplied animal fields, built only after validate_animal accepts them.
    Unknown keys (including a client-sent id or createdByUser) are dropped.
    """
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Common name")
    sciName: str = Field(..., description="Scientific name")
    description: List[Any] = Field(..., description="Description paragraphs, at least 2")
    images: List[Any] = Field(..., description="Image references, at least 1")
    events: List[Event] = Field(..., description="Events, at least 1")


class Animal(AnimalInput):
    """
    Animals collection schema
    Collection: "animals"
    """
    id: str = Field(..., description="Assigned by the service on creation")
    createdByUser: str = Field(..., description="User id resolved from the creating credential")
