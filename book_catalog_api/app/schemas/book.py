"""
Pydantic models for book data.

Stored books are plain JSON objects that may carry extra fields (for
example ``ISBN``) which the API preserves but never edits.  The models
here therefore validate only the known fields and let everything else
pass through: ``BookCreate`` keeps extra keys, ``BookUpdate`` drops
them.  Field names follow the stored document (``Id``, ``Title``,
``PrintLength`` ...).
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

# Fields a client may change through ``PUT /books/{id}``.  ``Id`` and any
# extra stored field are deliberately absent.
UPDATABLE_FIELDS = ("Title", "Author", "Description", "PrintLength", "Publisher")


def _not_blank(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        raise ValueError("must not be blank")
    return value


class BookCreate(BaseModel):
    """Schema for registering a new book.

    ``Id`` is optional; when omitted the service assigns the next free
    identifier.
    """

    Id: Optional[int] = Field(None, gt=0, strict=True, examples=[1])
    Title: str = Field(..., examples=["1984"])
    Author: str = Field(..., examples=["George Orwell"])
    Description: Optional[str] = Field(None, examples=["A dystopian novel"])
    PrintLength: Optional[int] = Field(None, ge=0, strict=True, examples=[328])
    Publisher: Optional[str] = Field(None, examples=["Secker & Warburg"])

    model_config = {
        "extra": "allow",
    }

    @field_validator("Title", "Author")
    @classmethod
    def check_not_blank(cls, v: Any) -> Any:
        return _not_blank(v)


class BookUpdate(BaseModel):
    """Schema for updating a book.

    All fields are optional; only provided fields are applied.  Keys
    outside ``UPDATABLE_FIELDS`` (including ``Id``) are ignored.
    """

    Title: Optional[str] = None
    Author: Optional[str] = None
    Description: Optional[str] = None
    PrintLength: Optional[int] = Field(None, ge=0, strict=True)
    Publisher: Optional[str] = None

    model_config = {
        "extra": "ignore",
    }

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Explicit nulls would erase a field; omitting the key is the way
        # to leave it alone.
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("Title", "Author")
    @classmethod
    def check_not_blank(cls, v: Any) -> Any:
        return _not_blank(v)


class BookEnvelope(BaseModel):
    """Response body carrying a single stored book."""

    message: str
    data: Dict[str, Any]


class BookListEnvelope(BaseModel):
    """Response body carrying the whole collection."""

    message: str
    data: List[Dict[str, Any]]


class ErrorMessage(BaseModel):
    """Response body for every client or server error."""

    message: str
    errors: Optional[List[str]] = None
