"""
Client Models

Pydantic models for rows returned by client searches.
"""

from pydantic import BaseModel, Field

NOT_FOUND = -1


class ClientRow(BaseModel):
    """One client joined with one of its phones (or none)"""

    id: int = Field(..., description="Client id")
    first_name: str
    last_name: str
    email: str
    phone: str | None = Field(None, description="Phone number, if any")

    def format(self) -> str:
        phone = self.phone if self.phone is not None else "not specified"
        return (
            f"ID: {self.id}, First name: {self.first_name}, "
            f"Last name: {self.last_name}, Email: {self.email}, Phone: {phone}"
        )


class SearchResult(BaseModel):
    """Rows matched by a search, ordered by client id then phone id"""

    query: str
    rows: list[ClientRow] = Field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.rows)

    @property
    def client_id(self) -> int:
        """Id of the first matching client, or NOT_FOUND."""
        return self.rows[0].id if self.rows else NOT_FOUND

    def client_ids(self) -> list[int]:
        """Distinct client ids in row order."""
        seen: list[int] = []
        for row in self.rows:
            if row.id not in seen:
                seen.append(row.id)
        return seen

    def format_rows(self) -> list[str]:
        if not self.rows:
            return ["No client matches the given data"]
        return [row.format() for row in self.rows]
