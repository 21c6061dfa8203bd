# fintrack/backend/models.py
# lightweight model classes (not DB-bound ORM)
from typing import Any, Dict, Optional

TRANSACTION_TYPES = ("income", "expense")


class User:
    def __init__(self, id, email, password_hash, name, role="user", currency="USD", created_at=None):
        self.id = id
        self.email = email
        self.password_hash = password_hash
        self.name = name
        self.role = role
        self.currency = currency
        self.created_at = created_at

    @classmethod
    def from_row(cls, row) -> "User":
        return cls(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            name=row["name"],
            role=row["role"],
            currency=row["currency"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        # password_hash never leaves the backend
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "currency": self.currency,
            "createdAt": self.created_at,
        }


class Category:
    def __init__(self, id, name, type, user_id=None, created_at=None):
        self.id = id
        self.name = name
        self.type = type
        self.user_id = user_id
        self.created_at = created_at

    @property
    def is_default(self) -> bool:
        return self.user_id is None

    @classmethod
    def from_row(cls, row) -> "Category":
        return cls(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            user_id=row["user_id"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "userId": self.user_id,
            "isDefault": self.is_default,
            "createdAt": self.created_at,
        }


class Transaction:
    def __init__(self, id, user_id, type, category, amount, date,
                 description: Optional[str] = None, created_at=None):
        self.id = id
        self.user_id = user_id
        self.type = type
        self.category = category
        self.amount = amount
        self.date = date
        self.description = description
        self.created_at = created_at

    @classmethod
    def from_row(cls, row) -> "Transaction":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            type=row["type"],
            category=row["category"],
            amount=float(row["amount"]),
            date=row["date"],
            description=row["description"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "type": self.type,
            "category": self.category,
            "amount": self.amount,
            "date": self.date,
            "description": self.description,
            "createdAt": self.created_at,
        }

    def __repr__(self):
        return f"<Transaction {self.type} {self.category} {self.amount}>"
