import logging
from decimal import Decimal
from models.bill import Bill
from database.bill_dao import BillDAO, UPDATABLE_COLUMNS
from services.errors import NotFoundError, ValidationError
from services.validators import (
    optional_text, to_amount, to_bill_type, to_due_day, to_name,
)

logger = logging.getLogger(__name__)


class BillService:
    def __init__(self, bill_dao: BillDAO):
        self._dao = bill_dao

    def get_all_bills(self, active_only: bool = False) -> list[Bill]:
        return self._dao.get_all(active_only=active_only)

    def get_bill_by_id(self, bill_id: str) -> Bill:
        bill = self._dao.get_by_id(bill_id)
        if bill is None:
            raise NotFoundError("Bill", bill_id)
        return bill

    def get_bill_by_name(self, name: str) -> Bill | None:
        return self._dao.get_by_name(name.strip())

    def find_bill(self, key: str) -> Bill:
        """Resolve a full id, an exact bill name, or a unique id prefix."""
        key = key.strip()
        bill = self._dao.get_by_id(key) or self._dao.get_by_name(key)
        if bill:
            return bill
        matches = self._dao.find_by_id_prefix(key) if key else []
        if len(matches) > 1:
            raise ValidationError(f"Bill id prefix '{key}' is ambiguous.")
        if not matches:
            raise NotFoundError("Bill", key)
        return matches[0]

    def create_bill(
        self,
        name: str,
        type_: str,
        amount: Decimal | str | float,
        due_day: int | str,
        description: str | None = None,
    ) -> Bill:
        bill = self._dao.create(
            name=to_name(name),
            type_=to_bill_type(type_),
            amount=to_amount(amount),
            due_day=to_due_day(due_day),
            description=optional_text(description),
        )
        logger.info("Created bill %s (%s)", bill.id, bill.name)
        return bill

    def update_bill(self, bill_id: str, **fields) -> Bill:
        """Partial update of name, type, amount, due_day, description or active."""
        unknown = set(fields) - set(UPDATABLE_COLUMNS)
        if unknown:
            raise ValidationError(f"Unknown bill field(s): {', '.join(sorted(unknown))}")
        self.get_bill_by_id(bill_id)

        clean = {}
        if "name" in fields:
            clean["name"] = to_name(fields["name"])
        if "type" in fields:
            clean["type"] = to_bill_type(fields["type"])
        if "amount" in fields:
            clean["amount"] = to_amount(fields["amount"])
        if "due_day" in fields:
            clean["due_day"] = to_due_day(fields["due_day"])
        if "description" in fields:
            clean["description"] = optional_text(fields["description"])
        if "active" in fields:
            clean["active"] = bool(fields["active"])

        bill = self._dao.update(bill_id, **clean)
        logger.info("Updated bill %s: %s", bill_id, ", ".join(sorted(clean)) or "no changes")
        return bill

    def toggle_bill_status(self, bill_id: str) -> Bill:
        bill = self.get_bill_by_id(bill_id)
        return self.update_bill(bill_id, active=not bill.active)

    def delete_bill(self, bill_id: str) -> Bill:
        """Delete a bill together with all of its payments."""
        bill = self.get_bill_by_id(bill_id)
        self._dao.delete(bill_id)
        logger.info("Deleted bill %s (%s) and its payments", bill.id, bill.name)
        return bill
