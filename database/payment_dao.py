import uuid
from datetime import date
from decimal import Decimal
from typing import Optional
from database.db_manager import DatabaseManager
from models.payment import Payment
from utils.date_helpers import format_date, parse_date


class PaymentDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Payment:
        return Payment(
            id=row["id"],
            bill_id=row["bill_id"],
            amount=Decimal(row["amount"]),
            status=row["status"],
            due_date=parse_date(row["due_date"]),
            paid_date=parse_date(row["paid_date"]) if row["paid_date"] else None,
            notes=row["notes"],
            bill_name=row["bill_name"] if "bill_name" in row.keys() else "",
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _select(self) -> str:
        return """
            SELECT p.*,
                   b.name AS bill_name
            FROM payments p
            JOIN bills b ON p.bill_id = b.id
        """

    def get_all(self) -> list[Payment]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " ORDER BY p.due_date DESC, b.name ASC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, payment_id: str) -> Optional[Payment]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE p.id = ?", (payment_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def find_by_id_prefix(self, prefix: str) -> list[Payment]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE p.id LIKE ? ORDER BY p.due_date",
            (prefix.replace("%", "").replace("_", "") + "%",),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_between(self, start: date, end: date) -> list[Payment]:
        """Payments with start <= due_date <= end (both inclusive)."""
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + """
            WHERE p.due_date >= ? AND p.due_date <= ?
            ORDER BY p.due_date ASC, b.name ASC
            """,
            (format_date(start), format_date(end)),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_status(self, status: str) -> list[Payment]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE p.status = ? ORDER BY p.due_date ASC, b.name ASC",
            (status,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_bill(self, bill_id: str) -> list[Payment]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE p.bill_id = ? ORDER BY p.due_date ASC",
            (bill_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def find_for_bill_in_range(
        self, bill_id: str, start: date, end_exclusive: date
    ) -> Optional[Payment]:
        """First payment of the bill with start <= due_date < end_exclusive."""
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + """
            WHERE p.bill_id = ? AND p.due_date >= ? AND p.due_date < ?
            ORDER BY p.due_date ASC
            LIMIT 1
            """,
            (bill_id, format_date(start), format_date(end_exclusive)),
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        bill_id: str,
        amount: Decimal,
        due_date: date,
        notes: str | None = None,
        status: str = "PENDING",
    ) -> Payment:
        payment_id = uuid.uuid4().hex
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO payments (id, bill_id, amount, status, due_date, notes)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (payment_id, bill_id, str(amount), status, format_date(due_date), notes),
        )
        conn.commit()
        return self.get_by_id(payment_id)

    def update(
        self,
        payment_id: str,
        amount: Decimal,
        status: str,
        paid_date: date | None,
        notes: str | None,
    ) -> Optional[Payment]:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE payments
               SET amount=?, status=?, paid_date=?, notes=?, updated_at=datetime('now')
               WHERE id=?""",
            (
                str(amount), status,
                format_date(paid_date) if paid_date else None,
                notes, payment_id,
            ),
        )
        conn.commit()
        return self.get_by_id(payment_id)

    def mark_overdue_before(self, cutoff: date) -> int:
        """PENDING -> OVERDUE for every payment due before cutoff. Returns row count."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            """UPDATE payments
               SET status = 'OVERDUE', updated_at = datetime('now')
               WHERE status = 'PENDING' AND due_date < ?""",
            (format_date(cutoff),),
        )
        conn.commit()
        return cursor.rowcount

    def delete(self, payment_id: str) -> bool:
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM payments WHERE id = ?", (payment_id,))
        conn.commit()
        return cursor.rowcount > 0
