import uuid
from decimal import Decimal
from typing import Optional
from database.db_manager import DatabaseManager
from models.bill import Bill

# Columns update() may touch; values are already validated by BillService.
UPDATABLE_COLUMNS = ("name", "type", "amount", "due_day", "description", "active")


class BillDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Bill:
        return Bill(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            amount=Decimal(row["amount"]),
            due_day=row["due_day"],
            description=row["description"],
            active=bool(row["active"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_all(self, active_only: bool = False) -> list[Bill]:
        conn = self._db.get_connection()
        sql = "SELECT * FROM bills"
        if active_only:
            sql += " WHERE active = 1"
        rows = conn.execute(sql + " ORDER BY due_day ASC, name ASC").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active(self) -> list[Bill]:
        return self.get_all(active_only=True)

    def get_by_id(self, bill_id: str) -> Optional[Bill]:
        conn = self._db.get_connection()
        row = conn.execute("SELECT * FROM bills WHERE id = ?", (bill_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def find_by_id_prefix(self, prefix: str) -> list[Bill]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM bills WHERE id LIKE ? ORDER BY due_day, name",
            (prefix.replace("%", "").replace("_", "") + "%",),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_name(self, name: str) -> Optional[Bill]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM bills WHERE name = ? ORDER BY created_at LIMIT 1", (name,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        name: str,
        type_: str,
        amount: Decimal,
        due_day: int,
        description: str | None = None,
    ) -> Bill:
        bill_id = uuid.uuid4().hex
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO bills (id, name, type, amount, due_day, description)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (bill_id, name, type_, str(amount), due_day, description),
        )
        conn.commit()
        return self.get_by_id(bill_id)

    def update(self, bill_id: str, **fields) -> Optional[Bill]:
        """Partial update; only the keyword arguments given are written."""
        sets, params = [], []
        for column in UPDATABLE_COLUMNS:
            if column not in fields:
                continue
            value = fields[column]
            if column == "amount":
                value = str(value)
            elif column == "active":
                value = 1 if value else 0
            sets.append(f"{column} = ?")
            params.append(value)
        if sets:
            conn = self._db.get_connection()
            conn.execute(
                f"UPDATE bills SET {', '.join(sets)}, updated_at = datetime('now') WHERE id = ?",
                (*params, bill_id),
            )
            conn.commit()
        return self.get_by_id(bill_id)

    def delete(self, bill_id: str) -> bool:
        """Delete a bill; its payments go with it through ON DELETE CASCADE."""
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM bills WHERE id = ?", (bill_id,))
        conn.commit()
        return cursor.rowcount > 0
