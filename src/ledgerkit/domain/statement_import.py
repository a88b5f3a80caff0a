"""Bank statement CSV reading."""

import csv
from pathlib import Path
from typing import Any, Mapping, Optional

from ledgerkit.domain.errors import ValidationError

DEFAULT_COLUMNS: dict[str, str] = {
    "date": "Date",
    "description": "Description",
    "reference": "Reference",
    "debit": "Debit",
    "credit": "Credit",
    "balance": "Balance",
}


class BankStatementCSVReader:
    """Reads bank statement CSV exports into import rows.

    Values are returned as stripped strings (None when empty); parsing into
    dates and amounts happens during the import itself.
    """

    def __init__(self, columns: Optional[Mapping[str, str]] = None):
        """Initialize reader.

        Args:
            columns: Optional mapping of row field (date, description, reference,
                debit, credit, balance) to CSV header name. Missing fields use
                DEFAULT_COLUMNS.
        """
        self.columns = dict(DEFAULT_COLUMNS)
        if columns:
            self.columns.update(columns)

    def read(self, csv_file_path: str) -> list[dict[str, Any]]:
        """Read all rows from a CSV file.

        Args:
            csv_file_path: Path to CSV file

        Returns:
            List of row dicts keyed by field name

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If the file has no header or lacks required columns
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            # Try to detect delimiter
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)

            csv_columns = reader.fieldnames
            if csv_columns is None:
                raise ValidationError("CSV file has no columns")

            present = set(csv_columns)
            if self.columns["date"] not in present:
                raise ValidationError(
                    f"CSV file missing required columns: {self.columns['date']}"
                )
            if self.columns["debit"] not in present and self.columns["credit"] not in present:
                raise ValidationError(
                    "CSV file missing required columns: "
                    f"{self.columns['debit']} or {self.columns['credit']}"
                )

            rows = []
            for row in reader:
                values: dict[str, Any] = {}
                for field_name, csv_col in self.columns.items():
                    raw = row.get(csv_col)
                    values[field_name] = raw.strip() if raw and raw.strip() else None
                rows.append(values)

        return rows
