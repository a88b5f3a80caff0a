"""Cost center and project reports."""

from datetime import date
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import DimensionKind, DimensionReport, DimensionReportRow


class DimensionReportService:
    """Service summarizing posted journal lines by dimension."""

    def __init__(self, db: Database):
        """Initialize dimension report service.

        Args:
            db: Database instance
        """
        self.db = db

    def report(
        self,
        kind: DimensionKind,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> DimensionReport:
        """Sum posted debits and credits per cost center or project.

        Lines without the dimension are left out rather than grouped as
        unassigned. Dimension ids missing from the master are shown as
        'Unknown'.
        """
        kind = DimensionKind(kind)
        masters = {d.id: d for d in self.db.list_dimensions(kind)}

        rows = []
        for totals in self.db.get_dimension_totals(kind, start_date=start_date, end_date=end_date):
            dimension = masters.get(totals["dimension_id"])
            rows.append(
                DimensionReportRow(
                    dimension_id=totals["dimension_id"],
                    code=dimension.code if dimension else None,
                    name=dimension.name if dimension else "Unknown",
                    debit_total=totals["debit_total"],
                    credit_total=totals["credit_total"],
                    net=totals["debit_total"] - totals["credit_total"],
                    line_count=totals["line_count"],
                )
            )

        return DimensionReport(
            kind=kind,
            start_date=start_date,
            end_date=end_date,
            rows=tuple(rows),
        )

    def cost_center_report(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> DimensionReport:
        return self.report(DimensionKind.COST_CENTER, start_date, end_date)

    def project_report(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> DimensionReport:
        return self.report(DimensionKind.PROJECT, start_date, end_date)
