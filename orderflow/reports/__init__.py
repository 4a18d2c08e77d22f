"""
Reports — sales rollups for admins and sellers.

    from orderflow import reports as R

    from_utc, to_utc = R.normalize_range(None, None, today=date.today())
    report = await R.seller_report(session, seller_id, from_utc, to_utc, top=10)
"""

from orderflow.reports._aggregate import (
    AdminReport,
    DailyStats,
    ProductSales,
    SellerReport,
    StatusCount,
    admin_report,
    seller_report,
)
from orderflow.reports._range import normalize_range

__all__ = (
    "AdminReport",
    "DailyStats",
    "ProductSales",
    "SellerReport",
    "StatusCount",
    "admin_report",
    "seller_report",
    "normalize_range",
)
