"""
Sales Analysis Engine
=====================
Reads a raw sales export and writes the four-sheet report workbook:

    MM.DD sales            per-product latest-day / 7-day / week-over-week
    MM.DD customers        latest-day quantity per product and customer
    MM styles+customers    per-product, per-customer daily quantities
    MM styles              per-product daily quantities and totals
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from excel_analyzer.app.config import AppConfig
from excel_analyzer.errors import (
    EmptyWorkbookError,
    InsufficientDataError,
    NoSaleRecordsError,
    RowParseError,
    WorkbookReadError,
)


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]

# Input sheet layout (0-based columns)
DATE_COLUMN = 0
CUSTOMER_COLUMN = 2
PRODUCT_COLUMN = 3
QUANTITY_COLUMN = 8
MIN_ROW_CELLS = 12
STYLE_MIN_ROW_CELLS = 9

HEADER_FONT = Font(bold=True)


@dataclass(frozen=True)
class SaleRecord:
    """One shipment line of the input sheet."""
    date: datetime
    customer: str
    product_id: str
    quantity: int

    @property
    def day(self) -> date:
        return self.date.date()


@dataclass(frozen=True)
class ProductDailyStat:
    product_id: str
    daily_sales: int
    weekly_sales: int
    weekly_compare: int


@dataclass
class ProductCustomerBlock:
    """Customers of one product, sorted by quantity."""
    product_id: str
    customers: list[tuple[str, int]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(quantity for _, quantity in self.customers)


@dataclass
class CustomerSeries:
    customer: str
    daily_sales: dict[date, int]
    total_sales: int


@dataclass
class StyleCustomerBlock:
    product_id: str
    last_day_sales: int
    customers: list[CustomerSeries] = field(default_factory=list)


@dataclass
class StyleSeries:
    product_id: str
    daily_sales: dict[date, int]
    total_sales: int


def _trim_row(row: Sequence[object]) -> list[object]:
    cells = list(row)
    while cells and (cells[-1] is None or cells[-1] == ""):
        cells.pop()
    return cells


def _parse_date(value: object, row_number: int, date_formats: Iterable[str]) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        text = value.strip()
        for fmt in date_formats:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
    raise RowParseError(row_number, "date", value)


def _parse_quantity(value: object, row_number: int) -> int:
    if isinstance(value, bool):
        raise RowParseError(row_number, "quantity", value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise RowParseError(row_number, "quantity", value)


def _cell_text(value: object) -> str:
    return "" if value is None else str(value).strip()


def read_sales_records(
    file_path: Path,
    date_formats: Sequence[str] = AppConfig.date_formats,
    min_cells: int = MIN_ROW_CELLS,
) -> list[SaleRecord]:
    """
    Read the first worksheet of ``file_path`` into sale records.
    
    The header row and rows with fewer than ``min_cells`` filled cells are
    skipped. The styles sheet reads with ``STYLE_MIN_ROW_CELLS``.
    
    Raises:
        WorkbookReadError: If the file cannot be opened as a workbook
        EmptyWorkbookError: If the workbook has no worksheets
        RowParseError: If a data row has an unreadable date or quantity
    """
    try:
        workbook = load_workbook(file_path, read_only=True, data_only=True)
    except Exception as exc:
        raise WorkbookReadError("error opening workbook", details=str(exc), file_path=file_path) from exc
    
    try:
        if not workbook.sheetnames:
            raise EmptyWorkbookError(file_path=file_path)
        sheet = workbook[workbook.sheetnames[0]]
        
        records: list[SaleRecord] = []
        for row_number, row in enumerate(sheet.iter_rows(values_only=True), start=1):
            if row_number == 1:
                continue
            cells = _trim_row(row)
            if len(cells) < min_cells:
                continue
            records.append(SaleRecord(
                date=_parse_date(cells[DATE_COLUMN], row_number, date_formats),
                customer=_cell_text(cells[CUSTOMER_COLUMN]),
                product_id=_cell_text(cells[PRODUCT_COLUMN]),
                quantity=_parse_quantity(cells[QUANTITY_COLUMN], row_number),
            ))
    finally:
        workbook.close()
    
    logger.info("read %d sale records from %s", len(records), file_path)
    return records


# ==================== Statistics ====================

def calculate_daily_stats(records: list[SaleRecord], min_history_days: int = 7) -> list[ProductDailyStat]:
    """
    Per-product sales of the latest day and the trailing week.
    
    ``weekly_compare`` is the 7-day total ending on the latest day minus the
    7-day total ending the day before.
    
    Raises:
        NoSaleRecordsError: If there are no records at all
        InsufficientDataError: If the records span fewer than ``min_history_days`` days
    """
    if not records:
        raise NoSaleRecordsError()
    
    latest = max(record.date for record in records)
    earliest = min(record.date for record in records)
    latest_end = datetime.combine(latest.date(), datetime.max.time()).replace(microsecond=0)
    days = math.ceil((latest_end - earliest).total_seconds() / 86400)
    
    if days < min_history_days:
        raise InsufficientDataError(
            f"insufficient data: at least {min_history_days} days of sales are required, "
            f"got {earliest:%Y-%m-%d} to {latest:%Y-%m-%d} ({days} days)",
            days=days,
        )
    logger.debug("data range %s to %s (%d days)", f"{earliest:%Y-%m-%d}", f"{latest:%Y-%m-%d}", days)
    
    sales: dict[str, dict[date, int]] = defaultdict(lambda: defaultdict(int))
    for record in records:
        sales[record.product_id][record.day] += record.quantity
    
    latest_day = latest.date()
    stats = []
    for product_id, by_day in sales.items():
        window = [by_day.get(latest_day - timedelta(days=offset), 0) for offset in range(8)]
        daily = window[0]
        current_week = sum(window[:7])
        previous_week = sum(window[1:8])
        compare = current_week - previous_week
        if daily == 0 and current_week == 0 and compare == 0:
            continue
        stats.append(ProductDailyStat(product_id, daily, current_week, compare))
    
    stats.sort(key=lambda stat: (-stat.daily_sales, stat.product_id))
    return stats


def calculate_customer_stats(records: list[SaleRecord], min_quantity: int = 10) -> list[ProductCustomerBlock]:
    """Latest-day quantities per product and customer, biggest products first."""
    if not records:
        return []
    latest_day = max(record.day for record in records)
    
    sales: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for record in records:
        if record.day == latest_day:
            sales[record.product_id][record.customer] += record.quantity
    
    blocks = []
    for product_id, customers in sales.items():
        block = ProductCustomerBlock(
            product_id=product_id,
            customers=sorted(customers.items(), key=lambda item: (-item[1], item[0])),
        )
        if block.total >= min_quantity:
            blocks.append(block)
    
    blocks.sort(key=lambda block: (-block.total, block.product_id))
    return blocks


def calculate_style_customer_stats(
    records: list[SaleRecord],
    min_latest_quantity: int = 10,
    min_customer_total: int = 20,
) -> tuple[list[StyleCustomerBlock], Optional[date], Optional[date]]:
    """
    Per-product, per-customer daily quantities.
    
    Returns:
        Tuple of (blocks, first day, last day). The day range covers every
        record, including customers and products filtered out of the blocks.
    """
    if not records:
        return [], None, None
    first_day = min(record.day for record in records)
    last_day = max(record.day for record in records)
    
    sales: dict[str, dict[str, dict[date, int]]] = defaultdict(lambda: defaultdict(lambda: defaultdict(int)))
    for record in records:
        sales[record.product_id][record.customer][record.day] += record.quantity
    
    blocks = []
    for product_id, customers in sales.items():
        last_day_sales = 0
        series = []
        for customer, by_day in customers.items():
            total = sum(by_day.values())
            last_day_sales += by_day.get(last_day, 0)
            if total >= min_customer_total:
                series.append(CustomerSeries(customer, dict(by_day), total))
        if last_day_sales >= min_latest_quantity:
            series.sort(key=lambda item: (-item.total_sales, item.customer))
            blocks.append(StyleCustomerBlock(product_id, last_day_sales, series))
    
    blocks.sort(key=lambda block: (-block.last_day_sales, block.product_id))
    return blocks, first_day, last_day


def calculate_style_stats(
    records: list[SaleRecord],
    min_latest_quantity: int = 10,
) -> tuple[list[StyleSeries], list[date]]:
    """
    Daily quantities per product for every date present in the data.
    
    Returns:
        Tuple of (series sorted by latest-day quantity, sorted list of dates)
    """
    if not records:
        return [], []
    
    by_product: dict[str, dict[date, int]] = defaultdict(lambda: defaultdict(int))
    for record in records:
        by_product[record.product_id][record.day] += record.quantity
    
    dates = sorted({record.day for record in records})
    latest_day = dates[-1]
    
    series = [
        StyleSeries(product_id, dict(by_day), sum(by_day.values()))
        for product_id, by_day in by_product.items()
        if by_day.get(latest_day, 0) >= min_latest_quantity
    ]
    series.sort(key=lambda item: (-item.daily_sales.get(latest_day, 0), -item.total_sales, item.product_id))
    return series, dates


# ==================== Report Writing ====================

def _write_header(sheet, titles: Sequence[str]) -> None:
    sheet.append(list(titles))
    for cell in sheet[1]:
        cell.font = HEADER_FONT


def _merge_product_cells(sheet, start_row: int, end_row: int) -> None:
    if end_row > start_row:
        sheet.merge_cells(start_row=start_row, start_column=1, end_row=end_row, end_column=1)
        sheet.cell(row=start_row, column=1).alignment = Alignment(vertical="center")


def write_daily_sheet(workbook: Workbook, title: str, stats: list[ProductDailyStat]) -> None:
    sheet = workbook.create_sheet(title)
    _write_header(sheet, ["Product", "Latest day", "7-day sales", "7-day change"])
    for stat in stats:
        sheet.append([stat.product_id, stat.daily_sales, stat.weekly_sales, stat.weekly_compare])


def write_customer_sheet(workbook: Workbook, title: str, blocks: list[ProductCustomerBlock]) -> None:
    sheet = workbook.create_sheet(title)
    _write_header(sheet, ["Product", "Customer", "Quantity"])
    row = 2
    for block in blocks:
        start_row = row
        for customer, quantity in block.customers:
            sheet.append([block.product_id, customer, quantity])
            row += 1
        _merge_product_cells(sheet, start_row, row - 1)


def write_style_customer_sheet(
    workbook: Workbook,
    title: str,
    blocks: list[StyleCustomerBlock],
    first_day: Optional[date],
    last_day: Optional[date],
) -> None:
    sheet = workbook.create_sheet(title)
    if first_day is not None and last_day is not None:
        span = [first_day + timedelta(days=offset) for offset in range((last_day - first_day).days + 1)]
    else:
        span = []
    _write_header(sheet, ["Product", "Customer", *[f"{day:%m/%d}" for day in span], "Total"])
    
    row = 2
    for block in blocks:
        start_row = row
        for series in block.customers:
            sheet.append([
                block.product_id,
                series.customer,
                *[series.daily_sales.get(day) for day in span],
                series.total_sales,
            ])
            row += 1
        _merge_product_cells(sheet, start_row, row - 1)


def write_style_sheet(workbook: Workbook, title: str, series: list[StyleSeries], dates: list[date]) -> None:
    sheet = workbook.create_sheet(title)
    _write_header(sheet, ["Product", *[f"{day:%m/%d}" for day in dates], "Total"])
    for item in series:
        sheet.append([item.product_id, *[item.daily_sales.get(day) for day in dates], item.total_sales])
    sheet.column_dimensions[get_column_letter(1)].width = 18


class SalesAnalyzer:
    """
    Builds the report workbook from a raw sales export.
    
    Example:
        analyzer = SalesAnalyzer(AppConfig())
        analyzer.analyze(Path("sales.xlsx"), Path("sales_analyzed.xlsx"),
                         progress=lambda pct, label: print(pct, label))
    """
    
    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()
    
    def analyze(
        self,
        input_path: Path,
        output_path: Path,
        progress: Optional[ProgressCallback] = None,
        today: Optional[datetime] = None,
    ) -> Path:
        """
        Analyze ``input_path`` and write the report to ``output_path``.
        
        Args:
            input_path: Raw sales workbook
            output_path: Destination of the report workbook
            progress: Optional callback receiving (percent, label)
            today: Date used for sheet names (defaults to now)
            
        Returns:
            The output path
        """
        report = progress or (lambda percent, label: None)
        now = today or datetime.now()
        cfg = self.config
        
        report(10, "daily sales: reading workbook")
        records = read_sales_records(input_path, cfg.date_formats)
        
        workbook = Workbook()
        workbook.remove(workbook.active)
        
        report(20, "daily sales: analyzing data")
        daily = calculate_daily_stats(records, cfg.min_history_days)
        write_daily_sheet(workbook, f"{now:%m.%d} sales", daily)
        report(25, "daily sales: sheet written")
        
        report(35, "customer sales: analyzing data")
        customers = calculate_customer_stats(records, cfg.customer_min_quantity)
        report(40, "customer sales: writing data")
        write_customer_sheet(workbook, f"{now:%m.%d} customers", customers)
        
        report(70, "product + customer sales: analyzing data")
        style_customers, first_day, last_day = calculate_style_customer_stats(
            records, cfg.style_min_latest_quantity, cfg.style_customer_min_total
        )
        write_style_customer_sheet(workbook, f"{now:%m} styles+customers", style_customers, first_day, last_day)
        
        report(90, "product sales: analyzing data")
        style_records = read_sales_records(input_path, cfg.date_formats, min_cells=STYLE_MIN_ROW_CELLS)
        styles, dates = calculate_style_stats(style_records, cfg.style_min_latest_quantity)
        write_style_sheet(workbook, f"{now:%m} styles", styles, dates)
        
        workbook.active = 0
        workbook.save(output_path)
        report(100, "done")
        logger.info("report written to %s", output_path)
        return output_path
