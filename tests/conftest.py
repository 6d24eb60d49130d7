import pytest
from datetime import datetime, timedelta
from pathlib import Path
import sys

from openpyxl import Workbook

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

HEADER = [
    "Date", "Order", "Customer", "Product", "Color", "Size",
    "Warehouse", "Ordered", "Shipped", "Price", "Amount", "Note",
]

LATEST_DAY = datetime(2024, 3, 10, 9, 30)


def sale_row(when, customer: str, product: str, quantity) -> list:
    """Build a 12-column sales export row."""
    return [when, "SO-1", customer, product, "black", "M", "WH1", quantity, quantity, 10, 10, "ok"]


def write_workbook(path: Path, rows: list[list], header: list = HEADER) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "export"
    sheet.append(header)
    for row in rows:
        sheet.append(row)
    workbook.save(path)
    return path


def ten_day_rows() -> list[list]:
    """Ten days of sales ending on LATEST_DAY."""
    rows = []
    for offset in range(10):
        day = LATEST_DAY - timedelta(days=offset)
        rows.append(sale_row(day, "Acme", "A-100", 6))
        rows.append(sale_row(day, "Globex", "A-100", 5))
    rows.append(sale_row(LATEST_DAY, "Initech", "B-200", 12))
    rows.append(sale_row(LATEST_DAY - timedelta(days=2), "Acme", "C-300", 3))
    return rows


@pytest.fixture
def sample_workbook(tmp_path):
    """Ten-day sales export."""
    return write_workbook(tmp_path / "sales.xlsx", ten_day_rows())


@pytest.fixture
def short_workbook(tmp_path):
    """Sales export covering only three days."""
    rows = [
        sale_row(LATEST_DAY - timedelta(days=offset), "Acme", "A-100", 4)
        for offset in range(3)
    ]
    return write_workbook(tmp_path / "short.xlsx", rows)


@pytest.fixture
def app_config(tmp_path):
    from excel_analyzer.app.config import AppConfig
    return AppConfig(data_dir=tmp_path / "data")


@pytest.fixture
def mock_analyzer(mocker):
    """Mock SalesAnalyzer that reports two progress steps."""
    mock = mocker.patch("excel_analyzer.backend.local.SalesAnalyzer")
    instance = mock.return_value

    def fake_analyze(input_path, output_path, progress=None, today=None):
        progress(10, "daily sales: reading workbook")
        progress(100, "done")
        return output_path

    instance.analyze.side_effect = fake_analyze
    return instance
