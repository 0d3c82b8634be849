"""Shared test fixtures and configuration.

Sets up fake environment variables so src.config loads cleanly, and provides
an in-memory FakeSheet that behaves like the leftmost tab of a spreadsheet.
"""

import json
import os
import re

# Patch env vars BEFORE any src imports
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:fake-token-for-tests")
os.environ.setdefault("GOOGLE_SHEETS_ID", "fake-sheet-id")
os.environ.setdefault(
    "GOOGLE_SERVICE_ACCOUNT",
    json.dumps({"type": "service_account", "client_email": "bot@test.iam.gserviceaccount.com"}),
)

import pytest

from src.core.registry import Registry
from src.data.models import FixedOffset, HeaderSearch, Identity, SheetInfo

_RANGE_RE = re.compile(r"^'(?P<title>(?:[^']|'')*)'!(?P<c1>[A-Z])(?P<r1>\d+)(?::(?P<c2>[A-Z])(?P<r2>\d+))?$")


class FakeSheet:
    """In-memory SheetPort: a grid of string cells addressed by A1 ranges.

    read_range mimics the Sheets API by dropping trailing empty cells and
    trailing empty rows.
    """

    def __init__(self, rows=None, title="Todos", sheet_id=0):
        self.sheet = SheetInfo(title=title, sheet_id=sheet_id)
        # rows[i] is absolute row i + 1, columns start at A
        self.rows = [list(r) for r in (rows or [])]
        self.calls = []

    def _parse(self, a1_range):
        match = _RANGE_RE.match(a1_range)
        assert match, f"bad range {a1_range!r}"
        assert match["title"].replace("''", "'") == self.sheet.title
        c1, r1 = ord(match["c1"]) - ord("A"), int(match["r1"])
        c2 = ord(match["c2"]) - ord("A") if match["c2"] else c1
        r2 = int(match["r2"]) if match["r2"] else r1
        return c1, r1, c2, r2

    def cell(self, row, col):
        """Value at absolute row (1-based) and column letter."""
        idx = ord(col) - ord("A")
        if row - 1 < len(self.rows) and idx < len(self.rows[row - 1]):
            return self.rows[row - 1][idx]
        return ""

    async def get_leftmost_sheet(self):
        self.calls.append(("get_leftmost_sheet",))
        return self.sheet

    async def read_range(self, a1_range):
        self.calls.append(("read_range", a1_range))
        c1, r1, c2, r2 = self._parse(a1_range)
        out = []
        for r in range(r1, r2 + 1):
            row = [self.cell(r, chr(ord("A") + c)) for c in range(c1, c2 + 1)]
            while row and row[-1] == "":
                row.pop()
            out.append(row)
        while out and not out[-1]:
            out.pop()
        return out

    async def write_range(self, a1_range, values):
        self.calls.append(("write_range", a1_range, values))
        c1, r1, _, _ = self._parse(a1_range)
        for dr, row_values in enumerate(values):
            r = r1 + dr
            while len(self.rows) < r:
                self.rows.append([])
            row = self.rows[r - 1]
            for dc, value in enumerate(row_values):
                while len(row) <= c1 + dc:
                    row.append("")
                row[c1 + dc] = value

    async def insert_rows(self, sheet_id, at_row, count=1):
        self.calls.append(("insert_rows", sheet_id, at_row, count))
        assert sheet_id == self.sheet.sheet_id
        while len(self.rows) < at_row - 1:
            self.rows.append([])
        for _ in range(count):
            self.rows.insert(at_row - 1, [])


def header_sheet():
    """Two tables: alice's header at row 3, bob's header at row 10."""
    rows = [[] for _ in range(12)]
    rows[2] = ["", "Purpose", "Goal", "Status"]
    rows[3] = ["", "Write report", "by Monday", ""]
    rows[4] = ["", "Old task", "", "Done"]
    rows[5] = ["", "   ", "orphan goal", ""]
    rows[6] = ["", "Call mom", "", "pending"]
    rows[9] = ["", "PURPOSE (what)", "Goals", "Status?"]
    rows[10] = ["", "Bob task", "", ""]
    return rows


@pytest.fixture
def header_registry():
    return Registry([
        Identity(username="alice", location=HeaderSearch(start=1, end=8), aliases=("al",)),
        Identity(username="bob", location=HeaderSearch(start=8, end=15), aliases=("bobby",)),
    ])


@pytest.fixture
def fixed_registry():
    return Registry([
        Identity(username="alice", location=FixedOffset(start_row=4), aliases=("al",)),
        Identity(username="bob", location=FixedOffset(start_row=12)),
    ])


@pytest.fixture
def fake_sheet():
    return FakeSheet(header_sheet())


@pytest.fixture
def make_sheet():
    """Factory for FakeSheet instances with custom rows."""
    return FakeSheet
