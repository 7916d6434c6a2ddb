"""
Shared fixtures for the covidtrack test suite.

Sources are served from memory (or from tests/fixtures) so no test touches
the network.
"""
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

# Allow running a single test file directly without installing the package
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from covidtrack.core.exceptions import SourceFetchError
from covidtrack.data.crawlers import BaseFetcher
from covidtrack.domain import Metric

FIXTURES = Path(__file__).resolve().parent / "fixtures"

CONFIRMED_URL = "https://example.test/confirmed.csv"
DEATHS_URL = "https://example.test/deaths.csv"
RECOVERED_URL = "https://example.test/recovered.csv"


class StaticFetcher(BaseFetcher):
    """In-memory fetcher: locator -> text; unknown locators fail like a 404."""

    def __init__(self, documents: Dict[str, str]):
        self.documents = dict(documents)
        self.calls: List[str] = []

    def fetch(self, locator: str) -> str:
        self.calls.append(locator)
        if locator not in self.documents:
            raise SourceFetchError(locator, "404 Not Found")
        return self.documents[locator]


def make_csv(dates: Iterable[str], rows: Iterable[tuple]) -> str:
    """Build a wide-format CSV: rows are (province, country, *values)."""
    dates = list(dates)
    lines = [",".join(["Province/State", "Country/Region", "Lat", "Long"] + dates)]
    for province, country, *values in rows:
        if "," in country:
            country = f'"{country}"'
        lines.append(",".join([province, country, "0", "0"] + [str(v) for v in values]))
    return "\n".join(lines) + "\n"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture
def fixture_documents() -> Dict[str, str]:
    return {
        CONFIRMED_URL: read_fixture("time_series_confirmed.csv"),
        DEATHS_URL: read_fixture("time_series_deaths.csv"),
        RECOVERED_URL: read_fixture("time_series_recovered.csv"),
    }


@pytest.fixture
def sources() -> Dict[Metric, str]:
    return {
        Metric.CONFIRMED: CONFIRMED_URL,
        Metric.DEATHS: DEATHS_URL,
        Metric.RECOVERED: RECOVERED_URL,
    }
