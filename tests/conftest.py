"""Shared pytest fixtures for portfolio-ingest."""

import os

import pytest

QUANDL_HEADER = (
    "Date,Open,High,Low,Close,Volume,Ex-Dividend,Split Ratio,"
    "Adj. Open,Adj. High,Adj. Low,Adj. Close,Adj. Volume"
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's own PORTFOLIO_INGEST_* settings out of tests."""
    for key in list(os.environ):
        if key.startswith("PORTFOLIO_INGEST_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def quandl_csv():
    """Build the text of a Quandl WIKI-style export from (date, adj_close) pairs."""

    def _build(rows, line_end="\n"):
        lines = [QUANDL_HEADER]
        for day, adj_close in rows:
            lines.append(
                f"{day},10.0,11.0,9.5,10.5,1000.0,0.0,1.0,9.8,10.8,9.3,{adj_close},1000.0"
            )
        return line_end.join(lines) + line_end

    return _build


@pytest.fixture
def write_source(tmp_path):
    """Write source text to a file under tmp_path and return its path."""

    def _write(name, text):
        path = tmp_path / name
        path.write_text(text, newline="")
        return path

    return _write


@pytest.fixture
def sample_text():
    return (
        "date,Adj. Close\n"
        "2018-01-01,100.0\n"
        "2018-01-03,101.5\n"
        "2018-01-05,99.25\n"
    )
