"""Tests for the MCP tool functions (called directly, no transport)."""

import asyncio

import pytest

pytest.importorskip("mcp")

from freelancetax.mcp import server  # noqa: E402


def run(coro):
    return asyncio.run(coro)


def test_add_then_list(isolated_env):
    added = run(server.add_record(amount=1200, description="Subscription",
                                  record_date="2026-03-04", record_type="income"))
    assert added["record"]["amount"] == 1200

    listed = run(server.list_records(year=2026, month=3, record_type=None, limit=50))
    assert listed["count"] == 1
    assert listed["total_amount"] == 1200
    assert listed["records"][0]["description"] == "Subscription"


def test_add_validation_errors(isolated_env):
    result = run(server.add_record(amount=-1, description="", record_date="04/03/2026",
                                   record_type="income"))
    assert result["record"] is None
    assert len(result["errors"]) == 3


def test_list_month_without_year(isolated_env):
    result = run(server.list_records(year=None, month=3, record_type=None, limit=50))
    assert "error" in result
    assert result["records"] == []


def test_summary(isolated_env):
    run(server.add_record(amount=1000, description="Sessions", record_date="2026-03-04",
                          record_type="income"))

    result = run(server.get_tax_summary(reference_date="2026-03-15"))
    assert result["has_records"] is True
    assert result["summary"]["net_income"] == pytest.approx(737.35)


def test_summary_bad_date(isolated_env):
    result = run(server.get_tax_summary(reference_date="March"))
    assert result["summary"] is None
    assert "error" in result


@pytest.mark.parametrize("limit", [0, -1])
def test_list_rejects_non_positive_limit(isolated_env, limit):
    run(server.add_record(amount=100, description="Sessions", record_date="2026-03-04",
                          record_type="income"))

    result = run(server.list_records(year=None, month=None, record_type=None, limit=limit))
    assert "limit must be at least 1" in result["error"]
    assert result["records"] == []
