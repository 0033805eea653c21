"""Freelance Tax MCP Server - FastMCP implementation for ledger and tax tools."""

import logging
from datetime import date, datetime
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from freelancetax.sdk import compute_tax_summary, load_tax_rules, load_user_settings
from freelancetax.sdk import records as sdk_records

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("freelance-tax")


# --- Tools ---

@mcp.tool()
async def list_records(
    year: int | None = Field(default=None, description="Filter by year (e.g., 2026)"),
    month: int | None = Field(default=None, description="Filter by month 1-12 (requires year)"),
    record_type: str | None = Field(default=None, description="Filter by type ('income' or 'expense')"),
    limit: int = Field(default=50, ge=1, description="Maximum number of records to return (default 50)"),
) -> dict[str, Any]:
    """List ledger records, most recent entry first. Amounts are EUR."""
    try:
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got: {limit}")
        store = sdk_records.RecordStore.open()
        matches = store.filter(year=year, month=month, type_filter=record_type)

        return {
            "records": [r.model_dump(mode="json") for r in matches[:limit]],
            "count": min(len(matches), limit),
            "total_available": len(matches),
            "total_amount": sum(r.amount for r in matches),
            "filters_applied": {
                "year": year,
                "month": month,
                "type": record_type,
            },
        }

    except Exception as e:
        logger.error(f"Error listing records: {e}")
        return {"error": str(e), "records": [], "count": 0}


@mcp.tool()
async def add_record(
    amount: float = Field(description="Amount in EUR (non-negative)"),
    description: str = Field(description="What the income is for"),
    record_date: str | None = Field(default=None, description="Date YYYY-MM-DD (default: today)"),
    record_type: str = Field(default="income", description="'income' or 'expense'"),
) -> dict[str, Any]:
    """Add a record to the ledger."""
    try:
        store = sdk_records.RecordStore.open()
        record = store.add(record_date or date.today().isoformat(), amount, description, record_type)
        return {"record": record.model_dump(mode="json")}

    except sdk_records.ValidationError as e:
        return {"error": "validation failed", "errors": e.errors, "record": None}
    except Exception as e:
        logger.error(f"Error adding record: {e}")
        return {"error": str(e), "record": None}


@mcp.tool()
async def get_tax_summary(
    reference_date: str | None = Field(
        default=None,
        description="Any day of the month to summarize, YYYY-MM-DD (default: today)",
    ),
) -> dict[str, Any]:
    """Monthly tax breakdown (expenses, social security, income tax, net) and yearly VAT progress.

    Amounts are unrounded EUR.
    """
    try:
        ref = datetime.strptime(reference_date, "%Y-%m-%d").date() if reference_date else date.today()
        store = sdk_records.RecordStore.open()
        summary = compute_tax_summary(
            store.records(),
            reference_date=ref,
            rules=load_tax_rules(ref.year),
            settings=load_user_settings(),
        )
        return {
            "summary": summary.model_dump(),
            "has_records": bool(store.filter(year=ref.year, month=ref.month)),
        }

    except Exception as e:
        logger.error(f"Error computing summary: {e}")
        return {"error": str(e), "summary": None}


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
