"""Rich renderer for the monthly tax summary.

Transforms SDK TaxSummary output into formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from freelancetax.sdk.currency import display
from freelancetax.sdk.schemas import IncomeRecord, TaxSummary
from freelancetax.sdk.taxes import TaxRules

VAT_WARNING_PERCENT = 85


def render_tax_summary(console: Console, summary: TaxSummary, rules: TaxRules, currency: str = "EUR") -> None:
    """Render the summary cards and the monthly breakdown.

    Args:
        console: Rich Console instance
        summary: Output of compute_tax_summary()
        rules: Rules used for the summary (for rate labels)
        currency: Display currency
    """
    _render_cards(console, summary, rules, currency)
    _render_breakdown(console, summary, rules, currency)


def _render_cards(console: Console, summary: TaxSummary, rules: TaxRules, currency: str) -> None:
    """Render headline figures."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value", justify="right")

    vat_style = "red" if summary.vat_progress_percent > VAT_WARNING_PERCENT else "dark_orange"

    table.add_row("Monthly income", display(summary.total_income, currency))
    table.add_row("Expected taxes", f"[red]{display(summary.total_taxes, currency)}[/red]")
    table.add_row("Net income", f"[green]{display(summary.net_income, currency)}[/green]")
    table.add_row(
        "VAT threshold (year)",
        f"[{vat_style}]{summary.vat_progress_percent:.1f}%[/{vat_style}]"
        f"  {display(summary.vat_turnover, currency)} / {display(rules.vat_threshold, currency)}",
    )

    console.print(Panel(table, title=f"{summary.year}-{summary.month:02d}", border_style="dim"))


def _render_breakdown(console: Console, summary: TaxSummary, rules: TaxRules, currency: str) -> None:
    """Render the step-by-step monthly breakdown."""
    ss_rules = rules.social_security

    table = Table(title="Tax Breakdown (month)", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=36)
    table.add_column("Amount", justify="right", min_width=16)

    table.add_row("Gross income", display(summary.total_income, currency))
    table.add_row(
        f"  Statutory expenses ({rules.statutory_expense_rate:.0%})",
        f"- {display(summary.statutory_expenses, currency)}",
        style="dim",
    )
    table.add_row("Taxable income", display(summary.taxable_income_base, currency))
    table.add_row(
        f"  Insurance income (min {display(ss_rules.min_insurance_income, currency)})",
        display(summary.social_security_base, currency),
        style="dim",
    )
    table.add_row(
        f"  Social security ({ss_rules.rate:.1%})",
        f"[red]- {display(summary.social_security, currency)}[/red]",
    )
    table.add_row("Tax base", display(summary.tax_base, currency))
    table.add_row(
        f"  Income tax ({rules.income_tax_rate:.0%})",
        f"[red]- {display(summary.income_tax, currency)}[/red]",
    )
    table.add_row(
        "[bold green]NET INCOME[/bold green]",
        f"[bold green]{display(summary.net_income, currency)}[/bold green]",
    )

    console.print(table)


def render_records_table(console: Console, records: list[IncomeRecord], currency: str = "EUR", title: str = "Records") -> None:
    """Render ledger records with shortened ids."""
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Description")
    table.add_column("Amount", justify="right")

    for record in records:
        table.add_row(
            record.id[:8],
            record.date.isoformat(),
            record.type,
            record.description,
            display(record.amount, currency),
        )

    console.print(table)
