"""Financial figures derived from events, for dashboards and exports.

All functions are pure. Totals are always recomputed from the projection
inputs (tickets, price, cost categories); stored totals are ignored. An
event without a sales projection counts as zero everywhere.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from planner.domain import Costs, Event, EventDraft, SalesProjection

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class FinancialKpis:
    revenue: Decimal = ZERO
    costs: Decimal = ZERO
    profit: Decimal = ZERO
    margin: Decimal = ZERO


@dataclass(frozen=True)
class EventRevenue:
    """One row of the per-event comparison chart."""

    event_id: str
    name: str
    revenue: Decimal
    costs: Decimal
    profit: Decimal


def profit_margin(profit: Decimal, revenue: Decimal) -> Decimal:
    """Profit as a percentage of revenue, rounded half-up to 2 places; 0 without revenue."""
    if revenue == 0:
        return ZERO.quantize(CENT)
    return (Decimal(profit) / Decimal(revenue) * HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)


def _projection(event: EventDraft) -> SalesProjection:
    if event.sales_projection is None:
        return SalesProjection()
    return event.sales_projection.with_totals()


def event_kpis(event: EventDraft) -> FinancialKpis:
    projection = _projection(event)
    return FinancialKpis(
        revenue=projection.total_revenue,
        costs=projection.total_costs,
        profit=projection.projected_profit,
        margin=profit_margin(projection.projected_profit, projection.total_revenue),
    )


def aggregate_kpis(events: Iterable[EventDraft]) -> FinancialKpis:
    """Sum revenue, costs and profit; the margin is taken on the sums."""
    revenue = costs = profit = ZERO
    for event in events:
        kpis = event_kpis(event)
        revenue += kpis.revenue
        costs += kpis.costs
        profit += kpis.profit
    return FinancialKpis(revenue=revenue, costs=costs, profit=profit, margin=profit_margin(profit, revenue))


def cost_breakdown(events: Iterable[EventDraft]) -> Costs:
    """Sum each cost category across events."""
    ticketing = accommodation = fuel = access_control = ZERO
    for event in events:
        costs = _projection(event).costs
        ticketing += costs.ticketing
        accommodation += costs.accommodation
        fuel += costs.fuel
        access_control += costs.access_control
    return Costs(
        ticketing=ticketing,
        accommodation=accommodation,
        fuel=fuel,
        access_control=access_control,
    )


def revenue_by_event(events: Iterable[Event]) -> list[EventRevenue]:
    rows = []
    for event in events:
        kpis = event_kpis(event)
        rows.append(
            EventRevenue(
                event_id=str(event.id),
                name=event.name,
                revenue=kpis.revenue,
                costs=kpis.costs,
                profit=kpis.profit,
            )
        )
    return rows
