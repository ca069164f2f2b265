"""
Derived totals for production orders and job cards.

Aggregates are never updated incrementally: every call rebuilds them from the
current job card and actual entry collections, so the result depends only on
those collections and applying it twice changes nothing.
"""
from collections import defaultdict
from typing import Dict

from protrack.schemas.job_card import JobCard
from protrack.schemas.production_order import ProductionOrder, derive_status
from protrack.schemas.tracker import TrackerSnapshot


def aggregate_order(order: ProductionOrder, total_planned: float, total_made: float) -> ProductionOrder:
    # total_made is left unclamped so over-production stays visible.
    pending = max(0.0, order.target_qty - total_made)
    return order.model_copy(
        update={
            "total_planned": total_planned,
            "total_made": total_made,
            "pending": pending,
            "status": derive_status(total_made, pending),
        }
    )


def aggregate_job_card(card: JobCard, actual_made: float) -> JobCard:
    return card.model_copy(update={"actual_made": actual_made, "pending_qty": max(0.0, card.planned_qty - actual_made)})


def recompute(snapshot: TrackerSnapshot) -> TrackerSnapshot:
    made_by_card: Dict[str, float] = defaultdict(float)
    made_by_order: Dict[str, float] = defaultdict(float)
    for entry in snapshot.actual_entries:
        made_by_card[entry.job_card_ref] += entry.qty_produced
        made_by_order[entry.production_order_ref] += entry.qty_produced

    job_cards = [aggregate_job_card(card, made_by_card.get(card.serial, 0.0)) for card in snapshot.job_cards]

    planned_by_order: Dict[str, float] = defaultdict(float)
    for card in job_cards:
        planned_by_order[card.production_order_ref] += card.planned_qty

    productions = [
        aggregate_order(
            order,
            total_planned=planned_by_order.get(order.serial, 0.0),
            total_made=made_by_order.get(order.serial, 0.0),
        )
        for order in snapshot.productions
    ]

    return snapshot.model_copy(update={"productions": productions, "job_cards": job_cards})
