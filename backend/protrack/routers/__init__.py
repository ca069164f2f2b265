from protrack.routers import (
    actual_entries,
    approvals,
    auth,
    crushing,
    dashboard,
    demand,
    health,
    job_cards,
    master_data,
)

# Mounted under the API prefix, in the order the pipeline runs.
API_ROUTERS = (
    auth.router,
    dashboard.router,
    demand.router,
    job_cards.router,
    actual_entries.router,
    approvals.router,
    crushing.router,
    master_data.router,
)

__all__ = ["API_ROUTERS", "health"]
