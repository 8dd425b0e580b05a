import logging

from .db import SessionLocal
from .schemas import EmployeeIn
from .store import EmployeeStore

logger = logging.getLogger(__name__)

SAMPLE_EMPLOYEES = [
    EmployeeIn(name="Dan", designation="Software Developer", salary=23456.00),
    EmployeeIn(name="John Doe", designation="Engineer", salary=50000.00),
    EmployeeIn(name="Jane Smith", designation="Manager", salary=60000.00),
]


def seed_employees(store: EmployeeStore | None = None) -> int:
    """Insert the sample employees into an empty table. Returns how many were added."""
    store = store or EmployeeStore(SessionLocal)
    # Ensure tables exist
    store.ensure_schema()

    if store.read_page(1, 0):
        logger.info("Employees already exist, skipping insert")
        return 0

    for record in SAMPLE_EMPLOYEES:
        created = store.create(record)
        logger.info("Inserted employee %s (%s)", created.id, created.name)
    return len(SAMPLE_EMPLOYEES)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_employees()
