"""
Load sample business expenses into the database.

Usage:
    python seed.py            # replace everything with the samples
    python seed.py --keep     # add the samples to the existing data
"""
from datetime import datetime

import typer

from config import EXPENSE_COLLECTION
from database import get_collection
from errors import StorageError, ValidationError
from logger import get_logger
from store import ExpenseStore

logger = get_logger(__name__)

cli = typer.Typer(add_completion=False)

SAMPLE_EXPENSES = [
    {"category": "Cloud Services", "description": "AWS EC2 Instances - Production Environment",
     "amount": 450.00, "date": datetime(2025, 1, 15), "optimizable": True, "savings": 120.00},
    {"category": "Software Licenses", "description": "Adobe Creative Cloud Team License",
     "amount": 299.99, "date": datetime(2025, 1, 20), "optimizable": True, "savings": 50.00},
    {"category": "Marketing", "description": "Google Ads Campaign - Q1",
     "amount": 800.00, "date": datetime(2025, 1, 25), "optimizable": True, "savings": 150.00},
    {"category": "Operations", "description": "Office Rent - January",
     "amount": 2500.00, "date": datetime(2025, 1, 1), "optimizable": False, "savings": 0},
    {"category": "Software Licenses", "description": "Microsoft 365 Business Premium",
     "amount": 199.00, "date": datetime(2025, 1, 10), "optimizable": True, "savings": 30.00},
    {"category": "Cloud Services", "description": "Azure Storage and Backup",
     "amount": 275.50, "date": datetime(2025, 1, 18), "optimizable": True, "savings": 80.00},
    {"category": "Human Resources", "description": "Employee Training Program",
     "amount": 1500.00, "date": datetime(2025, 1, 22), "optimizable": False, "savings": 0},
    {"category": "Marketing", "description": "Social Media Advertising",
     "amount": 350.00, "date": datetime(2025, 1, 28), "optimizable": True, "savings": 75.00},
    {"category": "Office Supplies", "description": "Stationery and Equipment",
     "amount": 180.00, "date": datetime(2025, 1, 12), "optimizable": True, "savings": 25.00},
    {"category": "Travel", "description": "Client Meeting - Business Trip",
     "amount": 650.00, "date": datetime(2025, 1, 30), "optimizable": True, "savings": 100.00},
]


def seed(store: ExpenseStore, keep: bool = False) -> int:
    if not keep:
        removed = store.clear()
        logger.info(f"Cleared {removed} existing expenses")
    inserted = store.insert_many(SAMPLE_EXPENSES)
    logger.info(f"Inserted {inserted} sample expenses")
    return inserted


@cli.command()
def main(keep: bool = typer.Option(False, "--keep", help="Keep existing expenses instead of clearing them")) -> None:
    store = ExpenseStore(get_collection(EXPENSE_COLLECTION))
    try:
        inserted = seed(store, keep=keep)
    except (StorageError, ValidationError) as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Seeded {inserted} expenses")


if __name__ == "__main__":
    cli()
