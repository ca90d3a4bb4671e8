"""
Run the shopping database demo.

Reads a customer by account credentials, then updates it inside a
transaction. Failures are rolled back and written to the daily exception log.

Usage:
    DBMANAGER_SHOPPING_URL=sqlite:///shopping.db uv run python scripts/run_shopping_demo.py \
        account1@example.com p
"""

import sys

from dotenv import load_dotenv

from dbmanager import NOT_FOUND, ConnectionManager, DBManagerError
from dbmanager.shopping import CREATE_TABLE_SQL, CustomerDao
from dbmanager.utils import ExceptionLogger, setup_logging

load_dotenv()

CONNECTION_STRING_KEY = "shopping"
LOG_DIRECTORY = "logs"


def run(email: str, password: str) -> int:
    """Run the demo; returns the process exit code."""
    exception_logger = ExceptionLogger(LOG_DIRECTORY)

    try:
        with ConnectionManager(CONNECTION_STRING_KEY) as manager:
            manager.command_builder().with_command_text(
                CREATE_TABLE_SQL
            ).build().execute_non_query()

            customers = CustomerDao(manager)
            customer = customers.readable().fetch(email, password)
            if customer is NOT_FOUND:
                print(f"⚠️  No customer found for {email}")
                return 1
            print(f"✅ Found customer: {customer.email} ({customer.name})")

            with manager.begin_transaction() as transaction:
                try:
                    updated = customers.writable().update(customer)
                    transaction.commit()
                    print(f"✅ Transaction committed ({updated} row(s) updated)")
                except Exception as e:
                    transaction.rollback()
                    print(f"❌ Transaction failed and rolled back: {e}")
                    exception_logger.log_exception(e)
                    return 1
    except DBManagerError as e:
        print(f"❌ Failed to connect to the database: {e}")
        exception_logger.log_exception(e)
        return 1
    finally:
        print("🏁 Shopping demo finished")

    return 0


def main():
    setup_logging("shopping-demo")

    if len(sys.argv) != 3:
        print("Usage: run_shopping_demo.py <email> <password>")
        sys.exit(2)

    sys.exit(run(sys.argv[1], sys.argv[2]))


if __name__ == "__main__":
    main()
