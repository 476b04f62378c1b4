"""Console configuration read from environment variables."""

import os


class ConsoleConfig:
    """Centralized console configuration."""

    # Tables every listing page renders with
    PAGE_SIZE = int(os.environ.get("CONSOLE_PAGE_SIZE", "15"))

    # Collection names in the remote document store
    EQUIPMENT_TABLE = "equipment"
    EQUIPMENT_CATEGORIES_TABLE = "equipment_categories"
    EQUIPMENT_CATALOG_TABLE = "equipment_catalog"
    SALES_ITEMS_TABLE = "sales_items"
    USED_GEAR_TABLE = "used_gear"
    USERS_TABLE = "users"
    NOTIFICATIONS_TABLE = "notifications"


def get_page_size() -> int:
    """Get the configured page size, re-reading the environment."""
    return int(os.environ.get("CONSOLE_PAGE_SIZE", str(ConsoleConfig.PAGE_SIZE)))
