"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL (e.g. TRUNCATE).
"""
# All tables that exist in the DB. Must match models and migrations.
ALL_TABLE_NAMES = ("kv_entries",)

# Tables cleared when resetting scheduler state (TRUNCATE).
STORE_TABLE_NAMES = ("kv_entries",)
