"""
Centralized constants for the scheduler and the dispatch job.

Change job IDs, key prefixes or bucket resolution here instead of scattering literals
across main, routes and services. Intervals and retention come from config (env-driven).
"""
from trello_scheduler.config import settings

# Scheduler job IDs (must match ids used in main.py add_job)
DISPATCH_JOB_ID = "dispatch_due_actions"
STORE_PRUNE_JOB_ID = "store_prune_expired"
DISPATCH_INTERVAL_SECONDS = settings.sweep_interval_seconds
STORE_PRUNE_INTERVAL_MINUTES = settings.store_prune_interval_minutes

# Bucket resolution is fixed at one minute, same as the dispatch period
BUCKET_SECONDS = 60
BUCKET_MS = BUCKET_SECONDS * 1000
# Buckets swept per tick: current minute plus one catch-up minute behind it
CATCH_UP_MINUTES = 1

# Store key layout
ACTION_KEY_PREFIX = "schedule_"
BUCKET_KEY_PREFIX = "bucket_"
KEY_SUFFIX_LENGTH = 9

# Actions and buckets expire after this many seconds (orphans self-heal by expiry)
RETENTION_SECONDS = settings.retention_seconds
