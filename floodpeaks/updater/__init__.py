"""Update pass orchestration.

Modules
───────
  orchestrator  — incremental / backfill pass over the cache
  reporter      — run summary and CSV export
  cli           — argparse entry-point
"""
