"""
Command Line Interface Package

Unified CLI over the JSON-backed obligation stores.

Command Structure:
- obligations: Main entry point with utility commands (version, config)
- obligations obligation: Create, list, deactivate and delete obligations
- obligations schedule: Generate, list and inspect payment schedules
- obligations pay / ledger: Apply payments and manage ledger entries
- obligations reconcile / correct / sweep: Compare schedules with the ledger
- obligations snapshot / project / payoff: Budget snapshots and projections
"""
