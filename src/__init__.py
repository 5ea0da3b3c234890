"""
Hashwatch source root.

Keeps one hour of hashrate history for a single AxeOS device, merging a
resumable history backfill with periodic live polls.

Layer Structure:
- Domain: Samples, retention policy, device and storage interfaces
- Application: Normalization, series store, reconciliation controller
- Infrastructure: AxeOS HTTP gateway, JSON file and MongoDB stores
- Presentation: FastAPI routers for the dashboard and health
- Shared: Logging, clock and constants
- Main: Settings, container, API app and headless runner
"""
