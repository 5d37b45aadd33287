"""Infrastructure layer: content store, ledger, local cache, accounts.

This layer depends on stdlib and third-party libs (SQLAlchemy, httpx, web3).
It must never import from services, commands, or output.
"""
