"""LinkVault — personal link bookmarking.

A FastAPI backend for registering users, issuing bearer tokens and
managing each user's list of titled URLs, plus a small client package
(API client, session store, dashboard view-model, CLI) that talks to it.
"""

__version__ = "0.1.0"
