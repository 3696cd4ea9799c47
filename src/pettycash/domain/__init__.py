"""Domain layer for pettycash application.

Services are imported lazily: the database layer imports
``pettycash.domain.entities`` while the services import the database layer.
"""

_SERVICES = {
    "AccountService": "pettycash.domain.account",
    "LedgerService": "pettycash.domain.ledger",
    "BalanceMutator": "pettycash.domain.mutator",
    "ReportService": "pettycash.domain.reports",
    "SessionContext": "pettycash.domain.session",
    "BalanceRefresher": "pettycash.domain.session",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
