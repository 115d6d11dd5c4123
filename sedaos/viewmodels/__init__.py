"""ViewModel package for account-screen state and command surfaces.

Call context:
    ``sedaos/app/flows.py`` builds concrete viewmodels and binds their submit
    and load channels to use-cases running off the UI thread.

Dependencies:
    Modules in this package depend on domain types and validators only. I/O
    adapters and use-case orchestration remain outside.

Responsibilities:
    - Hold immutable form snapshots advanced by a reducer.
    - Gate submissions and apply their single result.
    - Map results to one-shot feedback and navigation intents.
"""
