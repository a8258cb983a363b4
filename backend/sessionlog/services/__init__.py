# Services package init
"""
SessionLog Backend — Services Layer
=====================================

What:  Request-handling logic between routes (HTTP) and the database.

Service Inventory:
    - store.py:               PersistenceStore protocol + SqlAlchemyStore
    - patching.py:            JSON-Patch application (PatchResult) and
                              protected-field stripping
    - resource_controller.py: ResourceController (index/show/create/upsert/
                              patch/destroy)
"""
