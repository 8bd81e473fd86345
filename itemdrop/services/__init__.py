# Services package init
"""
ItemDrop Backend - Services Layer
===================================

What:  Business logic between routes (HTTP) and persistence.

Service Inventory:
    - ObjectStore (abstract): content bucket interface
    - LocalObjectStore / S3ObjectStore: filesystem and S3-compatible backends
    - ItemService: validate → upload → insert workflow
"""
