# Routes package init
"""
ItemDrop Backend - API Routes Package
=======================================

Route Inventory:
    - ingest.py:  POST /api/ingest   (store a submitted item)
    - health.py:  GET  /health       (service health check)

Routes stay thin: extract the request, call a service, shape the response.
"""
