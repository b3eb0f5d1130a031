# Services package init
"""
NutriTrack Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and Firestore (persistence).
How:   Services accept plain payloads, validate them against the record
       shapes, and return `Success` / `Failure` results. They are built once
       per app and handed to routes through FastAPI dependencies.

Service Inventory:
    - DocumentService: generic CRUD and ordered/paged/ranged queries
    - UserService: user documents at usuarios/{uid}
    - SearchHistoryService: usuarios/{uid}/historial_busqueda
    - ConsumptionHistoryService: usuarios/{uid}/historial_consumo
    - paths: collection names and id checks shared by the above

Only DocumentService talks to the client. The domain services never build a
query themselves, so swapping the store means rewriting one module.
"""
