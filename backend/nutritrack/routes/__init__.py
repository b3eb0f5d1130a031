# Routes package init
"""
NutriTrack Backend — API Routes Package
========================================

Route Inventory:
    - users.py:    /users                  (user accounts)
    - history.py:  /search-history         (product searches)
                   /consumption-history    (logged consumptions)
    - health.py:   /health                 (store connectivity probe)

Routes stay thin: extract path/query/body, call one service method, turn
the result envelope into a status code. Anything else belongs in services.
"""
