"""
UserHub Backend — API Routes Package
======================================

Route Inventory:
    - users.py:   /api/users CRUD (GET by id is the core lookup)
    - health.py:  GET /health

Routes stay THIN: extract request data, call a business service, shape
the response. They depend on business contracts and shared DTOs only.
"""
