# Routes package init
"""
Snippet Manager Backend — API Routes Package
==============================================

Route Inventory:
    - snippets.py: GET/POST      /api/snippets
                   GET/PUT/DELETE /api/snippets/{id}
    - ai.py:       POST /api/ai/suggest-tags
                   POST /api/ai/explain-code
                   POST /api/ai/generate-description
    - auth.py:     POST /api/auth/signup | login | logout | reset-password
    - health.py:   GET  /health (no auth)

Routes are thin: authenticate, validate, call one service, shape the
status code and headers. Business logic belongs in services.
"""
