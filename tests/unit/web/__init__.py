"""Unit tests for BuildRight web route modules.

Each route module has a corresponding test file.

Structure:
    tests/unit/web/
    ├── test_app.py                    # App wiring, error shape, health, metrics
    ├── test_auth.py                   # Session lookup
    ├── test_routes_building_codes.py  # Catalog routes
    ├── test_routes_chats.py           # Chat rename route
    └── test_routes_embeddings.py      # Embedding readiness route

Testing pattern:
    - Mount one router on a bare FastAPI app and use TestClient
    - Patch get_session with an AsyncMock context manager
    - Override require_user, or patch validate_session to test 401s
"""
