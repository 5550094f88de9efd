# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the academy API:
# - test_models.py: Model validation and the inquiry state machine
# - test_*_service.py: Services against in-memory fakes (see conftest.py)
# - test_storage_service.py: Supabase Storage / S3 backends with mocked SDKs
# - test_auth.py: JWT verification and the admin guard
# - test_api.py: Endpoints through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
