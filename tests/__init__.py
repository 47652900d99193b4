# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Template Studio API:
# - test_models.py: Template, folder and file schema validation
# - test_constructor.py: Message constructor state and previews
# - test_file_tree.py / test_folder_tree.py: Tree builders
# - test_*_service.py: Services against a mocked Supabase/S3
# - test_auth.py: Token verification and auth routes
# - test_api.py: Endpoints through the FastAPI test client
#
# Run tests with: pytest
# =============================================================================
