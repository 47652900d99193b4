# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas for files, folders and templates
# - constructor.py: Message constructor state and preview rendering
# - services/: Storage, file, content, folder and template services
#
# Routers stay thin and delegate to the services here.
# =============================================================================
