# 📄 File: plant_health/modules/plant_diagnosis/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes everything about diagnosing plants: uploading a photo, asking the AI what is wrong,
# building a treatment plan and keeping track of which steps are done.
# 🧪 Purpose (Technical Summary):
# Package initialization for the plant diagnosis module, laid out as domain, application,
# infrastructure and presentation layers with a CQRS application layer.
# 🔗 Dependencies:
# FastAPI, SQLAlchemy, pydantic, aiohttp, supabase, plant_health.shared
# 🔄 Connected Modules / Calls From:
# plant_health.main, plant_health.api.v1.router

"""
Plant Diagnosis Module

Upload-diagnose-persist pipeline and the records it produces:
- Object store gateway for plant photos
- Diagnosis oracle client (vision model, remote worker, local stand-ins)
- Treatment plan deriver
- Record store for plants and treatment steps

Architecture follows Domain-Driven Design:
- Domain: Entities, repository interfaces, gateway ports, pure services, events
- Application: Commands, queries, handlers and the upload pipeline
- Infrastructure: SQLAlchemy persistence, HTTP oracles, Supabase storage adapter
- Presentation: API endpoints and request/response schemas
"""

__version__ = "1.0.0"
