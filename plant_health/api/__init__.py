# 📄 File: plant_health/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# The front door of the app's web interface: routes, health checks and request guards.
# 🧪 Purpose (Technical Summary):
# API package holding the versioned router aggregation, health endpoints and middleware.
# 🔗 Dependencies:
# FastAPI, Starlette
# 🔄 Connected Modules / Calls From:
# plant_health.main
