# 📄 File: plant_health/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python that the 'plant_health' folder holds our plant doctor app, and records
# which version of the app this is.
#
# 🧪 Purpose (Technical Summary):
# Package initialization with version metadata for the Plant Health FastAPI service
# (upload -> AI diagnosis -> treatment plan pipeline).
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - plant_health.main (application entry point)
# - pyproject.toml packaging

"""
Plant Health API - photograph a plant, get a diagnosis and a treatment plan.

Users upload a plant photo, the image is stored in Supabase Storage, a vision
model diagnoses it, and the diagnosis plus a dated treatment timeline are saved
for the owner to track.
"""

__version__ = "1.0.0"
__title__ = "Plant Health API"
__description__ = "AI plant diagnosis with dated treatment plans"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
]
