# 📄 File: plant_health/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a Python package holding the common tools every part of the
# Plant Health app uses, like configuration, database access, storage and logging.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for configuration, infrastructure and cross-cutting concerns.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - plant_health.main
# - plant_health.modules.plant_diagnosis

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management (settings, database, Supabase client)
- Database and storage infrastructure
- Authentication token verification
- Domain event bus
- Structured logging
"""

__all__ = []
