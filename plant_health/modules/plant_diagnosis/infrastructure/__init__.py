# 📄 File: plant_health/modules/plant_diagnosis/infrastructure/__init__.py
# 🧭 Purpose (Layman Explanation):
# The parts that talk to the outside world: the database, the photo storage and the AI service.
# 🧪 Purpose (Technical Summary):
# Infrastructure adapters implementing the domain's repository interface and gateway ports.
# 🔗 Dependencies:
# SQLAlchemy, aiohttp (through the shared APIClient), supabase (through the shared storage client)
# 🔄 Connected Modules / Calls From:
# plant_diagnosis.presentation.dependencies
