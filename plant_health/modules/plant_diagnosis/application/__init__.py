# 📄 File: plant_health/modules/plant_diagnosis/application/__init__.py
# 🧭 Purpose (Layman Explanation):
# The "use cases" of the plant module: what a user can ask the app to do with their plants.
#
# 🧪 Purpose (Technical Summary):
# CQRS application layer: commands, queries, their handlers and the upload pipeline.
#
# 🔗 Dependencies:
# - plant_diagnosis.domain
#
# 🔄 Connected Modules / Calls From:
# - plant_diagnosis.presentation
