# 📄 File: plant_health/modules/plant_diagnosis/domain/__init__.py
# 🧭 Purpose (Layman Explanation):
# The core rules about plants, check-up reports and treatment steps, free of any database or
# web details.
# 🧪 Purpose (Technical Summary):
# Domain layer: entities, repository interface, gateway ports, pure services and events.
# 🔗 Dependencies:
# pydantic, plant_health.shared.core.event_bus
# 🔄 Connected Modules / Calls From:
# Application, infrastructure and presentation layers

"""
Plant Diagnosis Domain Layer

Domain Models:
- DiagnosisResult (with PlantIssue, Recommendation, CareTip): validated oracle payload
- Plant / Treatment and their drafts

Domain Services:
- TreatmentPlanner: recommendations -> dated treatment steps
- care_guide: display helpers for care tips, priorities and severity
- ImageStore / DiagnosisOracle: gateway ports

Repository Interfaces:
- PlantRepository: owner-scoped plant and treatment persistence

Business Rules Enforced:
- Treatment steps are 1..N in recommendation order, one day apart
- Records of other owners behave as missing
"""
