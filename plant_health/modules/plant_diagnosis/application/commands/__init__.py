"""
Plant Diagnosis Commands

Write operations of the plant diagnosis module:
- UploadPlantImageCommand: upload, diagnose and save a plant
- UpdateTreatmentCommand: tick a treatment step on or off
- DeletePlantCommand: delete a plant with its treatments
- DiagnoseImageCommand: diagnose an image URL without saving
"""

from plant_health.modules.plant_diagnosis.application.commands.delete_plant import DeletePlantCommand
from plant_health.modules.plant_diagnosis.application.commands.diagnose_image import DiagnoseImageCommand
from plant_health.modules.plant_diagnosis.application.commands.update_treatment import UpdateTreatmentCommand
from plant_health.modules.plant_diagnosis.application.commands.upload_plant_image import UploadPlantImageCommand

__all__ = [
    "UploadPlantImageCommand",
    "UpdateTreatmentCommand",
    "DeletePlantCommand",
    "DiagnoseImageCommand",
]
