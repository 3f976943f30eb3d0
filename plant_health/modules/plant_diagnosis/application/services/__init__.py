"""Application services: the upload-diagnose-persist pipeline."""
