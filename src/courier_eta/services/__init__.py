"""Engine services: validation, normalization, distance, tracking and reconciliation."""
