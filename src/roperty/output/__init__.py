"""Output layer — turns ServiceResult into text for humans or machines."""
