"""Application wiring: controller, task runner, navigation stack and flows."""
