"""AI Workflow Helper - suggests AI assistance steps for a workflow and emails instructions."""

__version__ = "1.0.0"
