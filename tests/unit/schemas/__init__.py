"""Test package for schemas.

Contains unit tests for:
- ScheduleSlot and RequirementTemplate lookups
- Validation bounds on roster and overview models
"""
