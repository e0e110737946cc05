"""Engine components.

- Settings loaded from the environment / .env
- Structured logging
- Injectable clocks
- The workflow execution core (`rock_workflow.engine.workflow`)
- A small CLI surface
"""
