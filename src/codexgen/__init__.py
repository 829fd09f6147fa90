"""
Codex App Generator Engine

Resolves a scaffolding configuration by interviewing the user through a
phased graph of conditional questions, persists it for reuse, and composes
project manifests from template fragments.

ARCHITECTURAL GUARANTEE:
------------------------
The resolution engine contains ZERO knowledge of:
    - How prompts are rendered
    - Package managers, git or GitHub
    - Editor, linter or test-runner file generation

Those are collaborators that consume the resolved AnswerSet.
"""

__version__ = "0.1.0"
