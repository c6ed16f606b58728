"""Integration tests for microtext editing.

These tests run the editor's components together against real files in
temporary directories and, for publishing, a real git repository. They
bridge the gap between isolated unit tests and CLI usage.

Test Coverage:
- Home scenario: direct write, draft, sync and array edits on disk
- Publishing: one commit per publish, content files only

Requirements:
- A git executable on PATH (publish tests are skipped without one)
"""
