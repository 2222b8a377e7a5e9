"""Test suite for the workflow graph system.

Organized into:

1. Definition tests (test_definition.py)
   - Parsing, loading and structural validation
2. Context tests (test_context.py)
   - Snapshot isolation and the shared-exclusive lock
3. Template tests (test_templates.py)
   - Template resolution and comparison semantics
4. Registry tests (test_registry.py)
   - Type dispatch and config validation
5. Engine tests (test_engine.py)
   - Traversal, fan-out, failure policy and budgets
6. Node tests (nodes/)
   - Start, condition and document store nodes
"""
