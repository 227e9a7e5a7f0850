"""
Recipe matching engine.

Responsibilities:
- Normalize the user's ingredient tokens.
- Find recipes whose primary ingredients overlap those tokens.
- Apply hard filters (difficulty, prep time, dietary restrictions).
- Rank survivors deterministically and return them as an immutable tuple.

The engine is a pure function of (catalog snapshot, query). It never
loads, caches or mutates the catalog.
"""
