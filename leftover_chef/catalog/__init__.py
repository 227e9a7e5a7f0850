"""
Recipe catalog package.

Responsibilities:
- Read the raw recipe file shipped with the service.
- Normalize it into the canonical recipe table.
- Serve immutable catalog snapshots to the matching engine.
- Hold recipes users chose to save.
"""
