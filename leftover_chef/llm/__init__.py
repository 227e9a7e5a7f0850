"""
Recipe generation layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build a prompt from the user's leftovers and constraints.
- Ask the LLM for one recipe in the catalog schema.
- Fall back to a simple template recipe when the LLM output is unusable.
"""
